"""
Local label generator for service orders.
Uses Pillow and python-barcode to render a Code128 label as a PNG data URL.
"""
import io
import base64
import logging
from typing import Optional
from PIL import Image, ImageDraw, ImageFont
import barcode
from barcode.writer import ImageWriter

logger = logging.getLogger(__name__)


def load_fonts():
    try:
        return (
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf', 18),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 14),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 12),
        )
    except (OSError, IOError):
        default = ImageFont.load_default()
        return default, default, default


def draw_centered(draw, y, text, font, width):
    bbox = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (bbox[2] - bbox[0])) // 2, y), text, fill='black', font=font)


def render_code128(value: str) -> Image.Image:
    code128 = barcode.get_barcode_class('code128')
    return code128(value, writer=ImageWriter()).render({
        'write_text': False,
        'module_width': 0.3,
        'module_height': 20.0,
        'quiet_zone': 2.0,
        'background': 'white',
        'foreground': 'black',
    })


def generate_service_order_label(
    os_number: str,
    customer_name: str,
    device_name: str,
    received_on: Optional[str] = None,
    width: int = 400,  # 4 inches at 100 DPI
    height: int = 200,
) -> str:
    """
    Render the label stuck on a device while it is in the shop.

    Layout, top to bottom: customer name (and received date), Code128 of the
    OS number, the OS number as text, device brand/model.

    Returns:
        Base64-encoded PNG image as data URL string
    """
    font_large, font_medium, font_small = load_fonts()
    margin = 10

    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)

    header = customer_name[:28]
    if received_on:
        header = f"{header} {received_on}"
    draw_centered(draw, 8, header, font_medium, width)

    barcode_y = 28
    available_height = height - barcode_y - 50
    barcode_img = render_code128(os_number)
    source_width, source_height = barcode_img.size
    target_width = width - 2 * margin
    scale = min(target_width / source_width, available_height / source_height)
    target_size = (int(source_width * scale), int(source_height * scale))
    barcode_img = barcode_img.resize(target_size, Image.Resampling.BILINEAR)
    img.paste(barcode_img, ((width - target_size[0]) // 2, barcode_y))

    text_y = barcode_y + target_size[1] + 4
    draw_centered(draw, text_y, os_number, font_large, width)
    draw_centered(draw, text_y + 22, device_name[:36], font_small, width)

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=False, compress_level=1)
    image_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
    buffer.close()
    img.close()
    logger.debug(f"Generated label for {os_number}")
    return f'data:image/png;base64,{image_base64}'
