"""
IMEI consultation service.

Looks up the registration status of an IMEI in an external provider when
IMEI_API_URL is configured, otherwise answers from a deterministic mock.
"""
import re
import logging
import requests
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

IMEI_PATTERN = re.compile(r'[0-9]{14,16}')

STATUS_DETAILS = {
    'clean': 'Este IMEI está livre de restrições e pode ser utilizado normalmente.',
    'restricted': 'Este IMEI possui restrições de uso em algumas operadoras devido a pendências.',
    'stolen': 'Este IMEI está registrado como roubado na base de dados da ANATEL.',
    'unknown': 'Não foi possível determinar o status.',
}

# Provider status -> local status
PROVIDER_STATUS_MAP = {
    'CLEAN': 'clean',
    'RESTRICTED': 'restricted',
    'STOLEN_LOST': 'stolen',
}


class ImeiProviderError(Exception):
    """Raised when the external provider cannot answer"""


def is_valid_imei(imei):
    return isinstance(imei, str) and bool(IMEI_PATTERN.fullmatch(imei))


def format_last_updated(moment=None):
    moment = timezone.localtime(moment or timezone.now())
    return moment.strftime('%d/%m/%Y, %H:%M:%S')


def mock_lookup(imei):
    if imei.endswith('123'):
        status = 'stolen'
    elif imei.endswith('456'):
        status = 'restricted'
    else:
        status = 'clean'
    return {
        'status': status,
        'details': STATUS_DETAILS[status],
        'last_updated': format_last_updated(),
    }


def provider_lookup(imei):
    """Query the configured provider and map its answer to the local format"""
    params = {'imei': imei}
    if settings.IMEI_API_KEY:
        params['api_key'] = settings.IMEI_API_KEY
    try:
        response = requests.get(
            settings.IMEI_API_URL,
            params=params,
            headers={'Content-Type': 'application/json'},
            timeout=settings.IMEI_API_TIMEOUT,
        )
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"IMEI provider request failed: {str(e)}")
        raise ImeiProviderError(f"Erro da API externa: {str(e)}")
    except ValueError as e:
        logger.error(f"IMEI provider returned invalid JSON: {str(e)}")
        raise ImeiProviderError('Erro da API externa: resposta inválida.')

    if not isinstance(result, dict):
        logger.error(f"IMEI provider returned unexpected payload: {result!r}")
        raise ImeiProviderError('Erro da API externa: resposta inválida.')

    status = PROVIDER_STATUS_MAP.get(result.get('status'), 'unknown')
    return {
        'status': status,
        'details': STATUS_DETAILS[status],
        'last_updated': result.get('last_updated') or format_last_updated(),
    }


def consult_imei(imei):
    if settings.IMEI_API_URL:
        return provider_lookup(imei)
    return mock_lookup(imei)
