"""
Test suite for service_orders module
Tests: Composite create/update, Kanban, Status, Quotes, Photos, Payment,
Parts, Custom fields, Print views, Label
"""
import io
import re
import shutil
import tempfile
from decimal import Decimal
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework import status
from gama.core.models import AuditLog, UserSettings
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.financials.models import FinancialTransaction
from gama.service_orders.models import ServiceOrder, ServiceOrderCustomField, ServiceOrderFieldValue


def composite_payload(**order):
    data = {
        'customer': {'name': 'Lucas Pereira', 'phone': '11977776666'},
        'device': {
            'brand': 'Xiaomi',
            'model': 'Redmi Note 12',
            'serial_number': 'RN12-0001',
            'defect_description': 'Battery drains in a couple of hours',
        },
    }
    data.update(order)
    return data


class ServiceOrderCompositeTests(TestCase):
    """Test composite create and update"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer_device_and_order(self):
        response = self.client.post('/api/v1/service-orders/', composite_payload(service_cost='120,00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = ServiceOrder.objects.get(id=response.data['id'])
        self.assertEqual(order.customer.name, 'Lucas Pereira')
        self.assertEqual(order.device.customer, order.customer)
        self.assertEqual(order.issue_description, 'Battery drains in a couple of hours')
        self.assertEqual(order.service_cost, Decimal('120.00'))
        self.assertTrue(re.match(r'^OS-\d{8}-[0-9A-F]{4}$', order.os_number))
        self.assertEqual(order.status, 'pending')

    def test_guarantee_terms_default_from_settings(self):
        UserSettings.objects.create(user=self.user, default_guarantee_terms='90 dias de garantia.')
        response = self.client.post('/api/v1/service-orders/', composite_payload(), format='json')
        self.assertEqual(response.data['guarantee_terms'], '90 dias de garantia.')

    def test_explicit_os_number_must_be_unique(self):
        order = TestDataFactory.create_service_order(self.user)
        ServiceOrder.objects.filter(pk=order.pk).update(os_number='OS-1')
        response = self.client.post('/api/v1/service-orders/', composite_payload(os_number='OS-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('os_number', response.data)

    def test_invalid_nested_data_creates_nothing(self):
        payload = composite_payload()
        payload['device']['defect_description'] = 'short'
        response = self.client.post('/api/v1/service-orders/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('device', response.data)
        self.assertFalse(self.user.customers.exists())

    def test_required_custom_field(self):
        field = ServiceOrderCustomField.objects.create(
            user=self.user, field_name='Capinha', field_type='text', is_required=True
        )
        response = self.client.post('/api/v1/service-orders/', composite_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('field_values', response.data)

        response = self.client.post('/api/v1/service-orders/', composite_payload(
            field_values=[{'custom_field': field.id, 'value': 'Sim'}]
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(ServiceOrderFieldValue.objects.get(custom_field=field).value, 'Sim')

    def test_update_customer_device_and_order(self):
        order_id = self.client.post('/api/v1/service-orders/', composite_payload(), format='json').data['id']
        response = self.client.patch(f'/api/v1/service-orders/{order_id}/', {
            'customer': {'phone': '1130303030'},
            'device': {'model': 'Redmi Note 13'},
            'service_details': 'Battery replaced',
            'status': 'ready',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order = ServiceOrder.objects.get(id=order_id)
        self.assertEqual(order.customer.phone, '1130303030')
        self.assertEqual(order.device.model, 'Redmi Note 13')
        self.assertEqual(order.status, 'ready')
        self.assertTrue(AuditLog.objects.filter(model_name='ServiceOrder', action='update').exists())

    def test_list_filters(self):
        TestDataFactory.create_service_order(self.user, status='pending')
        TestDataFactory.create_service_order(self.user, status='ready')
        TestDataFactory.create_service_order(TestDataFactory.create_user(), status='ready')
        response = self.client.get('/api/v1/service-orders/?status=ready')
        self.assertEqual(len(response.data), 1)

    def test_delete_returns_parts_to_stock(self):
        order = TestDataFactory.create_service_order(self.user)
        item = TestDataFactory.create_inventory_item(self.user, quantity=3)
        self.client.post(f'/api/v1/service-orders/{order.id}/items/', {'inventory_item': item.id, 'quantity_used': 2}, format='json')
        response = self.client.delete(f'/api/v1/service-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 3)


class KanbanAndStatusTests(TestCase):
    """Test kanban grouping and status changes"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_kanban_columns(self):
        TestDataFactory.create_service_order(self.user, status='pending')
        TestDataFactory.create_service_order(self.user, status='pending')
        TestDataFactory.create_service_order(self.user, status='completed')
        response = self.client.get('/api/v1/service-orders/kanban/')
        columns = {column['status']: column['count'] for column in response.data['columns']}
        self.assertEqual(columns, {'pending': 2, 'in_progress': 0, 'ready': 0, 'completed': 1, 'cancelled': 0})

    def test_completing_sets_finalized_at_once(self):
        order = TestDataFactory.create_service_order(self.user)
        url = f'/api/v1/service-orders/{order.id}/status/'
        self.client.post(url, {'status': 'completed'}, format='json')
        order.refresh_from_db()
        first_finalized = order.finalized_at
        self.assertIsNotNone(first_finalized)
        self.client.post(url, {'status': 'ready'}, format='json')
        self.client.post(url, {'status': 'completed'}, format='json')
        order.refresh_from_db()
        self.assertEqual(order.finalized_at, first_finalized)
        self.assertIsNotNone(order.warranty_expires_on)

    def test_invalid_status(self):
        order = TestDataFactory.create_service_order(self.user)
        response = self.client.post(f'/api/v1/service-orders/{order.id}/status/', {'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class QuoteTests(TestCase):
    """Test quote approval links"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_service_order(self.user)

    def request_approval(self):
        return self.client.post(f'/api/v1/service-orders/{self.order.id}/request-approval/')

    def test_request_approval(self):
        response = self.request_approval()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['approval_status'], 'pending_approval')
        self.assertIn(str(self.order.quote_token), response.data['quote_url'])

    def test_public_quote_detail(self):
        self.client.logout()
        response = self.client.get(f'/api/v1/quotes/{self.order.quote_token}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['os_number'], self.order.os_number)
        self.assertNotIn('customer_signature', response.data)

    def test_approve_requires_signature(self):
        self.request_approval()
        self.client.logout()
        response = self.client.post(f'/api/v1/quotes/{self.order.quote_token}/approve/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve(self):
        self.request_approval()
        self.client.logout()
        response = self.client.post(
            f'/api/v1/quotes/{self.order.quote_token}/approve/', {'signature': 'data:image/png;base64,AAA'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.approval_status, 'approved')
        self.assertEqual(self.order.status, 'in_progress')
        self.assertIsNotNone(self.order.approved_at)
        self.assertEqual(AuditLog.objects.get(action='quote_approve').user, self.user)

    def test_reject_cancels_order(self):
        self.request_approval()
        self.client.logout()
        response = self.client.post(f'/api/v1/quotes/{self.order.quote_token}/reject/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.approval_status, 'rejected')
        self.assertEqual(self.order.status, 'cancelled')

    def test_only_pending_quotes_can_be_decided(self):
        response = self.client.post(f'/api/v1/quotes/{self.order.quote_token}/reject/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.request_approval()
        self.client.post(f'/api/v1/quotes/{self.order.quote_token}/reject/')
        response = self.client.post(
            f'/api/v1/quotes/{self.order.quote_token}/approve/', {'signature': 'Lucas'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PhotoUploadTests(TestCase):
    """Test multipart photo upload"""

    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.settings_override = override_settings(MEDIA_ROOT=self.media_root)
        self.settings_override.enable()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_service_order(self.user)

    def tearDown(self):
        self.settings_override.disable()
        shutil.rmtree(self.media_root, ignore_errors=True)

    def make_image(self, name='front.png'):
        buffer = io.BytesIO()
        Image.new('RGB', (20, 20), color='red').save(buffer, format='PNG')
        return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')

    def test_upload_appends_urls(self):
        url = f'/api/v1/service-orders/{self.order.id}/photos/'
        response = self.client.post(url, {'photos': [self.make_image(), self.make_image('back.png')]}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['photos']), 2)
        self.client.post(url, {'photos': [self.make_image()]}, format='multipart')
        self.order.refresh_from_db()
        self.assertEqual(len(self.order.photos), 3)
        self.assertTrue(self.order.photos[0].startswith('http://testserver/media/service_orders/'))

    def test_rejects_non_images(self):
        fake = SimpleUploadedFile('notes.png', b'not an image', content_type='image/png')
        response = self.client.post(f'/api/v1/service-orders/{self.order.id}/photos/', {'photos': [fake]}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_files(self):
        response = self.client.post(f'/api/v1/service-orders/{self.order.id}/photos/', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PaymentTests(TestCase):
    """Test service order payment"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_service_order(self.user, total_amount=Decimal('350.00'))

    def pay(self, method='pix'):
        return self.client.post(f'/api/v1/service-orders/{self.order.id}/payment/', {'payment_method': method}, format='json')

    def test_payment_records_income_and_completes(self):
        register = TestDataFactory.create_cash_register(self.user)
        response = self.pay()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        transaction = FinancialTransaction.objects.get(related_service_order=self.order)
        self.assertEqual(transaction.amount, Decimal('350.00'))
        self.assertEqual(transaction.type, 'income')
        self.assertEqual(transaction.payment_method, 'pix')
        self.assertEqual(transaction.cash_register, register)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'completed')
        self.assertIsNotNone(self.order.finalized_at)

    def test_payment_without_open_register(self):
        response = self.pay('cash')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['cash_register'])

    def test_cannot_pay_twice(self):
        self.pay()
        response = self.pay()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(FinancialTransaction.objects.filter(related_service_order=self.order).count(), 1)

    def test_zero_total_refused(self):
        self.order.total_amount = Decimal('0.00')
        self.order.save()
        self.assertEqual(self.pay().status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancelled_order_refused(self):
        self.order.status = 'cancelled'
        self.order.save()
        self.assertEqual(self.pay().status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_method(self):
        self.assertEqual(self.pay('cheque').status_code, status.HTTP_400_BAD_REQUEST)


class PartsTests(TestCase):
    """Test parts used in an order"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_service_order(self.user)
        self.item = TestDataFactory.create_inventory_item(self.user, quantity=4, selling_price=Decimal('80.00'))

    def test_add_part_decrements_stock(self):
        response = self.client.post(f'/api/v1/service-orders/{self.order.id}/items/', {
            'inventory_item': self.item.id, 'quantity_used': 3,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['price_at_time'], '80.00')
        self.assertEqual(response.data['line_total'], '240.00')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 1)

    def test_insufficient_stock(self):
        response = self.client.post(f'/api/v1/service-orders/{self.order.id}/items/', {
            'inventory_item': self.item.id, 'quantity_used': 5,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 4)

    def test_remove_part_restocks(self):
        item_id = self.client.post(f'/api/v1/service-orders/{self.order.id}/items/', {
            'inventory_item': self.item.id, 'quantity_used': 2,
        }, format='json').data['id']
        response = self.client.delete(f'/api/v1/service-orders/{self.order.id}/items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 4)


class CustomFieldTests(TestCase):
    """Test custom field definitions"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_select_requires_options(self):
        response = self.client.post('/api/v1/service-order-fields/', {
            'field_name': 'Cor', 'field_type': 'select',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/service-order-fields/', {
            'field_name': 'Cor', 'field_type': 'select', 'options': ['Preto', 'Branco'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_delete_field_deletes_values(self):
        field = ServiceOrderCustomField.objects.create(user=self.user, field_name='Capinha', field_type='text')
        order = TestDataFactory.create_service_order(self.user)
        ServiceOrderFieldValue.objects.create(service_order=order, custom_field=field, value='Sim')
        response = self.client.delete(f'/api/v1/service-order-fields/{field.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ServiceOrderFieldValue.objects.filter(service_order=order).exists())


class PrintTests(TestCase):
    """Test print views and label"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.order = TestDataFactory.create_service_order(self.user, service_details='Troca de tela')

    def test_print_view(self):
        response = self.client.get(f'/api/v1/service-orders/{self.order.id}/print/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['os_number'], self.order.os_number)
        self.assertEqual(response.data['customer']['name'], self.order.customer.name)
        self.assertIn('settings', response.data)

    def test_warranty_print_without_finalization(self):
        response = self.client.get(f'/api/v1/service-orders/{self.order.id}/warranty/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['warranty_expires_on'])

    def test_label_is_png_data_url(self):
        response = self.client.get(f'/api/v1/service-orders/{self.order.id}/label/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['image'].startswith('data:image/png;base64,'))

    def test_other_users_order_not_found(self):
        other_order = TestDataFactory.create_service_order(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/service-orders/{other_order.id}/print/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
