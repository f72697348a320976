"""
Test suite for sales module
Tests: Device sales, Trade-in, Warranty templates, Receipt
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.sales.models import Sale, WARRANTY_TEMPLATES


class SaleTests(TestCase):
    """Test device sale endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user)

    def sale_payload(self, **extra):
        data = {
            'device_brand': 'Apple',
            'device_model': 'iPhone 13',
            'imei_serial': '356789012345678',
            'customer': self.customer.id,
            'sale_price': '3500,00',
            'acquisition_cost': '2800.00',
            'warranty_days': 90,
        }
        data.update(extra)
        return data

    def test_create_sale_fills_warranty_policy(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sale = Sale.objects.get(id=response.data['id'])
        self.assertEqual(sale.sale_price, Decimal('3500.00'))
        self.assertEqual(sale.warranty_policy, WARRANTY_TEMPLATES[90])
        self.assertEqual(response.data['profit'], '700.00')
        self.assertIsNone(sale.trade_in_details)

    def test_custom_warranty_policy_is_kept(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(warranty_policy='Garantia da loja.'), format='json')
        self.assertEqual(Sale.objects.get(id=response.data['id']).warranty_policy, 'Garantia da loja.')

    def test_sale_price_must_be_positive(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(sale_price='0'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sale_price', response.data)

    def test_short_imei_rejected(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(imei_serial='12345'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_trade_in_is_stored(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(
            has_trade_in=True,
            trade_in_device_brand='Samsung',
            trade_in_device_model='Galaxy S10',
            trade_in_imei_serial='352099001761481',
            trade_in_value='800,00',
            trade_in_condition='Good',
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['trade_in_details'], {
            'brand': 'Samsung',
            'model': 'Galaxy S10',
            'imei_serial': '352099001761481',
            'value': '800.00',
            'condition': 'Good',
        })

    def test_trade_in_requires_details(self):
        response = self.client.post('/api/v1/sales/', self.sale_payload(
            has_trade_in=True, trade_in_device_brand='S', trade_in_value='0',
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('trade_in_device_brand', 'trade_in_device_model', 'trade_in_imei_serial', 'trade_in_value'):
            self.assertIn(field, response.data)

    def test_disabling_trade_in_clears_details(self):
        sale = TestDataFactory.create_sale(self.user, customer=self.customer)
        sale.trade_in_details = {'brand': 'Samsung', 'model': 'A52', 'imei_serial': '1234567890', 'value': '100.00'}
        sale.save()
        response = self.client.patch(f'/api/v1/sales/{sale.id}/', {'has_trade_in': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        sale.refresh_from_db()
        self.assertIsNone(sale.trade_in_details)

    def test_filter_by_date_range(self):
        TestDataFactory.create_sale(self.user)
        today = timezone.localdate()
        response = self.client.get(f'/api/v1/sales/?date_from={today}&date_to={today}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'/api/v1/sales/?date_from={today + timedelta(days=1)}')
        self.assertEqual(len(response.data), 0)

    def test_malformed_date_rejected(self):
        response = self.client.get('/api/v1/sales/?date_to=2024-02-30')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_receipt(self):
        sale = TestDataFactory.create_sale(self.user, customer=self.customer, warranty_days=30)
        response = self.client.get(f'/api/v1/sales/{sale.id}/receipt/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['customer']['name'], self.customer.name)
        self.assertIsNone(response.data['supplier'])
        self.assertEqual(response.data['warranty_expires_on'], timezone.localtime(sale.created_at).date() + timedelta(days=30))

    def test_warranty_templates(self):
        response = self.client.get('/api/v1/sales/warranty-templates/')
        self.assertEqual(set(response.data.keys()), {'0', '30', '90', '180'})

    def test_delete_sale(self):
        sale = TestDataFactory.create_sale(self.user)
        response = self.client.delete(f'/api/v1/sales/{sale.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
