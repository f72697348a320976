"""
Test suite for pos module
Tests: Checkout, Stock checks, Ledger entry, Listing, Receipt
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from gama.core.models import AuditLog
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.financials.models import FinancialTransaction
from gama.pos.models import POSSale


class CheckoutTests(TestCase):
    """Test POS checkout"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.charger = TestDataFactory.create_inventory_item(self.user, name='Carregador', quantity=5, selling_price=Decimal('49.90'))
        self.case = TestDataFactory.create_inventory_item(self.user, name='Capinha', quantity=2, selling_price=Decimal('25.00'))

    def checkout(self, items, **extra):
        data = {'payment_method': 'cash', 'items': items}
        data.update(extra)
        return self.client.post('/api/v1/pos/checkout/', data, format='json')

    def test_checkout(self):
        register = TestDataFactory.create_cash_register(self.user)
        customer = TestDataFactory.create_customer(self.user)
        response = self.checkout([
            {'inventory_item': self.charger.id, 'quantity': 2},
            {'inventory_item': self.case.id, 'quantity': 1},
        ], customer=customer.id)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '124.80')
        self.assertEqual(response.data['items_count'], 3)

        self.charger.refresh_from_db()
        self.case.refresh_from_db()
        self.assertEqual(self.charger.quantity, 3)
        self.assertEqual(self.case.quantity, 1)

        sale = POSSale.objects.get(id=response.data['id'])
        income = FinancialTransaction.objects.get(related_pos_sale=sale)
        self.assertEqual(income.amount, Decimal('124.80'))
        self.assertEqual(income.type, 'income')
        self.assertEqual(income.cash_register, register)
        self.assertTrue(AuditLog.objects.filter(action='pos_checkout', object_id=str(sale.id)).exists())

    def test_insufficient_stock_changes_nothing(self):
        response = self.checkout([
            {'inventory_item': self.charger.id, 'quantity': 1},
            {'inventory_item': self.case.id, 'quantity': 3},
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Capinha', response.data['error'])
        self.charger.refresh_from_db()
        self.assertEqual(self.charger.quantity, 5)
        self.assertFalse(POSSale.objects.exists())
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_zero_quantity_rejected(self):
        response = self.checkout([{'inventory_item': self.charger.id, 'quantity': 0}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_empty_cart_rejected(self):
        response = self.checkout([])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_lines_rejected(self):
        response = self.checkout([
            {'inventory_item': self.charger.id, 'quantity': 1},
            {'inventory_item': self.charger.id, 'quantity': 1},
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_users_item_rejected(self):
        foreign_item = TestDataFactory.create_inventory_item(TestDataFactory.create_user())
        response = self.checkout([{'inventory_item': foreign_item.id, 'quantity': 1}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_payment_method(self):
        response = self.checkout([{'inventory_item': self.charger.id, 'quantity': 1}], payment_method='barter')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_checkout_without_open_register(self):
        response = self.checkout([{'inventory_item': self.charger.id, 'quantity': 1}])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        income = FinancialTransaction.objects.get(related_pos_sale_id=response.data['id'])
        self.assertIsNone(income.cash_register)


class POSSaleListTests(TestCase):
    """Test POS sale listing and receipt"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_only_own_sales(self):
        TestDataFactory.create_pos_sale(self.user)
        TestDataFactory.create_pos_sale(TestDataFactory.create_user())
        response = self.client.get('/api/v1/pos/sales/')
        self.assertEqual(len(response.data), 1)

    def test_date_filter(self):
        TestDataFactory.create_pos_sale(self.user)
        response = self.client.get('/api/v1/pos/sales/?date_from=2000-01-01&date_to=2000-12-31')
        self.assertEqual(response.data, [])

    def test_malformed_date_rejected(self):
        response = self.client.get('/api/v1/pos/sales/?date_from=garbage')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_receipt(self):
        sale = TestDataFactory.create_pos_sale(self.user)
        response = self.client.get(f'/api/v1/pos/sales/{sale.id}/receipt/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sale']['id'], sale.id)
        self.assertIsNone(response.data['customer'])
        self.assertIn('company_name', response.data['settings'])
