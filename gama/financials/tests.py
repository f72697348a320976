"""
Test suite for financials module
Tests: Cash registers, Running balance, Ledger filters, Manual entries
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.financials.models import CashRegister, FinancialTransaction


class CashRegisterTests(TestCase):
    """Test cash register lifecycle"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_open_register(self):
        response = self.client.post('/api/v1/cash-registers/open/', {'initial_balance': '150,00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'open')
        self.assertEqual(response.data['running_balance'], '150.00')

    def test_second_open_register_refused(self):
        self.client.post('/api/v1/cash-registers/open/', {'initial_balance': '100.00'}, format='json')
        response = self.client.post('/api/v1/cash-registers/open/', {'initial_balance': '100.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(CashRegister.objects.filter(user=self.user, status='open').count(), 1)

    def test_other_users_register_does_not_block(self):
        TestDataFactory.create_cash_register(TestDataFactory.create_user())
        response = self.client.post('/api/v1/cash-registers/open/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_current_register_running_balance(self):
        register = TestDataFactory.create_cash_register(self.user, initial_balance=Decimal('100.00'))
        TestDataFactory.create_transaction(self.user, '50.00', 'income', cash_register=register)
        TestDataFactory.create_transaction(self.user, '20.00', 'expense', cash_register=register)
        response = self.client.get('/api/v1/cash-registers/current/')
        self.assertEqual(response.data['register']['running_balance'], '130.00')
        self.assertEqual(response.data['register']['total_income'], '50.00')
        self.assertEqual(response.data['register']['total_expense'], '20.00')

    def test_no_current_register(self):
        response = self.client.get('/api/v1/cash-registers/current/')
        self.assertIsNone(response.data['register'])

    def test_close_defaults_to_running_balance(self):
        register = TestDataFactory.create_cash_register(self.user, initial_balance=Decimal('100.00'))
        TestDataFactory.create_transaction(self.user, '75.50', 'income', cash_register=register)
        response = self.client.post(f'/api/v1/cash-registers/{register.id}/close/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        register.refresh_from_db()
        self.assertEqual(register.status, 'closed')
        self.assertEqual(register.final_balance, Decimal('175.50'))
        self.assertIsNotNone(register.closing_time)

    def test_close_with_counted_balance(self):
        register = TestDataFactory.create_cash_register(self.user)
        self.client.post(f'/api/v1/cash-registers/{register.id}/close/', {'final_balance': '90,00'}, format='json')
        register.refresh_from_db()
        self.assertEqual(register.final_balance, Decimal('90.00'))

    def test_close_twice_refused(self):
        register = TestDataFactory.create_cash_register(self.user)
        self.client.post(f'/api/v1/cash-registers/{register.id}/close/', {}, format='json')
        response = self.client.post(f'/api/v1/cash-registers/{register.id}/close/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_reports(self):
        closed = TestDataFactory.create_cash_register(self.user, status='closed')
        TestDataFactory.create_transaction(self.user, '10.00', 'income', cash_register=closed)
        TestDataFactory.create_cash_register(self.user)
        response = self.client.get('/api/v1/cash-registers/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get(f'/api/v1/cash-registers/{closed.id}/')
        self.assertEqual(len(response.data['transactions']), 1)


class LedgerTests(TestCase):
    """Test ledger listing and manual entries"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_entry_links_open_register(self):
        register = TestDataFactory.create_cash_register(self.user)
        response = self.client.post('/api/v1/transactions/', {
            'description': 'Venda avulsa',
            'amount': '30,00',
            'type': 'income',
            'category': 'other',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['cash_register'], register.id)
        self.assertEqual(response.data['kind'], 'manual')

    def test_expense_form_forces_type(self):
        response = self.client.post('/api/v1/transactions/expense/', {
            'description': 'Conta de luz',
            'amount': '120.00',
            'type': 'income',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(FinancialTransaction.objects.get(id=response.data['id']).type, 'expense')

    def test_entry_validation(self):
        response = self.client.post('/api/v1/transactions/', {
            'description': 'ab', 'amount': '0', 'type': 'income',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('description', response.data)
        self.assertIn('amount', response.data)

    def test_ledger_uses_open_register(self):
        register = TestDataFactory.create_cash_register(self.user)
        TestDataFactory.create_transaction(self.user, '10.00', cash_register=register)
        TestDataFactory.create_transaction(self.user, '99.00')
        response = self.client.get('/api/v1/transactions/')
        self.assertEqual(response.data['cash_register'], register.id)
        self.assertEqual(len(response.data['transactions']), 1)

    def test_ledger_falls_back_to_current_month(self):
        TestDataFactory.create_transaction(self.user, '10.00')
        TestDataFactory.create_transaction(TestDataFactory.create_user(), '20.00')
        response = self.client.get('/api/v1/transactions/')
        self.assertIsNone(response.data['cash_register'])
        self.assertEqual(len(response.data['transactions']), 1)

    def test_kind_and_type_filters(self):
        order = TestDataFactory.create_service_order(self.user)
        sale = TestDataFactory.create_sale(self.user)
        pos_sale = TestDataFactory.create_pos_sale(self.user)
        TestDataFactory.create_transaction(self.user, '10.00', related_service_order=order)
        TestDataFactory.create_transaction(self.user, '20.00', related_sale=sale)
        TestDataFactory.create_transaction(self.user, '30.00', related_pos_sale=pos_sale)
        TestDataFactory.create_transaction(self.user, '5.00', type='expense')

        def amounts(query):
            response = self.client.get(f'/api/v1/transactions/?{query}')
            return sorted(t['amount'] for t in response.data['transactions'])

        self.assertEqual(amounts('kind=service_order'), ['10.00'])
        self.assertEqual(amounts('kind=device_sale'), ['20.00'])
        self.assertEqual(amounts('kind=pos_sale'), ['30.00'])
        self.assertEqual(amounts('kind=manual'), ['5.00'])
        self.assertEqual(amounts('type=expense'), ['5.00'])

    def test_invalid_kind(self):
        response = self.client.get('/api/v1/transactions/?kind=gift')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_month(self):
        response = self.client.get('/api/v1/transactions/?month=2024-99')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
