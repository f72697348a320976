"""
Test suite for reports module
Tests: Aggregations on fixed inputs, Widget endpoints, Dashboard cache
"""
from datetime import date
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.reports import aggregations


class AggregationTests(TestCase):
    """Test the pure reductions"""

    def test_financial_summary_totals(self):
        rows = [
            {'type': 'income', 'amount': Decimal('10')},
            {'type': 'income', 'amount': Decimal('20')},
            {'type': 'income', 'amount': Decimal('30')},
        ]
        self.assertEqual(aggregations.financial_summary(rows), {
            'income': '60.00', 'expense': '0.00', 'balance': '60.00',
        })

    def test_financial_summary_balance(self):
        rows = [
            {'type': 'income', 'amount': Decimal('100.50')},
            {'type': 'expense', 'amount': Decimal('40.25')},
        ]
        self.assertEqual(aggregations.financial_summary(rows)['balance'], '60.25')

    def test_empty_inputs(self):
        self.assertEqual(aggregations.financial_summary([]), {'income': '0.00', 'expense': '0.00', 'balance': '0.00'})
        self.assertEqual(aggregations.sales_summary([]), {'count': 0, 'total': '0.00'})
        self.assertEqual(aggregations.average_ticket([])['average_ticket'], '0.00')

    def test_status_counts(self):
        counts = aggregations.status_counts(['pending', 'pending', 'ready', 'cancelled'])
        self.assertEqual(counts, {
            'pending': 2, 'in_progress': 0, 'ready': 1, 'completed': 0, 'cancelled': 1, 'total': 4,
        })

    def test_sales_overview(self):
        sales = [
            {'device_model': 'iPhone 12', 'sale_price': Decimal('2000'), 'acquisition_cost': Decimal('1500')},
            {'device_model': 'iPhone 12', 'sale_price': Decimal('2100'), 'acquisition_cost': Decimal('1500')},
            {'device_model': 'Galaxy S21', 'sale_price': Decimal('1800'), 'acquisition_cost': Decimal('1300')},
        ]
        overview = aggregations.sales_overview(sales)
        self.assertEqual(overview['total_sold'], 3)
        self.assertEqual(overview['revenue'], '5900.00')
        self.assertEqual(overview['profit'], '1600.00')
        self.assertEqual(overview['top_models'][0], {'model': 'iPhone 12', 'count': 2})

    def test_top_models_limited_to_five(self):
        sales = [{'device_model': f'Model {i}', 'sale_price': 1, 'acquisition_cost': 0} for i in range(8)]
        self.assertEqual(len(aggregations.sales_overview(sales)['top_models']), 5)

    def test_average_ticket(self):
        entries = [
            {'customer_id': 1, 'customer_name': 'Ana', 'amount': Decimal('100')},
            {'customer_id': 1, 'customer_name': 'Ana', 'amount': Decimal('50')},
            {'customer_id': 2, 'customer_name': 'Bruno', 'amount': Decimal('300')},
            {'customer_id': None, 'customer_name': None, 'amount': Decimal('999')},
        ]
        result = aggregations.average_ticket(entries)
        self.assertEqual(result['total_customers'], 2)
        self.assertEqual(result['total_revenue'], '450.00')
        self.assertEqual(result['average_ticket'], '225.00')
        self.assertEqual([c['customer_name'] for c in result['customers']], ['Bruno', 'Ana'])
        self.assertEqual(result['customers'][1]['transactions'], 2)

    def test_common_services(self):
        details = ['Troca de tela'] * 3 + ['Troca de bateria'] * 2 + ['', None] + [f'Serviço {i}' for i in range(5)]
        top = aggregations.common_services(details)
        self.assertEqual(len(top), 5)
        self.assertEqual(top[0], {'service': 'Troca de tela', 'count': 3})
        self.assertEqual(top[1], {'service': 'Troca de bateria', 'count': 2})
        self.assertEqual(len(aggregations.common_services(details, limit=None)), 7)

    def test_warranty_overview(self):
        today = date(2024, 6, 15)
        sales = [
            {'id': 1, 'created_on': date(2024, 6, 1), 'warranty_days': 90},   # ends Aug 30, active
            {'id': 2, 'created_on': date(2024, 6, 1), 'warranty_days': 30},   # ends Jul 1, expiring soon
            {'id': 3, 'created_on': date(2024, 5, 1), 'warranty_days': 30},   # ended May 31
            {'id': 4, 'created_on': date(2024, 6, 1), 'warranty_days': 0},    # no warranty
        ]
        overview = aggregations.warranty_overview(sales, today)
        self.assertEqual(overview['total_active'], 2)
        self.assertEqual(overview['expiring_soon'], 1)
        self.assertEqual(overview['expired'], 1)
        self.assertEqual(overview['expiring_sales'][0]['id'], 2)
        self.assertEqual(overview['expiring_sales'][0]['days_remaining'], 16)

    def test_warranty_ending_today_is_expired(self):
        entry = aggregations.warranty_entry({'created_on': date(2024, 6, 1), 'warranty_days': 14}, date(2024, 6, 15))
        self.assertEqual(entry['days_remaining'], 0)
        self.assertEqual(entry['status'], 'expired')


class ReportEndpointTests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.month = timezone.localdate().strftime('%Y-%m')

    def test_financial_summary(self):
        for amount in ('10.00', '20.00', '30.00'):
            TestDataFactory.create_transaction(self.user, amount, 'income')
        TestDataFactory.create_transaction(TestDataFactory.create_user(), '500.00', 'income')
        response = self.client.get(f'/api/v1/reports/financial-summary/?month={self.month}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['income'], '60.00')
        self.assertEqual(response.data['balance'], '60.00')

    def test_invalid_month(self):
        response = self.client.get('/api/v1/reports/financial-summary/?month=june')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_month_is_empty(self):
        TestDataFactory.create_transaction(self.user, '10.00', 'income')
        response = self.client.get('/api/v1/reports/income/?month=2000-01')
        self.assertEqual(response.data['transactions'], [])
        self.assertEqual(response.data['income'], '0.00')

    def test_expense_report(self):
        TestDataFactory.create_transaction(self.user, '10.00', 'income')
        TestDataFactory.create_transaction(self.user, '4.00', 'expense')
        response = self.client.get('/api/v1/reports/expense/')
        self.assertEqual(len(response.data['transactions']), 1)
        self.assertEqual(response.data['expense'], '4.00')
        response = self.client.get('/api/v1/reports/balance/')
        self.assertEqual(response.data['balance'], '6.00')

    def test_pos_sales_summary_uses_linked_income(self):
        pos_sale = TestDataFactory.create_pos_sale(self.user, total_amount=Decimal('80.00'))
        TestDataFactory.create_transaction(self.user, '80.00', 'income', related_pos_sale=pos_sale)
        TestDataFactory.create_transaction(self.user, '15.00', 'income')
        response = self.client.get('/api/v1/reports/pos-sales-summary/')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['total'], '80.00')

    def test_service_order_summary_is_all_time(self):
        TestDataFactory.create_service_order(self.user, status='pending')
        TestDataFactory.create_service_order(self.user, status='completed')
        response = self.client.get('/api/v1/reports/service-orders-summary/')
        self.assertEqual(response.data['total'], 2)
        self.assertEqual(response.data['completed'], 1)

    def test_service_order_report_groups_by_status(self):
        TestDataFactory.create_service_order(self.user, status='ready')
        response = self.client.get('/api/v1/reports/service-orders/')
        self.assertEqual(len(response.data['orders']['ready']), 1)
        self.assertEqual(response.data['counts']['ready'], 1)

    def test_average_ticket(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_sale(self.user, customer=customer, sale_price=Decimal('1000.00'))
        TestDataFactory.create_pos_sale(self.user, customer=customer, total_amount=Decimal('200.00'))
        TestDataFactory.create_pos_sale(self.user, total_amount=Decimal('999.00'))
        response = self.client.get('/api/v1/reports/average-ticket/')
        self.assertEqual(response.data['average_ticket'], '1200.00')
        self.assertNotIn('customers', response.data)
        response = self.client.get('/api/v1/reports/average-ticket/customers/')
        self.assertEqual(response.data['customers'][0]['transactions'], 2)

    def test_common_services(self):
        TestDataFactory.create_service_order(self.user, service_details='Troca de tela')
        TestDataFactory.create_service_order(self.user, service_details='Troca de tela')
        response = self.client.get('/api/v1/reports/common-services/')
        self.assertEqual(response.data['services'], [{'service': 'Troca de tela', 'count': 2}])

    def test_warranty_overview(self):
        TestDataFactory.create_sale(self.user, warranty_days=90)
        TestDataFactory.create_sale(self.user, warranty_days=0)
        response = self.client.get('/api/v1/reports/warranty-overview/')
        self.assertEqual(response.data['total_active'], 1)
        response = self.client.get('/api/v1/reports/warranties/')
        self.assertEqual(len(response.data['warranties']), 1)

    def test_sales_reports(self):
        TestDataFactory.create_sale(self.user, sale_price=Decimal('1500.00'), acquisition_cost=Decimal('1000.00'))
        response = self.client.get('/api/v1/reports/sales-overview/')
        self.assertEqual(response.data['profit'], '500.00')
        response = self.client.get('/api/v1/reports/sales/')
        self.assertEqual(len(response.data['sales']), 1)
        response = self.client.get('/api/v1/reports/sales-summary/')
        self.assertEqual(response.data['total'], '1500.00')

    def test_pos_sales_report(self):
        TestDataFactory.create_pos_sale(self.user, total_amount=Decimal('45.00'))
        response = self.client.get('/api/v1/reports/pos-sales/')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['total'], '45.00')

    def test_dashboard_is_invalidated_by_new_rows(self):
        TestDataFactory.create_transaction(self.user, '10.00', 'income')
        first = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['financial_summary']['income'], '10.00')
        TestDataFactory.create_transaction(self.user, '5.00', 'income')
        second = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(second.data['financial_summary']['income'], '15.00')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
