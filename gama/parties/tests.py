"""
Test suite for parties module
Tests: Customers, Suppliers, Search, Delete guards, Ownership
"""
from django.test import TestCase
from rest_framework import status
from gama.core.models import AuditLog
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.parties.models import Customer, Supplier
from gama.sales.models import Sale
from gama.service_orders.models import ServiceOrder


class CustomerTests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        response = self.client.post('/api/v1/customers/', {
            'name': 'João Silva',
            'phone': '11988887777',
            'email': 'joao@example.com',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Customer.objects.get(id=response.data['id']).user, self.user)
        self.assertTrue(AuditLog.objects.filter(model_name='Customer', action='create').exists())

    def test_create_customer_short_name(self):
        response = self.client.post('/api/v1/customers/', {'name': 'J'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_list_only_own_customers(self):
        TestDataFactory.create_customer(self.user, name='Mine')
        TestDataFactory.create_customer(TestDataFactory.create_user(), name='Theirs')
        response = self.client.get('/api/v1/customers/')
        self.assertEqual([c['name'] for c in response.data], ['Mine'])

    def test_search_customers(self):
        TestDataFactory.create_customer(self.user, name='Carla Mendes', phone='1133334444')
        TestDataFactory.create_customer(self.user, name='Pedro Alves', phone='1155556666')
        response = self.client.get('/api/v1/customers/?search=5555')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], 'Pedro Alves')

    def test_customer_detail_includes_history(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_device(self.user, customer=customer)
        TestDataFactory.create_sale(self.user, customer=customer)
        response = self.client.get(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['devices']), 1)
        self.assertEqual(len(response.data['sales']), 1)
        self.assertEqual(response.data['service_orders'], [])
        self.assertEqual(response.data['pos_sales'], [])

    def test_other_users_customer_not_found(self):
        customer = TestDataFactory.create_customer(TestDataFactory.create_user())
        response = self.client.get(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_customer(self):
        customer = TestDataFactory.create_customer(self.user)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(id=customer.id).exists())

    def test_delete_customer_with_devices_is_refused(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_device(self.user, customer=customer)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('devices', response.data['error'])
        self.assertTrue(Customer.objects.filter(id=customer.id).exists())

    def test_delete_customer_with_pos_sale_is_refused(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_pos_sale(self.user, customer=customer)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_customer_with_service_order_is_refused(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_service_order(self.user, customer=customer)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('service orders', response.data['error'])
        self.assertTrue(Customer.objects.filter(id=customer.id).exists())

    def test_delete_customer_with_sale_is_refused(self):
        customer = TestDataFactory.create_customer(self.user)
        TestDataFactory.create_sale(self.user, customer=customer)
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(customer.delete_blockers(), ['sales'])
        self.assertIn('sales', response.data['error'])


class SupplierTests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        response = self.client.post('/api/v1/suppliers/', {
            'name': 'Peças Express',
            'contact_person': 'Rita',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Supplier.objects.filter(user=self.user).count(), 1)

    def test_update_supplier(self):
        supplier = TestDataFactory.create_supplier(self.user)
        response = self.client.patch(f'/api/v1/suppliers/{supplier.id}/', {'phone': '1140028922'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        supplier.refresh_from_db()
        self.assertEqual(supplier.phone, '1140028922')

    def test_delete_supplier_with_inventory_is_refused(self):
        supplier = TestDataFactory.create_supplier(self.user)
        TestDataFactory.create_inventory_item(self.user, supplier=supplier)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('inventory items', response.data['error'])

    def test_delete_supplier_with_sale_is_refused(self):
        supplier = TestDataFactory.create_supplier(self.user)
        sale = TestDataFactory.create_sale(self.user)
        Sale.objects.filter(pk=sale.pk).update(supplier=supplier)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(supplier.delete_blockers(), ['sales'])
        self.assertTrue(Supplier.objects.filter(id=supplier.id).exists())

    def test_delete_supplier_with_service_order_is_refused(self):
        supplier = TestDataFactory.create_supplier(self.user)
        order = TestDataFactory.create_service_order(self.user)
        ServiceOrder.objects.filter(pk=order.pk).update(part_supplier=supplier)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('service orders', response.data['error'])

    def test_delete_unused_supplier(self):
        supplier = TestDataFactory.create_supplier(self.user)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
