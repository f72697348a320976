"""
Test suite for inventory module
Tests: Items, Filters, Categories, Delete guard, Public catalog
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from gama.core.models import AuditLog
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.inventory.models import InventoryItem
from gama.purchasing.models import PurchaseRequest


class InventoryItemTests(TestCase):
    """Test inventory item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_item_with_comma_prices(self):
        response = self.client.post('/api/v1/inventory/', {
            'name': 'Tela iPhone 11',
            'category': 'Screens',
            'quantity': 3,
            'cost_price': '150,00',
            'selling_price': '299,90',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = InventoryItem.objects.get(id=response.data['id'])
        self.assertEqual(item.selling_price, Decimal('299.90'))

    def test_negative_quantity_rejected(self):
        response = self.client.post('/api/v1/inventory/', {'name': 'Cabo USB-C', 'quantity': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_in_stock(self):
        TestDataFactory.create_inventory_item(self.user, name='Available', quantity=5)
        TestDataFactory.create_inventory_item(self.user, name='Sold out', quantity=0)
        response = self.client.get('/api/v1/inventory/?in_stock=true')
        self.assertEqual([item['name'] for item in response.data], ['Available'])
        response = self.client.get('/api/v1/inventory/?in_stock=false')
        self.assertEqual([item['name'] for item in response.data], ['Sold out'])

    def test_search_and_category(self):
        TestDataFactory.create_inventory_item(self.user, name='Bateria Moto G', category='Batteries')
        TestDataFactory.create_inventory_item(self.user, name='Tela Moto G', category='Screens')
        response = self.client.get('/api/v1/inventory/?search=moto&category=screens')
        self.assertEqual([item['name'] for item in response.data], ['Tela Moto G'])

    def test_categories(self):
        TestDataFactory.create_inventory_item(self.user, category='Screens')
        TestDataFactory.create_inventory_item(self.user, category='Batteries')
        TestDataFactory.create_inventory_item(self.user, category='Screens')
        response = self.client.get('/api/v1/inventory/categories/')
        self.assertEqual(response.data, ['Batteries', 'Screens'])

    def test_quantity_change_is_audited_as_stock_adjust(self):
        item = TestDataFactory.create_inventory_item(self.user, quantity=2)
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'quantity': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(model_name='InventoryItem', action='stock_adjust')
        self.assertEqual(log.changes['quantity'], {'old': 2, 'new': 7})

    def test_delete_item_with_purchase_request_is_refused(self):
        item = TestDataFactory.create_inventory_item(self.user)
        PurchaseRequest.objects.create(user=self.user, inventory_item=item, requested_quantity=5)
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('purchase requests', response.data['error'])

    def test_delete_item(self):
        item = TestDataFactory.create_inventory_item(self.user)
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class CatalogTests(TestCase):
    """Test the public catalog"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.screen = TestDataFactory.create_inventory_item(self.user, name='Tela', category='Screens', quantity=2)
        self.battery = TestDataFactory.create_inventory_item(self.user, name='Bateria', category='Batteries', quantity=1)
        self.sold_out = TestDataFactory.create_inventory_item(self.user, name='Capa', category='Cases', quantity=0)

    def test_catalog_is_public_and_hides_out_of_stock(self):
        response = self.client.get('/api/v1/catalog/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({item['name'] for item in response.data}, {'Tela', 'Bateria'})
        self.assertNotIn('cost_price', response.data[0])

    def test_catalog_ids_override_category(self):
        response = self.client.get(f'/api/v1/catalog/?ids={self.screen.id},x&category=Batteries')
        self.assertEqual([item['name'] for item in response.data], ['Tela'])

    def test_catalog_category(self):
        response = self.client.get('/api/v1/catalog/?category=Batteries')
        self.assertEqual([item['name'] for item in response.data], ['Bateria'])

    def test_catalog_detail_out_of_stock(self):
        response = self.client.get(f'/api/v1/catalog/{self.sold_out.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Produto não encontrado ou fora de estoque.')

    def test_catalog_detail(self):
        response = self.client.get(f'/api/v1/catalog/{self.screen.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Tela')
