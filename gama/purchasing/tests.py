"""
Test suite for purchasing module
Tests: Purchase requests, Receiving stock once, Filters
"""
from django.test import TestCase
from rest_framework import status
from gama.core.models import AuditLog
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.purchasing.models import PurchaseRequest
from gama.purchasing.serializers import PurchaseRequestSerializer


class PurchaseRequestTests(TestCase):
    """Test purchase request endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_inventory_item(self.user, quantity=2)

    def create_request(self, **extra):
        data = {'inventory_item': self.item.id, 'requested_quantity': 5}
        data.update(extra)
        return self.client.post('/api/v1/purchase-requests/', data, format='json')

    def test_create_request(self):
        response = self.create_request(notes='Urgent')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['current_stock'], 2)

    def test_requested_quantity_must_be_positive(self):
        response = self.create_request(requested_quantity=0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_request_other_users_item(self):
        foreign_item = TestDataFactory.create_inventory_item(TestDataFactory.create_user())
        response = self.client.post('/api/v1/purchase-requests/', {
            'inventory_item': foreign_item.id, 'requested_quantity': 1,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receiving_adds_stock(self):
        request_id = self.create_request().data['id']
        response = self.client.patch(f'/api/v1/purchase-requests/{request_id}/', {'status': 'received'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 7)
        self.assertIsNotNone(PurchaseRequest.objects.get(id=request_id).received_at)
        self.assertTrue(AuditLog.objects.filter(model_name='PurchaseRequest', action='status_change').exists())

    def test_stock_is_added_only_once(self):
        request_id = self.create_request().data['id']
        url = f'/api/v1/purchase-requests/{request_id}/'
        self.client.patch(url, {'status': 'received'}, format='json')
        self.client.patch(url, {'status': 'ordered'}, format='json')
        self.client.patch(url, {'status': 'received'}, format='json')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 7)

    def test_stale_copies_receive_stock_once(self):
        request_id = self.create_request().data['id']
        first = PurchaseRequest.objects.get(id=request_id)
        second = PurchaseRequest.objects.get(id=request_id)
        for purchase_request in (first, second):
            serializer = PurchaseRequestSerializer(purchase_request, data={'status': 'received'}, partial=True)
            self.assertTrue(serializer.is_valid(), serializer.errors)
            serializer.save()
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 7)
        self.assertIsNotNone(PurchaseRequest.objects.get(id=request_id).received_at)

    def test_created_as_received_adds_stock(self):
        self.create_request(status='received')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 7)

    def test_filter_by_status(self):
        self.create_request()
        self.create_request(status='ordered')
        response = self.client.get('/api/v1/purchase-requests/?status=ordered')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['status'], 'ordered')

    def test_delete_request(self):
        request_id = self.create_request().data['id']
        response = self.client.delete(f'/api/v1/purchase-requests/{request_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
