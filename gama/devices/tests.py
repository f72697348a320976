"""
Test suite for devices module
Tests: Devices, Delete guard, IMEI validation and consultation
"""
from unittest import mock
import requests
from django.test import TestCase, override_settings
from rest_framework import status
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.devices.imei_service import is_valid_imei, STATUS_DETAILS
from gama.devices.models import Device


class DeviceTests(TestCase):
    """Test device endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(self.user)

    def test_create_device(self):
        response = self.client.post('/api/v1/devices/', {
            'customer': self.customer.id,
            'brand': 'Motorola',
            'model': 'Moto G84',
            'defect_description': 'Does not charge with any cable',
            'checklist': ['screen ok', 'camera ok'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], self.customer.name)

    def test_create_device_short_defect(self):
        response = self.client.post('/api/v1/devices/', {
            'customer': self.customer.id,
            'brand': 'Motorola',
            'model': 'Moto G84',
            'defect_description': 'Broken',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('defect_description', response.data)

    def test_create_device_for_other_users_customer(self):
        foreign_customer = TestDataFactory.create_customer(TestDataFactory.create_user())
        response = self.client.post('/api/v1/devices/', {
            'customer': foreign_customer.id,
            'brand': 'Motorola',
            'model': 'Moto G84',
            'defect_description': 'Does not charge with any cable',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('customer', response.data)

    def test_filter_by_customer(self):
        TestDataFactory.create_device(self.user, customer=self.customer)
        TestDataFactory.create_device(self.user)
        response = self.client.get(f'/api/v1/devices/?customer={self.customer.id}')
        self.assertEqual(len(response.data), 1)

    def test_device_detail_lists_service_orders(self):
        device = TestDataFactory.create_device(self.user, customer=self.customer)
        TestDataFactory.create_service_order(self.user, device=device)
        response = self.client.get(f'/api/v1/devices/{device.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['service_orders']), 1)

    def test_delete_device_with_service_order_is_refused(self):
        device = TestDataFactory.create_device(self.user, customer=self.customer)
        TestDataFactory.create_service_order(self.user, device=device)
        response = self.client.delete(f'/api/v1/devices/{device.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Device.objects.filter(id=device.id).exists())

    def test_delete_device(self):
        device = TestDataFactory.create_device(self.user, customer=self.customer)
        response = self.client.delete(f'/api/v1/devices/{device.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ImeiValidationTests(TestCase):
    """Test IMEI format rules"""

    def test_valid_lengths(self):
        self.assertTrue(is_valid_imei('12345678901234'))
        self.assertTrue(is_valid_imei('123456789012345'))
        self.assertTrue(is_valid_imei('1234567890123456'))

    def test_invalid_values(self):
        self.assertFalse(is_valid_imei('1234567890123'))
        self.assertFalse(is_valid_imei('12345678901234567'))
        self.assertFalse(is_valid_imei('12345678901234A'))
        self.assertFalse(is_valid_imei(None))


@override_settings(IMEI_API_URL='')
class ImeiConsultTests(TestCase):
    """Test the IMEI consultation endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def consult(self, imei):
        return self.client.post('/api/v1/imei/consult/', {'imei': imei}, format='json')

    def test_invalid_imei(self):
        response = self.consult('12345')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'IMEI inválido. Deve conter 14 a 16 dígitos numéricos.')

    def test_imei_must_be_exactly_ascii_digits(self):
        for imei in ('12345678901234\n', '\u0661' * 15, '1234567890123a', '12345678901234567', 12345678901234):
            response = self.consult(imei)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, repr(imei))

    def test_stolen(self):
        response = self.consult('356789012345123')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'stolen')
        self.assertEqual(response.data['details'], STATUS_DETAILS['stolen'])

    def test_restricted(self):
        response = self.consult('356789012345456')
        self.assertEqual(response.data['status'], 'restricted')

    def test_clean(self):
        response = self.consult('356789012345789')
        self.assertEqual(response.data['status'], 'clean')
        self.assertIn('last_updated', response.data)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.consult('356789012345789')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @override_settings(IMEI_API_URL='https://imei.example.com/check', IMEI_API_KEY='key')
    def test_provider_status_is_mapped(self):
        provider_response = mock.Mock()
        provider_response.json.return_value = {'status': 'STOLEN_LOST', 'last_updated': '01/01/2025, 10:00:00'}
        with mock.patch('gama.devices.imei_service.requests.get', return_value=provider_response) as get:
            response = self.consult('356789012345789')
        self.assertEqual(response.data['status'], 'stolen')
        self.assertEqual(response.data['last_updated'], '01/01/2025, 10:00:00')
        self.assertEqual(get.call_args.kwargs['params'], {'imei': '356789012345789', 'api_key': 'key'})

    @override_settings(IMEI_API_URL='https://imei.example.com/check')
    def test_provider_failure_returns_bad_gateway(self):
        with mock.patch('gama.devices.imei_service.requests.get', side_effect=requests.exceptions.Timeout('timed out')):
            response = self.consult('356789012345789')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertIn('error', response.data)

    @override_settings(IMEI_API_URL='https://imei.example.com/check')
    def test_provider_non_object_answer_returns_bad_gateway(self):
        provider_response = mock.Mock()
        provider_response.json.return_value = ['CLEAN']
        with mock.patch('gama.devices.imei_service.requests.get', return_value=provider_response):
            response = self.consult('356789012345789')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
