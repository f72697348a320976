"""
Test suite for core module
Tests: Auth, Profile, Settings, Audit logs, Shared helpers
"""
from datetime import date
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from gama.core.cache_utils import get_reports_version
from gama.core.models import AuditLog, UserSettings
from gama.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from gama.core.utils import money, month_range, to_decimal


class AuthTests(TestCase):
    """Test login, refresh and current user"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='maria', password='s3cret-pass')
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'maria', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'maria', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'maria', 'password': 's3cret-pass'}, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_includes_settings_defaults(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'maria')
        self.assertEqual(response.data['settings']['service_order_template'], 'default')


class ProfileAndSettingsTests(TestCase):
    """Test profile and settings endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_update_profile(self):
        response = self.client.put('/api/v1/profile/', {'first_name': 'Ana', 'last_name': 'Souza'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.display_name, 'Ana Souza')
        self.assertTrue(AuditLog.objects.filter(model_name='User', action='update').exists())

    def test_profile_rejects_invalid_avatar_url(self):
        response = self.client.patch('/api/v1/profile/', {'avatar_url': 'not a url'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_settings_created_on_first_access(self):
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(UserSettings.objects.filter(user=self.user).exists())

    def test_update_settings(self):
        response = self.client.patch('/api/v1/settings/', {
            'company_name': 'Gama Assistência',
            'default_guarantee_terms': 'Garantia de 90 dias.',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.user.app_settings.company_name, 'Gama Assistência')


class AuditLogTests(TestCase):
    """Test audit log listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        AuditLog.objects.create(user=self.user, action='create', model_name='Customer', object_id='1')
        AuditLog.objects.create(user=self.user, action='delete', model_name='Customer', object_id='1')
        AuditLog.objects.create(user=self.other, action='create', model_name='Customer', object_id='2')

    def test_lists_only_own_entries(self):
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_filter_by_action(self):
        response = self.client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['action'], 'delete')

    def test_filter_by_date(self):
        today = timezone.localdate()
        response = self.client.get(f'/api/v1/audit-logs/?date_from={today}&date_to={today}')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/audit-logs/?date_from=garbage')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_users_entry_not_found(self):
        entry = AuditLog.objects.get(user=self.other)
        response = self.client.get(f'/api/v1/audit-logs/{entry.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class HelperTests(TestCase):
    """Test money, month and cache helpers"""

    def test_money_formats_two_places(self):
        self.assertEqual(money(60), '60.00')
        self.assertEqual(money('10,5'), '10.50')
        self.assertEqual(money(None), '0.00')

    def test_to_decimal_accepts_comma(self):
        self.assertEqual(to_decimal('1234,50'), Decimal('1234.50'))
        self.assertEqual(to_decimal('abc'), Decimal('0.00'))

    def test_month_range(self):
        self.assertEqual(month_range('2024-02'), (date(2024, 2, 1), date(2024, 2, 29)))

    def test_month_range_rejects_garbage(self):
        with self.assertRaises(ValueError):
            month_range('2024-13')

    def test_saving_a_sale_bumps_report_version(self):
        cache.clear()
        user = TestDataFactory.create_user()
        self.assertEqual(get_reports_version(user.id), 1)
        TestDataFactory.create_sale(user)
        self.assertEqual(get_reports_version(user.id), 2)
