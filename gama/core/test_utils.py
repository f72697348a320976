"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from gama.devices.models import Device
from gama.financials.models import CashRegister, FinancialTransaction
from gama.inventory.models import InventoryItem
from gama.parties.models import Customer, Supplier
from gama.pos.models import POSSale
from gama.sales.models import Sale
from gama.service_orders.models import ServiceOrder
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_customer(user, name=None, phone='11999990000', email=None):
        """Create a test customer"""
        if not name:
            name = f'Customer {TestDataFactory.random_string(6)}'
        return Customer.objects.create(user=user, name=name, phone=phone, email=email or '')

    @staticmethod
    def create_supplier(user, name=None, contact_person=''):
        """Create a test supplier"""
        if not name:
            name = f'Supplier {TestDataFactory.random_string(6)}'
        return Supplier.objects.create(user=user, name=name, contact_person=contact_person)

    @staticmethod
    def create_device(user, customer=None, brand='Samsung', model='Galaxy S21',
                      defect_description='Screen cracked and not responding to touch'):
        """Create a test device"""
        if customer is None:
            customer = TestDataFactory.create_customer(user)
        return Device.objects.create(
            user=user,
            customer=customer,
            brand=brand,
            model=model,
            serial_number=TestDataFactory.random_string(12),
            defect_description=defect_description,
        )

    @staticmethod
    def create_inventory_item(user, name=None, quantity=10, cost_price=Decimal('50.00'),
                              selling_price=Decimal('100.00'), category='Screens', supplier=None):
        """Create a test inventory item"""
        if not name:
            name = f'Item {TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(
            user=user,
            name=name,
            sku=f'SKU-{TestDataFactory.random_string(6).upper()}',
            category=category,
            quantity=quantity,
            cost_price=cost_price,
            selling_price=selling_price,
            supplier=supplier,
        )

    @staticmethod
    def create_sale(user, customer=None, sale_price=Decimal('1500.00'), acquisition_cost=Decimal('1000.00'),
                    device_model='iPhone 12', warranty_days=90):
        """Create a test device sale"""
        return Sale.objects.create(
            user=user,
            customer=customer,
            device_brand='Apple',
            device_model=device_model,
            imei_serial=f'35{random.randint(10 ** 12, 10 ** 13 - 1)}',
            sale_price=sale_price,
            acquisition_cost=acquisition_cost,
            warranty_days=warranty_days,
        )

    @staticmethod
    def create_service_order(user, customer=None, device=None, status='pending',
                             total_amount=Decimal('250.00'), service_details=''):
        """Create a test service order"""
        if customer is None:
            customer = device.customer if device else TestDataFactory.create_customer(user)
        if device is None:
            device = TestDataFactory.create_device(user, customer=customer)
        return ServiceOrder.objects.create(
            user=user,
            customer=customer,
            device=device,
            status=status,
            issue_description=device.defect_description,
            service_details=service_details,
            total_amount=total_amount,
        )

    @staticmethod
    def create_pos_sale(user, customer=None, total_amount=Decimal('100.00'), payment_method='cash'):
        """Create a test POS sale (without lines)"""
        return POSSale.objects.create(
            user=user,
            customer=customer,
            total_amount=total_amount,
            payment_method=payment_method,
            finalized_at=timezone.now(),
        )

    @staticmethod
    def create_cash_register(user, initial_balance=Decimal('100.00'), status='open'):
        """Create a test cash register"""
        return CashRegister.objects.create(
            user=user,
            initial_balance=initial_balance,
            opening_time=timezone.now(),
            status=status,
        )

    @staticmethod
    def create_transaction(user, amount, type='income', description='Test entry', cash_register=None, **related):
        """Create a test financial transaction"""
        return FinancialTransaction.objects.create(
            user=user,
            transaction_date=timezone.now(),
            description=description,
            amount=Decimal(str(amount)),
            type=type,
            cash_register=cash_register,
            **related,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
