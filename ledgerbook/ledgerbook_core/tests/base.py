from decimal import Decimal

from rest_framework.test import APITestCase

from accounts.models import User
from accounts.tokens import issue_token
from ledgerbook_accounting.models import Ledger
from ledgerbook_core.enums import LedgerType, Role

ADMIN_PASSWORD = 'admin123'
USER_PASSWORD = 'user123'


class LedgerbookAPITestCase(APITestCase):
    """
    Seeds one master admin and one regular account and offers
    helpers for bearer authentication and fixtures.
    """

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_superuser(
            email='admin@example.com', name='Master Admin', password=ADMIN_PASSWORD,
        )
        cls.user = User.objects.create_user(
            email='user1@example.com', name='John Doe', password=USER_PASSWORD,
            role=Role.USER, created_by=cls.admin,
        )

    def authenticate(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')

    def logout_client(self):
        self.client.credentials()

    @staticmethod
    def make_user(email, name='Someone', password=USER_PASSWORD, **extra):
        return User.objects.create_user(email=email, name=name, password=password, **extra)

    @staticmethod
    def make_ledger(name, ledger_type=LedgerType.ASSET, balance='0.00', **extra):
        return Ledger.objects.create(name=name, ledger_type=ledger_type, balance=Decimal(balance), **extra)
