from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from rest_framework import status
from rest_framework.test import APITestCase

from audit.models import AuditLogEntry
from ledgerbook_accounting.models import Ledger
from ledgerbook_core.enums import AuditAction


class SeededInstanceFlowTests(APITestCase):
    """
    Drives a freshly seeded instance through the API the way a client would.
    """

    def setUp(self):
        call_command('seed_accounts', '--email', 'owner@example.com', '--password', 'owner-pass', stdout=StringIO())

    def login(self, email, password):
        response = self.client.post('/api/auth/login', {'email': email, 'password': password})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['data']['token']}")

    def test_admin_onboards_a_user_who_keeps_books(self):
        self.login('owner@example.com', 'owner-pass')
        created = self.client.post('/api/auth/register', {
            'name': 'Asha', 'email': 'asha@example.com', 'password': 'asha-pass',
        })
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)

        self.login('asha@example.com', 'asha-pass')
        cash = self.client.post('/api/ledgers', {'name': 'Cash', 'type': 'asset', 'balance': '500.00'})
        sales = self.client.post('/api/ledgers', {'name': 'Sales', 'type': 'income'})
        cash_id = cash.json()['data']['ledger']['id']
        sales_id = sales.json()['data']['ledger']['id']

        txn = self.client.post('/api/transactions', {
            'debit_ledger': cash_id, 'credit_ledger': sales_id, 'amount': '100.00',
            'narration': 'First sale', 'type': 'sales',
        })
        self.assertEqual(txn.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Ledger.objects.get(pk=cash_id).balance, Decimal('600.00'))
        self.assertEqual(Ledger.objects.get(pk=sales_id).balance, Decimal('100.00'))

        summary = self.client.get('/api/ledgers/summary').json()['data']
        self.assertEqual(summary['total_balance'], '700.00')

        self.login('owner@example.com', 'owner-pass')
        logs = self.client.get('/api/admin/audit-logs', {'sort_order': 'asc'}).json()['data']['logs']
        self.assertEqual(
            [log['action'] for log in logs],
            [
                AuditAction.LOGIN, AuditAction.CREATE_USER, AuditAction.LOGIN, AuditAction.CREATE_LEDGER,
                AuditAction.CREATE_LEDGER, AuditAction.CREATE_TRANSACTION, AuditAction.LOGIN,
            ],
        )
        self.assertEqual(AuditLogEntry.objects.filter(actor__email='asha@example.com').count(), 4)
