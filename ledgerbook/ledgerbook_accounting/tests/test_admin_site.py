from decimal import Decimal

from django.contrib import admin
from django.test import RequestFactory, TestCase

from accounts.models import User
from audit.models import AuditLogEntry
from ledgerbook_accounting.admin import TransactionAdmin
from ledgerbook_accounting.models import Ledger, Transaction
from ledgerbook_accounting.services import transaction_service
from ledgerbook_core.enums import AuditAction, LedgerType, TransactionType


class TransactionAdminTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_superuser(email='admin@example.com', name='Admin', password='admin123')
        cls.user = User.objects.create_user(email='books@example.com', name='Books', password='secret1')
        cls.cash = Ledger.objects.create(name='Cash', ledger_type=LedgerType.ASSET, balance=Decimal('10.00'))
        cls.bank = Ledger.objects.create(name='Bank', ledger_type=LedgerType.ASSET, balance=Decimal('0.00'))

    def setUp(self):
        self.model_admin = TransactionAdmin(Transaction, admin.site)
        self.request = RequestFactory().post('/django-admin/ledgerbook_accounting/transaction/')
        self.request.user = self.admin

    def create(self):
        return transaction_service.create_transaction(
            actor=self.user, debit_ledger_id=self.cash.pk, credit_ledger_id=self.bank.pk,
            amount=Decimal('4.00'), narration='Deposit', transaction_type=TransactionType.CONTRA,
        )

    def test_delete_stamps_deleter_and_records_audit(self):
        txn = self.create()

        self.model_admin.delete_model(self.request, txn)

        stored = Transaction.all_objects.get(pk=txn.pk)
        self.assertIsNotNone(stored.deleted)
        self.assertEqual(stored.deleted_by, self.admin)
        entry = AuditLogEntry.objects.get(action=AuditAction.DELETE_TRANSACTION)
        self.assertEqual(entry.actor, self.admin)
        self.assertEqual(entry.target_id, str(txn.pk))
        self.assertEqual(entry.details['voucher_number'], txn.voucher_number)

    def test_bulk_delete_goes_through_the_same_path(self):
        first, second = self.create(), self.create()

        self.model_admin.delete_queryset(self.request, Transaction.all_objects.filter(pk__in=[first.pk, second.pk]))

        self.assertFalse(Transaction.objects.filter(pk__in=[first.pk, second.pk]).exists())
        self.assertEqual(
            set(Transaction.all_objects.filter(pk__in=[first.pk, second.pk]).values_list('deleted_by', flat=True)),
            {self.admin.pk},
        )
        self.assertEqual(AuditLogEntry.objects.filter(action=AuditAction.DELETE_TRANSACTION).count(), 2)

    def test_already_deleted_rows_are_left_alone(self):
        txn = self.create()
        transaction_service.delete_transaction(txn, self.user)

        self.model_admin.delete_queryset(self.request, Transaction.all_objects.filter(pk=txn.pk))

        self.assertEqual(Transaction.all_objects.get(pk=txn.pk).deleted_by, self.user)
        self.assertFalse(AuditLogEntry.objects.filter(action=AuditAction.DELETE_TRANSACTION).exists())
