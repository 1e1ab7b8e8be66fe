import re
from decimal import Decimal

from rest_framework import status

from audit.models import AuditLogEntry
from ledgerbook_accounting.models import Transaction
from ledgerbook_core.enums import AuditAction, LedgerType, Role
from ledgerbook_core.tests.base import LedgerbookAPITestCase

TRANSACTIONS_URL = '/api/transactions'
VOUCHER_PATTERN = re.compile(r'^VCH-\d{6}-\d{4}$')


class TransactionApiTestCase(LedgerbookAPITestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.other = cls.make_user('user2@example.com', name='Jane Smith', role=Role.USER)
        cls.cash = cls.make_ledger('Cash', balance='1000.00')
        cls.sales = cls.make_ledger('Sales', ledger_type=LedgerType.INCOME)

    def post_transaction(self, amount='100.00', **overrides):
        payload = {
            'debit_ledger': str(self.cash.pk),
            'credit_ledger': str(self.sales.pk),
            'amount': amount,
            'narration': 'Counter sale',
            'type': 'sales',
        }
        payload.update(overrides)
        return self.client.post(TRANSACTIONS_URL, payload)


class CreateTransactionTests(TransactionApiTestCase):

    def setUp(self):
        self.authenticate(self.user)

    def test_create_posts_amount_to_both_ledgers(self):
        response = self.post_transaction(date='2026-03-15')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        txn = response.json()['data']['transaction']
        self.assertRegex(txn['voucher_number'], VOUCHER_PATTERN)
        self.assertEqual(txn['amount'], '100.00')
        self.assertEqual(txn['date'], '2026-03-15')
        self.assertEqual(txn['type'], 'sales')
        self.assertEqual(txn['debit_ledger'], {'id': str(self.cash.pk), 'name': 'Cash', 'type': 'asset'})
        self.assertEqual(txn['created_by']['email'], 'user1@example.com')

        self.cash.refresh_from_db()
        self.sales.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('1100.00'))
        self.assertEqual(self.sales.balance, Decimal('100.00'))

        entry = AuditLogEntry.objects.get(action=AuditAction.CREATE_TRANSACTION)
        self.assertEqual(entry.target_model, 'Transaction')
        self.assertEqual(entry.details['amount'], '100.00')
        self.assertEqual(entry.details['debit_ledger'], str(self.cash.pk))

    def test_date_defaults_to_today(self):
        response = self.post_transaction()

        txn = Transaction.objects.get(pk=response.json()['data']['transaction']['id'])
        self.assertEqual(response.json()['data']['transaction']['date'], txn.date.isoformat())

    def test_amount_must_be_positive(self):
        response = self.post_transaction(amount='0')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'], [{'field': 'amount', 'message': 'Amount must be greater than 0'}])
        self.assertFalse(Transaction.all_objects.exists())

    def test_missing_fields(self):
        response = self.client.post(TRANSACTIONS_URL, {'amount': '5.00', 'type': 'journal'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        errors = {error['field']: error['message'] for error in response.json()['errors']}
        self.assertEqual(errors['debit_ledger'], 'Debit ledger is required')
        self.assertEqual(errors['credit_ledger'], 'Credit ledger is required')
        self.assertIn('narration', errors)

    def test_unknown_or_inactive_ledger(self):
        closed = self.make_ledger('Closed', is_active=False)

        response = self.post_transaction(debit_ledger=str(closed.pk))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['message'], 'Debit ledger not found')

        response = self.post_transaction(credit_ledger='00000000-0000-0000-0000-000000000000')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['message'], 'Credit ledger not found')

        self.cash.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('1000.00'))


class TransactionVisibilityTests(TransactionApiTestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        cls.own = cls.record(cls.user, 'VCH-260101-1111', '10.00', 'sales', '2026-01-01')
        cls.own_payment = cls.record(cls.user, 'VCH-260201-2222', '20.00', 'payment', '2026-02-01')
        cls.foreign = cls.record(cls.other, 'VCH-260301-3333', '30.00', 'sales', '2026-03-01')

    @classmethod
    def record(cls, owner, voucher_number, amount, transaction_type, on_date):
        return Transaction.objects.create(
            voucher_number=voucher_number, debit_ledger=cls.cash, credit_ledger=cls.sales,
            amount=Decimal(amount), narration='Seeded', transaction_type=transaction_type,
            date=on_date, created_by=owner,
        )

    def test_user_lists_only_own_transactions(self):
        self.authenticate(self.user)

        data = self.client.get(TRANSACTIONS_URL).json()['data']

        self.assertEqual(
            [txn['voucher_number'] for txn in data['transactions']],
            ['VCH-260201-2222', 'VCH-260101-1111'],
        )
        self.assertEqual(data['pagination'], {'page': 1, 'limit': 20, 'total': 2, 'pages': 1})

    def test_page_past_the_end_is_an_empty_listing(self):
        self.authenticate(self.user)

        response = self.client.get(TRANSACTIONS_URL, {'page': 3})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['transactions'], [])
        self.assertEqual(data['pagination'], {'page': 3, 'limit': 20, 'total': 2, 'pages': 1})

    def test_master_admin_lists_everything(self):
        self.authenticate(self.admin)

        data = self.client.get(TRANSACTIONS_URL).json()['data']

        self.assertEqual(data['pagination']['total'], 3)

    def test_list_filters(self):
        self.authenticate(self.admin)

        by_type = self.client.get(TRANSACTIONS_URL, {'type': 'sales'}).json()['data']
        self.assertEqual(by_type['pagination']['total'], 2)

        by_date = self.client.get(TRANSACTIONS_URL, {'start_date': '2026-02-01', 'end_date': '2026-03-01'})
        self.assertEqual(
            [txn['voucher_number'] for txn in by_date.json()['data']['transactions']],
            ['VCH-260301-3333', 'VCH-260201-2222'],
        )

    def test_owner_can_retrieve(self):
        self.authenticate(self.user)

        response = self.client.get(f'{TRANSACTIONS_URL}/{self.own.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['transaction']['voucher_number'], 'VCH-260101-1111')

    def test_foreign_transaction_is_forbidden(self):
        self.authenticate(self.user)

        response = self.client.get(f'{TRANSACTIONS_URL}/{self.foreign.pk}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()['message'], 'Access denied. You can only view your own transactions.')

        response = self.client.put(f'{TRANSACTIONS_URL}/{self.foreign.pk}', {'narration': 'Mine now'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()['message'], 'Access denied. You can only edit your own transactions.')

        response = self.client.delete(f'{TRANSACTIONS_URL}/{self.foreign.pk}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Transaction.objects.filter(pk=self.foreign.pk).exists())

    def test_master_admin_can_edit_any_transaction(self):
        self.authenticate(self.admin)

        response = self.client.put(f'{TRANSACTIONS_URL}/{self.foreign.pk}', {'narration': 'Corrected'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['transaction']['narration'], 'Corrected')

    def test_unknown_transaction(self):
        self.authenticate(self.user)

        response = self.client.get(f'{TRANSACTIONS_URL}/00000000-0000-0000-0000-000000000000')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['message'], 'Transaction not found.')


class UpdateAndDeleteTests(TransactionApiTestCase):

    def setUp(self):
        self.authenticate(self.user)
        response = self.post_transaction(amount='100.00')
        self.txn_id = response.json()['data']['transaction']['id']
        self.url = f'{TRANSACTIONS_URL}/{self.txn_id}'

    def test_partial_update_does_not_rebalance_ledgers(self):
        response = self.client.put(self.url, {'amount': '250.00', 'narration': 'Bigger sale'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['transaction']['amount'], '250.00')
        self.cash.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('1100.00'))

        entry = AuditLogEntry.objects.get(action=AuditAction.UPDATE_TRANSACTION)
        self.assertEqual(entry.details['changes'], {'amount': '250.00', 'narration': 'Bigger sale'})

    def test_update_validates_like_create(self):
        response = self.client.put(self.url, {'amount': '-1'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'][0]['field'], 'amount')

    def test_soft_delete(self):
        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], 'Transaction deleted successfully')

        self.assertFalse(Transaction.objects.filter(pk=self.txn_id).exists())
        deleted = Transaction.all_objects.get(pk=self.txn_id)
        self.assertTrue(deleted.is_deleted)
        self.assertEqual(deleted.deleted_by, self.user)

        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get(TRANSACTIONS_URL).json()['data']['pagination']['total'], 0)

        self.cash.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('1100.00'))
        self.assertTrue(AuditLogEntry.objects.filter(action=AuditAction.DELETE_TRANSACTION).exists())


class TransactionStatsTests(TransactionApiTestCase):

    def test_stats_are_scoped_to_the_caller(self):
        self.authenticate(self.user)
        self.post_transaction(amount='100.00', date='2026-01-10')
        self.post_transaction(amount='50.00', date='2026-01-20', type='payment')
        self.authenticate(self.other)
        self.post_transaction(amount='999.00', date='2026-01-15')
        self.authenticate(self.user)

        response = self.client.get(f'{TRANSACTIONS_URL}/stats')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['overall'], {
            'total_transactions': 2,
            'total_amount': '150.00',
            'avg_amount': '75.00',
            'min_amount': '50.00',
            'max_amount': '100.00',
        })
        self.assertEqual(data['by_type'], [
            {'type': 'payment', 'count': 1, 'total_amount': '50.00'},
            {'type': 'sales', 'count': 1, 'total_amount': '100.00'},
        ])

        ranged = self.client.get(f'{TRANSACTIONS_URL}/stats', {'start_date': '2026-01-15'}).json()['data']
        self.assertEqual(ranged['overall']['total_transactions'], 1)

    def test_empty_range_reports_zeros(self):
        self.authenticate(self.user)

        data = self.client.get(f'{TRANSACTIONS_URL}/stats').json()['data']

        self.assertEqual(data['overall']['total_transactions'], 0)
        self.assertEqual(data['overall']['total_amount'], '0.00')
        self.assertEqual(data['by_type'], [])

    def test_inverted_range_is_rejected(self):
        self.authenticate(self.user)

        response = self.client.get(f'{TRANSACTIONS_URL}/stats', {'start_date': '2026-02-01', 'end_date': '2026-01-01'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'][0]['field'], 'end_date')
