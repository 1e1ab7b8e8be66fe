import datetime

from django.utils import timezone
from rest_framework import status

from audit import services as audit_service
from ledgerbook_core.enums import AuditAction
from ledgerbook_core.tests.base import LedgerbookAPITestCase

AUDIT_URL = '/api/admin/audit-logs'


class AuditLogApiTests(LedgerbookAPITestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        audit_service.record_action(AuditAction.LOGIN, actor=cls.admin)
        audit_service.record_action(AuditAction.LOGIN, actor=cls.user)
        audit_service.record_action(AuditAction.CREATE_LEDGER, actor=cls.user, details={'name': 'Cash'})

    def setUp(self):
        self.authenticate(self.admin)

    def test_list_is_paginated_newest_first(self):
        response = self.client.get(AUDIT_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(len(data['logs']), 3)
        self.assertEqual(data['logs'][0]['action'], 'CREATE_LEDGER')
        self.assertEqual(data['pagination'], {'page': 1, 'limit': 50, 'total': 3, 'pages': 1})

    def test_filters(self):
        by_action = self.client.get(AUDIT_URL, {'action': 'LOGIN'}).json()['data']
        self.assertEqual(by_action['pagination']['total'], 2)

        by_user = self.client.get(AUDIT_URL, {'user_id': str(self.user.pk)}).json()['data']
        self.assertEqual({log['actor']['email'] for log in by_user['logs']}, {'user1@example.com'})

        oldest_first = self.client.get(AUDIT_URL, {'sort_order': 'asc'}).json()['data']
        self.assertEqual(oldest_first['logs'][-1]['action'], 'CREATE_LEDGER')

    def test_page_size_can_be_chosen(self):
        data = self.client.get(AUDIT_URL, {'limit': 2, 'page': 2}).json()['data']

        self.assertEqual(len(data['logs']), 1)
        self.assertEqual(data['pagination'], {'page': 2, 'limit': 2, 'total': 3, 'pages': 2})

    def test_entries_of_a_deleted_account_stay_listed(self):
        ghost = self.make_user('ghost@example.com', name='Ghost')
        audit_service.record_action(AuditAction.LOGIN, actor=ghost)
        ghost_id = ghost.pk
        ghost.delete()

        data = self.client.get(AUDIT_URL, {'user_id': str(ghost_id)}).json()['data']

        self.assertEqual(len(data['logs']), 1)
        self.assertIsNone(data['logs'][0]['actor'])
        self.assertEqual(data['pagination']['total'], 1)

    def test_page_past_the_end_is_empty(self):
        response = self.client.get(AUDIT_URL, {'page': 5})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['logs'], [])
        self.assertEqual(data['pagination'], {'page': 5, 'limit': 50, 'total': 3, 'pages': 1})

    def test_page_must_be_a_positive_integer(self):
        response = self.client.get(AUDIT_URL, {'page': 0})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'][0]['field'], 'page')

    def test_unknown_action_filter_is_a_validation_error(self):
        response = self.client.get(AUDIT_URL, {'action': 'NUKE'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'][0]['field'], 'action')

    def test_stats(self):
        response = self.client.get(f'{AUDIT_URL}/stats')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['total_actions'], 3)
        self.assertEqual(data['action_counts'][0], {'action': 'LOGIN', 'count': 2})
        self.assertEqual(data['top_users'][0]['user']['email'], 'user1@example.com')

    def test_stats_honour_a_date_range(self):
        today = timezone.localdate()

        future = self.client.get(f'{AUDIT_URL}/stats', {'start_date': str(today + datetime.timedelta(days=30))})
        self.assertEqual(future.status_code, status.HTTP_200_OK)
        self.assertEqual(future.json()['data'], {'total_actions': 0, 'action_counts': [], 'top_users': []})

        around_today = self.client.get(f'{AUDIT_URL}/stats', {'start_date': str(today), 'end_date': str(today)})
        self.assertEqual(around_today.json()['data']['total_actions'], 3)

    def test_stats_reject_an_inverted_range(self):
        response = self.client.get(f'{AUDIT_URL}/stats', {'start_date': '2026-02-01', 'end_date': '2026-01-01'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['errors'][0]['field'], 'end_date')

    def test_recent(self):
        response = self.client.get(f'{AUDIT_URL}/recent', {'limit': 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()['data']['logs']), 2)

    def test_recent_limit_is_bounded(self):
        response = self.client.get(f'{AUDIT_URL}/recent', {'limit': 500})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_regular_user_is_refused(self):
        self.authenticate(self.user)

        response = self.client.get(AUDIT_URL)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()['message'], 'Access denied. Master Admin privileges required.')
