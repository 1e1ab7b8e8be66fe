from django.contrib import admin
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse

from accounts.admin import UserModelAdmin
from accounts.models import User
from ledgerbook_core.enums import Role

NEW_PASSWORD = 'Sturdy-pass-42'


class UserModelAdminTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create_superuser(email='admin@example.com', name='Admin', password='admin123')
        cls.user = User.objects.create_user(email='user1@example.com', name='John Doe', password='user123')

    def setUp(self):
        self.model_admin = UserModelAdmin(User, admin.site)
        self.request = RequestFactory().get('/django-admin/accounts/user/')
        self.request.user = self.admin
        self.client.force_login(self.admin)

    def add_user(self, email):
        return self.client.post(reverse('admin:accounts_user_add'), {
            'email': email, 'name': 'Added Here', 'password1': NEW_PASSWORD, 'password2': NEW_PASSWORD,
        })

    def test_bulk_delete_is_not_offered(self):
        self.assertNotIn('delete_selected', self.model_admin.get_actions(self.request))

    def test_master_admin_cannot_be_deleted(self):
        self.assertFalse(self.model_admin.has_delete_permission(self.request, self.admin))
        self.assertTrue(self.model_admin.has_delete_permission(self.request, self.user))

    def test_active_flag_is_locked_for_master_admins(self):
        self.assertIn('is_active', self.model_admin.get_readonly_fields(self.request, self.admin))
        self.assertNotIn('is_active', self.model_admin.get_readonly_fields(self.request, self.user))

    def test_master_admin_stays_active_when_change_form_posts_it_off(self):
        self.client.post(reverse('admin:accounts_user_change', args=[self.admin.pk]), {
            'email': self.admin.email, 'name': self.admin.name, 'is_staff': 'on', 'is_superuser': 'on',
        })

        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_add_creates_a_regular_account(self):
        response = self.add_user('Added@Example.com')

        self.assertEqual(response.status_code, 302)
        added = User.objects.get(email='added@example.com')
        self.assertEqual(added.role, Role.USER)
        self.assertEqual(added.created_by, self.admin)
        self.assertTrue(added.check_password(NEW_PASSWORD))

    def test_add_rejects_a_duplicate_email(self):
        response = self.add_user('USER1@example.com')

        self.assertEqual(response.status_code, 200)
        self.assertIn('email', response.context['adminform'].form.errors)
        self.assertEqual(User.objects.filter(email='user1@example.com').count(), 1)

    @override_settings(LEDGERBOOK_MAX_USERS=1)
    def test_add_respects_the_user_cap(self):
        response = self.add_user('extra@example.com')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.context['adminform'].form.non_field_errors(),
            ['Maximum number of users (1) reached. Cannot create more users.'],
        )
        self.assertFalse(User.objects.filter(email='extra@example.com').exists())
