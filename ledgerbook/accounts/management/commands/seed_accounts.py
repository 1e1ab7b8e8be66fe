# accounts/management/commands/seed_accounts.py

import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from accounts import services as account_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        'Creates the initial Master Admin account if none exists. '
        'With --with-demo-users also creates the demo user accounts (up to the user cap).'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            default=getattr(settings, 'LEDGERBOOK_SEED_ADMIN_EMAIL', 'admin@example.com'),
            help='Email for the master admin.',
        )
        parser.add_argument(
            '--password',
            default=getattr(settings, 'LEDGERBOOK_SEED_ADMIN_PASSWORD', 'admin123'),
            help='Password for the master admin.',
        )
        parser.add_argument(
            '--name',
            default=getattr(settings, 'LEDGERBOOK_SEED_ADMIN_NAME', 'Master Administrator'),
            help='Display name for the master admin.',
        )
        parser.add_argument(
            '--with-demo-users',
            action='store_true',
            help='Also create user1..user3@example.com (password: user123).',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        admin, created = account_service.ensure_master_admin(
            email=options['email'], password=options['password'], name=options['name'],
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f"Created master admin {admin.email}."))
        else:
            self.stdout.write(self.style.WARNING(f"Master admin already exists ({admin.email}). Skipping."))

        if options['with_demo_users']:
            demo_users = account_service.seed_demo_users(created_by=admin)
            for user in demo_users:
                self.stdout.write(self.style.SUCCESS(f"Created demo user {user.email}."))
            if not demo_users:
                self.stdout.write(self.style.WARNING("No demo users created (already present or cap reached)."))

        logger.info(f"seed_accounts finished (master admin created: {created}).")
