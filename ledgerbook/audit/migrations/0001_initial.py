import uuid

import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLogEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('action', models.CharField(choices=[('LOGIN', 'Login'), ('LOGOUT', 'Logout'), ('CHANGE_PASSWORD', 'Change Password'), ('CREATE_USER', 'Create User'), ('UPDATE_USER', 'Update User'), ('DELETE_USER', 'Delete User'), ('ACTIVATE_USER', 'Activate User'), ('DEACTIVATE_USER', 'Deactivate User'), ('RESET_PASSWORD', 'Reset Password'), ('CREATE_LEDGER', 'Create Ledger'), ('UPDATE_LEDGER', 'Update Ledger'), ('DELETE_LEDGER', 'Delete Ledger'), ('CREATE_TRANSACTION', 'Create Transaction'), ('UPDATE_TRANSACTION', 'Update Transaction'), ('DELETE_TRANSACTION', 'Delete Transaction'), ('VIEW_REPORT', 'View Report'), ('EXPORT_DATA', 'Export Data'), ('SYSTEM_SETTINGS_CHANGE', 'System Settings Change')], db_index=True, max_length=40)),
                ('actor_role', models.CharField(blank=True, choices=[('master_admin', 'Master Admin'), ('user', 'User')], max_length=20)),
                ('target_model', models.CharField(blank=True, choices=[('User', 'User'), ('Ledger', 'Ledger'), ('Transaction', 'Transaction')], max_length=20)),
                ('target_id', models.CharField(blank=True, max_length=64)),
                ('details', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('actor', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='audit_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log Entry',
                'verbose_name_plural': 'Audit Log Entries',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['actor', '-created_at'], name='audit_actor_created_idx'),
                    models.Index(fields=['action', '-created_at'], name='audit_action_created_idx'),
                ],
            },
        ),
    ]
