# audit/models.py

import uuid

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _

from ledgerbook_core.enums import AuditAction, AuditTargetModel, Role


class AuditLogEntry(models.Model):
    """
    Append-only record of a mutating or security-relevant action.

    The actor reference carries no database constraint so entries outlive the
    accounts they mention; `actor_role` keeps the role the actor had at the time.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    action = models.CharField(max_length=40, choices=AuditAction.choices, db_index=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True, blank=True,
        related_name='audit_entries',
    )
    actor_role = models.CharField(max_length=20, choices=Role.choices, blank=True)
    target_model = models.CharField(max_length=20, choices=AuditTargetModel.choices, blank=True)
    target_id = models.CharField(max_length=64, blank=True)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Audit Log Entry')
        verbose_name_plural = _('Audit Log Entries')
        indexes = [
            models.Index(fields=['actor', '-created_at'], name='audit_actor_created_idx'),
            models.Index(fields=['action', '-created_at'], name='audit_action_created_idx'),
        ]

    def __str__(self):
        return f"{self.action} by {self.actor_id or 'system'} at {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise PermissionDenied(_("Audit log entries are append-only."))
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionDenied(_("Audit log entries cannot be deleted."))
