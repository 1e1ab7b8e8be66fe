# ledgerbook_accounting/models/ledger.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _

from ledgerbook_core.enums import LedgerType
from ledgerbook_core.validators import validate_non_negative_balance


class Ledger(models.Model):
    """
    A named account bucket with a running balance.

    The balance changes only through transaction postings. Ledgers are never
    hard-deleted through the API; removal flips `is_active` off, which also
    frees the name for reuse.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Ledger Name"), max_length=200)
    ledger_type = models.CharField(_("Ledger Type"), max_length=20, choices=LedgerType.choices, db_index=True)
    balance = models.DecimalField(
        _("Balance"), max_digits=18, decimal_places=2, default=Decimal('0.00'),
        validators=[validate_non_negative_balance],
    )
    description = models.CharField(_("Description"), max_length=500, blank=True)
    is_active = models.BooleanField(_("Is Active"), default=True, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='ledgers_created',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = _('Ledger')
        verbose_name_plural = _('Ledgers')
        constraints = [
            models.UniqueConstraint(
                Lower('name'),
                condition=models.Q(is_active=True),
                name='unique_active_ledger_name_ci',
            ),
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name='ledger_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_ledger_type_display()})"
