# ledgerbook_accounting/models/transaction.py

import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from safedelete import SOFT_DELETE
from safedelete.models import SafeDeleteModel

from ledgerbook_core.enums import TransactionType
from ledgerbook_core.utils import today
from ledgerbook_core.validators import validate_positive_amount

from .ledger import Ledger


class Transaction(SafeDeleteModel):
    """
    A single voucher moving `amount` between a debit and a credit ledger.

    Deletion is soft (safedelete's `deleted` timestamp plus `deleted_by`):
    the default manager hides deleted rows, `all_objects` still sees them.
    """
    _safedelete_policy = SOFT_DELETE

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    voucher_number = models.CharField(_("Voucher Number"), max_length=32, unique=True, editable=False)
    date = models.DateField(_("Transaction Date"), default=today, db_index=True)
    debit_ledger = models.ForeignKey(
        Ledger, on_delete=models.PROTECT, related_name='debit_transactions',
        verbose_name=_("Debit Ledger"),
    )
    credit_ledger = models.ForeignKey(
        Ledger, on_delete=models.PROTECT, related_name='credit_transactions',
        verbose_name=_("Credit Ledger"),
    )
    amount = models.DecimalField(
        _("Amount"), max_digits=18, decimal_places=2, validators=[validate_positive_amount],
    )
    narration = models.CharField(_("Narration"), max_length=1000)
    transaction_type = models.CharField(
        _("Transaction Type"), max_length=20, choices=TransactionType.choices,
        default=TransactionType.JOURNAL, db_index=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='transactions_created',
    )
    deleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='transactions_deleted',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        indexes = [
            models.Index(fields=['created_by', '-date'], name='txn_creator_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='transaction_amount_positive'),
        ]

    def __str__(self):
        return f"{self.voucher_number} ({self.amount})"

    @property
    def is_deleted(self) -> bool:
        return self.deleted is not None
