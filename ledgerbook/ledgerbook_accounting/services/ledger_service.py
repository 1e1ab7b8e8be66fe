# ledgerbook_accounting/services/ledger_service.py

import logging
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction as db_transaction
from django.db.models import Count, F, Q, Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerbook_core.enums import SortOrder
from ledgerbook_core.exceptions import DuplicateLedgerNameError, LedgerInUseError
from ledgerbook_core.utils import ZERO_DECIMAL, fetch_or_404, round_decimal, to_decimal

from ..models import Ledger, Transaction

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 10

# API sort key -> model field
SORTABLE_FIELDS = {
    'name': 'name',
    'type': 'ledger_type',
    'balance': 'balance',
    'created_at': 'created_at',
    'updated_at': 'updated_at',
}


# =============================================================================
# Queries
# =============================================================================

def active_ledgers():
    return Ledger.objects.filter(is_active=True)


def list_ledgers(*, ledger_type: Optional[str] = None, search: Optional[str] = None,
                 sort_by: str = 'name', sort_order: str = SortOrder.ASC):
    """
    Active ledgers, optionally narrowed by type and a case-insensitive name fragment.
    """
    queryset = active_ledgers().select_related('created_by')
    if ledger_type:
        queryset = queryset.filter(ledger_type=ledger_type)
    if search:
        queryset = queryset.filter(name__icontains=search.strip())

    field = SORTABLE_FIELDS.get(sort_by, 'name')
    ordering = field if sort_order == SortOrder.ASC else f'-{field}'
    return queryset.order_by(ordering, 'id')


def get_ledger(ledger_id) -> Ledger:
    return fetch_or_404(active_ledgers().select_related('created_by'), _("Ledger not found"), pk=ledger_id)


def referencing_transactions(ledger: Ledger):
    """Live (not soft-deleted) transactions posting to `ledger` on either side."""
    return Transaction.objects.filter(Q(debit_ledger=ledger) | Q(credit_ledger=ledger))


def recent_transactions(ledger: Ledger, limit: int = RECENT_TRANSACTIONS_LIMIT):
    return (
        referencing_transactions(ledger)
        .select_related('debit_ledger', 'credit_ledger', 'created_by')
        .order_by('-date', '-created_at')[:limit]
    )


def ledger_summary() -> dict:
    """
    Count and balance per ledger type over active ledgers, plus the grand total.
    """
    rows = (
        active_ledgers()
        .values('ledger_type')
        .annotate(count=Count('id'), total_balance=Sum('balance'))
        .order_by('ledger_type')
    )
    by_type = [
        {'type': row['ledger_type'], 'count': row['count'], 'total_balance': to_decimal(row['total_balance'])}
        for row in rows
    ]
    total_balance = sum((entry['total_balance'] for entry in by_type), ZERO_DECIMAL)
    return {'by_type': by_type, 'total_balance': round_decimal(total_balance)}


# =============================================================================
# Commands
# =============================================================================

def _name_taken(name: str, exclude_pk=None) -> bool:
    queryset = active_ledgers().filter(name__iexact=name)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.exists()


def create_ledger(*, name: str, ledger_type: str, balance: Decimal = ZERO_DECIMAL,
                  description: str = '', created_by=None) -> Ledger:
    """
    Creates an active ledger with an opening balance.

    Raises:
        DuplicateLedgerNameError: An active ledger already uses this name (any case).
    """
    name = name.strip()
    if _name_taken(name):
        raise DuplicateLedgerNameError()
    try:
        with db_transaction.atomic():
            ledger = Ledger.objects.create(
                name=name,
                ledger_type=ledger_type,
                balance=round_decimal(balance or ZERO_DECIMAL),
                description=description or '',
                created_by=created_by,
            )
    except IntegrityError as exc:
        logger.warning(f"Ledger '{name}' lost a race on the active-name index: {exc}")
        raise DuplicateLedgerNameError() from exc

    logger.info(f"Ledger {ledger.pk} ('{ledger.name}', {ledger.ledger_type}) created.")
    return ledger


def update_ledger(ledger: Ledger, *, name: Optional[str] = None, ledger_type: Optional[str] = None,
                  description: Optional[str] = None) -> dict:
    """
    Partial edit of name, type and description. Returns the changed fields.
    The balance is not editable here.
    """
    changes = {}
    if name is not None:
        name = name.strip()
        if name != ledger.name:
            if _name_taken(name, exclude_pk=ledger.pk):
                raise DuplicateLedgerNameError()
            ledger.name = name
            changes['name'] = name
    if ledger_type is not None and ledger_type != ledger.ledger_type:
        ledger.ledger_type = ledger_type
        changes['type'] = ledger_type
    if description is not None and description != ledger.description:
        ledger.description = description
        changes['description'] = description

    if changes:
        try:
            with db_transaction.atomic():
                ledger.save()
        except IntegrityError as exc:
            raise DuplicateLedgerNameError() from exc
        logger.info(f"Ledger {ledger.pk} updated: {sorted(changes)}.")
    return changes


@db_transaction.atomic
def deactivate_ledger(ledger: Ledger) -> Ledger:
    """
    Soft-removes a ledger (is_active=False).

    Raises:
        LedgerInUseError: Live transactions still reference the ledger.
    """
    locked = Ledger.objects.select_for_update().get(pk=ledger.pk)
    in_use = referencing_transactions(locked).count()
    if in_use:
        raise LedgerInUseError(
            _("Cannot delete ledger. It has %(count)s transaction(s).") % {'count': in_use}
        )
    locked.is_active = False
    locked.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"Ledger {locked.pk} ('{locked.name}') deactivated.")
    return locked


def increment_balance(ledger_id, amount: Decimal) -> None:
    """
    Adds `amount` to a ledger balance in a single UPDATE statement.
    """
    Ledger.objects.filter(pk=ledger_id).update(balance=F('balance') + amount, updated_at=timezone.now())
