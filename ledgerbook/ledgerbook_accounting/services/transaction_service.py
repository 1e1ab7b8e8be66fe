# ledgerbook_accounting/services/transaction_service.py

import logging
import datetime
from decimal import Decimal
from typing import Optional

from django.db import IntegrityError, transaction as db_transaction
from django.db.models import Avg, Count, Max, Min, Sum
from django.utils.translation import gettext_lazy as _

from ledgerbook_core.exceptions import ConflictError, ResourceNotFound
from ledgerbook_core.utils import round_decimal, to_decimal

from ..models import Ledger, Transaction
from . import ledger_service, voucher_utils

logger = logging.getLogger(__name__)

DEBIT_LEDGER_NOT_FOUND = _("Debit ledger not found")
CREDIT_LEDGER_NOT_FOUND = _("Credit ledger not found")


# =============================================================================
# Queries
# =============================================================================

def live_transactions():
    """Non-deleted transactions with their ledgers and creator joined."""
    return Transaction.objects.select_related('debit_ledger', 'credit_ledger', 'created_by')


def visible_transactions(actor):
    """
    Transactions `actor` may list: all of them for a master admin,
    otherwise only the ones the actor created.
    """
    queryset = live_transactions()
    if not actor.is_master_admin:
        queryset = queryset.filter(created_by=actor)
    return queryset.order_by('-date', '-created_at')


def transaction_stats(actor, start_date: Optional[datetime.date] = None,
                      end_date: Optional[datetime.date] = None) -> dict:
    """
    Count/sum/avg/min/max over the caller's visible transactions, overall and per type.
    Empty ranges report zeros.
    """
    queryset = visible_transactions(actor)
    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lte=end_date)

    overall = queryset.aggregate(
        total_transactions=Count('id'),
        total_amount=Sum('amount'),
        avg_amount=Avg('amount'),
        min_amount=Min('amount'),
        max_amount=Max('amount'),
    )
    by_type = (
        queryset.values('transaction_type')
        .annotate(count=Count('id'), total_amount=Sum('amount'))
        .order_by('transaction_type')
    )
    return {
        'overall': {
            'total_transactions': overall['total_transactions'] or 0,
            'total_amount': to_decimal(overall['total_amount']),
            'avg_amount': to_decimal(overall['avg_amount']),
            'min_amount': to_decimal(overall['min_amount']),
            'max_amount': to_decimal(overall['max_amount']),
        },
        'by_type': [
            {'type': row['transaction_type'], 'count': row['count'], 'total_amount': to_decimal(row['total_amount'])}
            for row in by_type
        ],
    }


# =============================================================================
# Commands
# =============================================================================

def _lock_ledgers(debit_ledger_id, credit_ledger_id) -> tuple:
    """
    Loads and row-locks both active ledgers in primary-key order.

    Raises:
        ResourceNotFound: Either ledger is absent or inactive.
    """
    ids = {str(debit_ledger_id), str(credit_ledger_id)}
    locked = {
        str(ledger.pk): ledger
        for ledger in Ledger.objects.select_for_update().filter(pk__in=ids, is_active=True).order_by('pk')
    }

    debit_ledger = locked.get(str(debit_ledger_id))
    if debit_ledger is None:
        raise ResourceNotFound(DEBIT_LEDGER_NOT_FOUND)
    credit_ledger = locked.get(str(credit_ledger_id))
    if credit_ledger is None:
        raise ResourceNotFound(CREDIT_LEDGER_NOT_FOUND)
    return debit_ledger, credit_ledger


def _save_with_voucher_number(txn: Transaction) -> None:
    """
    Inserts `txn`, drawing a fresh voucher number until the unique index accepts it.
    """
    for attempt in range(1, voucher_utils.MAX_VOUCHER_ATTEMPTS + 1):
        txn.voucher_number = voucher_utils.generate_voucher_number()
        try:
            with db_transaction.atomic():
                txn.save(force_insert=True)
            return
        except IntegrityError:
            if not Transaction.all_objects.filter(voucher_number=txn.voucher_number).exists():
                raise
            logger.warning(
                f"Voucher number {txn.voucher_number} already taken (attempt {attempt}/"
                f"{voucher_utils.MAX_VOUCHER_ATTEMPTS}). Retrying."
            )
    logger.error(f"Could not allocate a voucher number after {voucher_utils.MAX_VOUCHER_ATTEMPTS} attempts.")
    raise ConflictError(_("Could not allocate a unique voucher number. Please retry."))


@db_transaction.atomic
def create_transaction(*, actor, debit_ledger_id, credit_ledger_id, amount: Decimal, narration: str,
                       transaction_type: str, date: Optional[datetime.date] = None) -> Transaction:
    """
    Records a voucher and posts it to both ledgers.

    Both referenced ledgers have their balance increased by `amount`; this is
    the simplified posting rule of the application, not canonical double entry.

    Raises:
        ResourceNotFound: A referenced ledger is absent or inactive.
    """
    debit_ledger, credit_ledger = _lock_ledgers(debit_ledger_id, credit_ledger_id)
    amount = round_decimal(amount)

    txn = Transaction(
        debit_ledger=debit_ledger,
        credit_ledger=credit_ledger,
        amount=amount,
        narration=narration,
        transaction_type=transaction_type,
        created_by=actor,
    )
    if date is not None:
        txn.date = date
    _save_with_voucher_number(txn)

    ledger_service.increment_balance(debit_ledger.pk, amount)
    ledger_service.increment_balance(credit_ledger.pk, amount)

    logger.info(
        f"Transaction {txn.voucher_number} ({amount}) posted by {actor.email}: "
        f"Dr '{debit_ledger.name}' / Cr '{credit_ledger.name}'."
    )
    return txn


@db_transaction.atomic
def update_transaction(txn: Transaction, *, debit_ledger_id=None, credit_ledger_id=None,
                       amount: Optional[Decimal] = None, narration: Optional[str] = None,
                       transaction_type: Optional[str] = None, date: Optional[datetime.date] = None) -> dict:
    """
    Partial edit of a transaction. Returns the changed fields.

    Ledger balances are not re-adjusted when amount or ledgers change.
    """
    changes = {}
    if debit_ledger_id is not None or credit_ledger_id is not None:
        debit_ledger, credit_ledger = _lock_ledgers(
            debit_ledger_id or txn.debit_ledger_id, credit_ledger_id or txn.credit_ledger_id,
        )
        if debit_ledger.pk != txn.debit_ledger_id:
            txn.debit_ledger = debit_ledger
            changes['debit_ledger'] = str(debit_ledger.pk)
        if credit_ledger.pk != txn.credit_ledger_id:
            txn.credit_ledger = credit_ledger
            changes['credit_ledger'] = str(credit_ledger.pk)
    if amount is not None and round_decimal(amount) != txn.amount:
        txn.amount = round_decimal(amount)
        changes['amount'] = txn.amount
    if narration is not None and narration != txn.narration:
        txn.narration = narration
        changes['narration'] = narration
    if transaction_type is not None and transaction_type != txn.transaction_type:
        txn.transaction_type = transaction_type
        changes['type'] = transaction_type
    if date is not None and date != txn.date:
        txn.date = date
        changes['date'] = date

    if changes:
        txn.save()
        logger.info(f"Transaction {txn.voucher_number} updated: {sorted(changes)}.")
    return changes


@db_transaction.atomic
def delete_transaction(txn: Transaction, actor) -> Transaction:
    """
    Soft-deletes `txn`, stamping who deleted it. Ledger balances are left as they are.
    """
    txn.deleted_by = actor
    txn.save(update_fields=['deleted_by', 'updated_at'])
    txn.delete()
    logger.info(f"Transaction {txn.voucher_number} soft-deleted by {actor.email}.")
    return txn
