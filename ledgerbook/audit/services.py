"""
audit/services.py

Writes and summarises the audit trail.

`record_action` is called by views after a domain operation has returned.
It is best effort: the entry is written in its own savepoint and any failure
is logged and swallowed, so the caller's operation and response are never
affected. A crash between the primary write and this call loses the entry.
"""
import datetime
import logging
from typing import Any, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Max

from ledgerbook_core.enums import AuditTargetModel
from ledgerbook_core.utils import get_client_ip, get_user_agent

from .models import AuditLogEntry

logger = logging.getLogger(__name__)

TOP_USERS_LIMIT = 10
RECENT_ENTRIES_DEFAULT = 20

TARGET_KINDS = {choice.value: choice for choice in AuditTargetModel}


def _target_kind(target: Any) -> str:
    if target is None:
        return ''
    return TARGET_KINDS.get(type(target).__name__, '')


def record_action(action: str, *, actor: Any = None, target: Any = None, target_id: Any = None,
                  details: Optional[dict] = None, request: Any = None) -> Optional[AuditLogEntry]:
    """
    Appends an audit entry. Never raises.

    Args:
        action: An AuditAction value.
        actor: The account performing the action (anonymous users are recorded as no actor).
        target: The model instance acted upon, if any.
        target_id: Overrides `target.pk`; needed once the target row is gone.
        details: JSON-serialisable payload.
        request: The incoming request, for client IP and user agent.

    Returns:
        The saved entry, or None when the write failed.
    """
    if actor is not None and not getattr(actor, 'is_authenticated', False):
        actor = None
    if target_id is None and target is not None:
        target_id = target.pk

    try:
        with transaction.atomic():
            entry = AuditLogEntry.objects.create(
                action=action,
                actor=actor,
                actor_role=getattr(actor, 'role', '') or '',
                target_model=_target_kind(target),
                target_id=str(target_id) if target_id is not None else '',
                details=details or {},
                ip_address=get_client_ip(request),
                user_agent=get_user_agent(request),
            )
    except Exception:
        logger.exception(
            f"[AuditRecorder] Failed to record {action} for actor "
            f"{getattr(actor, 'pk', None)} (target {target_id}). Continuing without an entry."
        )
        return None

    logger.debug(f"[AuditRecorder] Recorded {action} (entry {entry.pk}).")
    return entry


def audit_entries():
    # Prefetched, not joined: a filter on the actor turns the join into an inner
    # one, which would hide entries whose account has been deleted.
    return AuditLogEntry.objects.prefetch_related('actor')


def recent_entries(limit: int = RECENT_ENTRIES_DEFAULT):
    return audit_entries().order_by('-created_at')[:limit]


def audit_stats(start_date: Optional[datetime.date] = None,
                end_date: Optional[datetime.date] = None) -> dict:
    """
    Totals per action and the most active accounts, optionally limited to
    entries recorded between two calendar days (inclusive).
    """
    entries = AuditLogEntry.objects.all()
    if start_date:
        entries = entries.filter(created_at__date__gte=start_date)
    if end_date:
        entries = entries.filter(created_at__date__lte=end_date)
    action_counts = [
        {'action': row['action'], 'count': row['count']}
        for row in entries.values('action').annotate(count=Count('id')).order_by('-count', 'action')
    ]

    top_rows = list(
        entries.filter(actor__isnull=False)
        .values('actor')
        .annotate(count=Count('id'), last_activity=Max('created_at'))
        .order_by('-count', '-last_activity')[:TOP_USERS_LIMIT]
    )
    users = get_user_model().objects.in_bulk([row['actor'] for row in top_rows])
    top_users = []
    for row in top_rows:
        user = users.get(row['actor'])
        top_users.append({
            'user_id': row['actor'],
            'count': row['count'],
            'last_activity': row['last_activity'],
            'user': {'id': user.pk, 'name': user.name, 'email': user.email, 'role': user.role} if user else None,
        })

    return {
        'total_actions': entries.count(),
        'action_counts': action_counts,
        'top_users': top_users,
    }
