"""
Helpers shared by the Ledgerbook apps: money rounding, lookups and request metadata.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
import ipaddress
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from .exceptions import ResourceNotFound

ZERO_DECIMAL = Decimal('0.00')


def today() -> date:
    """Today in the configured time zone; the default transaction date."""
    return timezone.localdate()


def round_decimal(value: Decimal, precision: str = '0.01') -> Decimal:
    """Currency rounding (half up, cents by default)."""
    return value.quantize(Decimal(precision), rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    """
    Converts an aggregate or raw number to a 2-place Decimal.
    None and unparseable input become 0.00.

    Args:
        value: Float, int, str, Decimal or None.

    Returns:
        Decimal: Converted Decimal value.
    """
    if value is None:
        return ZERO_DECIMAL
    try:
        return Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (ValueError, TypeError, InvalidOperation):
        return ZERO_DECIMAL


def get_client_ip(request) -> Optional[str]:
    """
    First hop of X-Forwarded-For when present, otherwise REMOTE_ADDR.
    Values that are not IP addresses are dropped.
    """
    if request is None:
        return None
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    candidate = forwarded_for.split(',')[0].strip() if forwarded_for else request.META.get('REMOTE_ADDR')
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        return None


def get_user_agent(request) -> str:
    if request is None:
        return ''
    return request.META.get('HTTP_USER_AGENT', '')[:500]


def fetch_or_404(queryset, message, **lookup):
    """
    `queryset.get(**lookup)` that answers NotFound with `message` for absent
    rows and for malformed identifiers alike.
    """
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, TypeError, DjangoValidationError):
        raise ResourceNotFound(message)
