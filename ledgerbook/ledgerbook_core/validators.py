"""
ledgerbook_core/validators.py

Reusable validation logic used in models and serializers.
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError

def min_password_length() -> int:
    return getattr(settings, 'LEDGERBOOK_MIN_PASSWORD_LENGTH', 6)


def validate_positive_amount(value):
    """
    Ensures the transaction amount is at least one cent.
    """
    if value is None or value < Decimal('0.01'):
        raise ValidationError("Amount must be greater than 0.")


def validate_non_negative_balance(value):
    """
    Ensures a ledger balance never drops below zero.
    """
    if value is not None and value < 0:
        raise ValidationError("Balance cannot be negative.")

