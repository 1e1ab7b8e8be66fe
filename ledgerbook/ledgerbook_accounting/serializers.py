# ledgerbook_accounting/serializers.py

from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from accounts.serializers import UserBriefSerializer
from ledgerbook_core.enums import LedgerType, SortOrder, TransactionType

from .models import Ledger, Transaction
from .services.ledger_service import SORTABLE_FIELDS

AMOUNT_FIELD_KWARGS = {'max_digits': 18, 'decimal_places': 2}


# =============================================================================
# Ledger
# =============================================================================

class LedgerSummarySerializer(serializers.ModelSerializer):
    """Ledger reference embedded in transactions."""
    type = serializers.CharField(source='ledger_type', read_only=True)

    class Meta:
        model = Ledger
        fields = ['id', 'name', 'type']
        read_only_fields = fields


class LedgerSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='ledger_type', read_only=True)
    created_by = UserBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Ledger
        fields = ['id', 'name', 'type', 'balance', 'description', 'is_active', 'created_by', 'created_at', 'updated_at']
        read_only_fields = fields


class LedgerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(
        max_length=200,
        error_messages={'blank': _('Ledger name is required'), 'max_length': _('Ledger name cannot exceed 200 characters')},
    )
    type = serializers.ChoiceField(
        choices=LedgerType.choices, source='ledger_type',
        error_messages={'invalid_choice': _('Invalid ledger type')},
    )
    balance = serializers.DecimalField(
        min_value=Decimal('0'), default=Decimal('0.00'), **AMOUNT_FIELD_KWARGS,
        error_messages={'min_value': _('Balance cannot be negative')},
    )
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class LedgerUpdateSerializer(serializers.Serializer):
    """Partial ledger edit. The balance is deliberately absent."""
    name = serializers.CharField(
        max_length=200, required=False,
        error_messages={'blank': _('Ledger name is required'), 'max_length': _('Ledger name cannot exceed 200 characters')},
    )
    type = serializers.ChoiceField(
        choices=LedgerType.choices, source='ledger_type', required=False,
        error_messages={'invalid_choice': _('Invalid ledger type')},
    )
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)


class LedgerListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=LedgerType.choices, source='ledger_type', required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    sort_by = serializers.ChoiceField(choices=sorted(SORTABLE_FIELDS), default='name')
    sort_order = serializers.ChoiceField(choices=SortOrder.choices, default=SortOrder.ASC)


class LedgerTypeTotalSerializer(serializers.Serializer):
    type = serializers.CharField()
    count = serializers.IntegerField()
    total_balance = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)


class LedgerSummaryReportSerializer(serializers.Serializer):
    by_type = LedgerTypeTotalSerializer(many=True)
    total_balance = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)


# =============================================================================
# Transaction
# =============================================================================

class TransactionSerializer(serializers.ModelSerializer):
    debit_ledger = LedgerSummarySerializer(read_only=True)
    credit_ledger = LedgerSummarySerializer(read_only=True)
    type = serializers.CharField(source='transaction_type', read_only=True)
    created_by = UserBriefSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Transaction
        fields = [
            'id', 'voucher_number', 'date', 'debit_ledger', 'credit_ledger', 'amount',
            'narration', 'type', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class TransactionCreateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    debit_ledger = serializers.UUIDField(
        source='debit_ledger_id', error_messages={'required': _('Debit ledger is required')},
    )
    credit_ledger = serializers.UUIDField(
        source='credit_ledger_id', error_messages={'required': _('Credit ledger is required')},
    )
    amount = serializers.DecimalField(
        min_value=Decimal('0.01'), **AMOUNT_FIELD_KWARGS,
        error_messages={'min_value': _('Amount must be greater than 0')},
    )
    narration = serializers.CharField(
        max_length=1000,
        error_messages={'blank': _('Narration is required'), 'max_length': _('Narration cannot exceed 1000 characters')},
    )
    type = serializers.ChoiceField(
        choices=TransactionType.choices, source='transaction_type',
        error_messages={'invalid_choice': _('Invalid transaction type')},
    )


class TransactionUpdateSerializer(TransactionCreateSerializer):
    """Same rules as creation, every field optional."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.required = False


class TransactionStatsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': _('End date must be on or after start date.')})
        return attrs


class TransactionOverallStatsSerializer(serializers.Serializer):
    total_transactions = serializers.IntegerField()
    total_amount = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)
    avg_amount = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)
    min_amount = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)
    max_amount = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)


class TransactionTypeStatsSerializer(serializers.Serializer):
    type = serializers.CharField()
    count = serializers.IntegerField()
    total_amount = serializers.DecimalField(**AMOUNT_FIELD_KWARGS)


class TransactionStatsSerializer(serializers.Serializer):
    overall = TransactionOverallStatsSerializer()
    by_type = TransactionTypeStatsSerializer(many=True)
