# ledgerbook_accounting/filters.py

import django_filters

from ledgerbook_core.enums import TransactionType

from .models import Transaction


class TransactionFilterSet(django_filters.FilterSet):
    """
    Date range and type filters for the transaction listing. Both dates are inclusive.
    """
    start_date = django_filters.DateFilter(field_name='date', lookup_expr='gte', label='Date From (YYYY-MM-DD)')
    end_date = django_filters.DateFilter(field_name='date', lookup_expr='lte', label='Date To (YYYY-MM-DD)')
    type = django_filters.ChoiceFilter(field_name='transaction_type', choices=TransactionType.choices)

    class Meta:
        model = Transaction
        fields = ['start_date', 'end_date', 'type']
