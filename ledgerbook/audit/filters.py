# audit/filters.py

import django_filters

from ledgerbook_core.enums import AuditAction, SortOrder

from .models import AuditLogEntry


class AuditLogFilterSet(django_filters.FilterSet):
    """
    Query filters for the audit log listing.
    Dates are inclusive calendar days on the entry timestamp.
    """
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)
    user_id = django_filters.UUIDFilter(field_name='actor', label='Actor ID')
    start_date = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte', label='From (YYYY-MM-DD)')
    end_date = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte', label='To (YYYY-MM-DD)')
    sort_order = django_filters.ChoiceFilter(choices=SortOrder.choices, method='filter_sort_order')

    class Meta:
        model = AuditLogEntry
        fields = ['action', 'user_id', 'start_date', 'end_date']

    def filter_sort_order(self, queryset, name, value):
        if value == SortOrder.ASC:
            return queryset.order_by('created_at')
        return queryset.order_by('-created_at')
