import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import serializers, viewsets
from rest_framework.decorators import action

from accounts.permissions import IsMasterAdmin
from ledgerbook_core.pagination import EnvelopePagination
from ledgerbook_core.responses import success_response

from . import services as audit_service
from .filters import AuditLogFilterSet
from .serializers import AuditLogEntrySerializer, AuditStatsQuerySerializer, AuditStatsSerializer

logger = logging.getLogger(__name__)

RECENT_LIMIT_MAX = 100


class AuditLogPagination(EnvelopePagination):
    page_size = 50
    results_key = 'logs'


class RecentQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=RECENT_LIMIT_MAX,
                                     default=audit_service.RECENT_ENTRIES_DEFAULT)


@extend_schema_view(
    list=extend_schema(summary="List audit log entries (filterable, paginated)"),
    stats=extend_schema(
        summary="Audit totals per action and most active accounts",
        parameters=[
            OpenApiParameter(name='start_date', type=OpenApiTypes.DATE),
            OpenApiParameter(name='end_date', type=OpenApiTypes.DATE),
        ],
        responses={200: AuditStatsSerializer},
    ),
    recent=extend_schema(
        summary="Most recent audit entries",
        parameters=[OpenApiParameter(name='limit', type=OpenApiTypes.INT, description='Entries to return (default 20)')],
        responses={200: AuditLogEntrySerializer(many=True)},
    ),
)
class AuditLogViewSet(viewsets.GenericViewSet):
    """
    Read-only access to the audit trail. Master admin only.
    """
    serializer_class = AuditLogEntrySerializer
    permission_classes = [IsMasterAdmin]
    pagination_class = AuditLogPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AuditLogFilterSet

    def get_queryset(self):
        return audit_service.audit_entries()

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        query = AuditStatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = audit_service.audit_stats(**query.validated_data)
        return success_response(data=AuditStatsSerializer(stats).data)

    @action(detail=False, methods=['get'])
    def recent(self, request):
        query = RecentQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        entries = audit_service.recent_entries(query.validated_data['limit'])
        return success_response(data={'logs': self.get_serializer(entries, many=True).data})
