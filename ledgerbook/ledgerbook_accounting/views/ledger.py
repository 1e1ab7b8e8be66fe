# ledgerbook_accounting/views/ledger.py
import logging

from django.utils.translation import gettext_lazy as _
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view, inline_serializer
from rest_framework import status, viewsets
from rest_framework.decorators import action

from accounts.permissions import IsAccountHolder, IsMasterAdmin
from ledgerbook_core.enums import AuditAction
from ledgerbook_core.mixins import AuditTrailMixin
from ledgerbook_core.responses import success_response

from ..serializers import (
    LedgerCreateSerializer, LedgerListQuerySerializer, LedgerSerializer,
    LedgerSummaryReportSerializer, LedgerUpdateSerializer, TransactionSerializer,
)
from ..services import ledger_service

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List active ledgers",
        parameters=[
            OpenApiParameter(name='type', type=OpenApiTypes.STR, description='Ledger type'),
            OpenApiParameter(name='search', type=OpenApiTypes.STR, description='Name contains (case-insensitive)'),
            OpenApiParameter(name='sort_by', type=OpenApiTypes.STR, description='name | type | balance | created_at | updated_at'),
            OpenApiParameter(name='sort_order', type=OpenApiTypes.STR, description='asc | desc'),
        ],
        responses={200: LedgerSerializer(many=True)},
    ),
    retrieve=extend_schema(
        summary="Retrieve a ledger with its most recent transactions",
        responses={200: inline_serializer(
            name='LedgerDetailResponse',
            fields={'ledger': LedgerSerializer(), 'recent_transactions': TransactionSerializer(many=True)},
        )},
    ),
    create=extend_schema(summary="Create a ledger", request=LedgerCreateSerializer, responses={201: LedgerSerializer}),
    update=extend_schema(summary="Edit a ledger (partial)", request=LedgerUpdateSerializer, responses={200: LedgerSerializer}),
    destroy=extend_schema(summary="Deactivate an unreferenced ledger (master admin)", responses={200: None}),
    summary=extend_schema(summary="Ledger counts and balances per type", responses={200: LedgerSummaryReportSerializer}),
)
class LedgerViewSet(AuditTrailMixin, viewsets.GenericViewSet):
    serializer_class = LedgerSerializer
    permission_classes = [IsAccountHolder]

    def get_queryset(self):
        return ledger_service.active_ledgers()

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsMasterAdmin()]
        return super().get_permissions()

    def get_object(self):
        ledger = ledger_service.get_ledger(self.kwargs['pk'])
        self.check_object_permissions(self.request, ledger)
        return ledger

    def list(self, request):
        query = LedgerListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        ledgers = ledger_service.list_ledgers(**query.validated_data)
        data = self.get_serializer(ledgers, many=True).data
        return success_response(data={'ledgers': data}, count=len(data))

    def retrieve(self, request, pk=None):
        ledger = self.get_object()
        recent = ledger_service.recent_transactions(ledger)
        return success_response(data={
            'ledger': self.get_serializer(ledger).data,
            'recent_transactions': TransactionSerializer(recent, many=True).data,
        })

    def create(self, request):
        serializer = LedgerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ledger = ledger_service.create_ledger(created_by=request.user, **serializer.validated_data)
        self.audit(
            AuditAction.CREATE_LEDGER, target=ledger,
            details={'name': ledger.name, 'type': ledger.ledger_type, 'balance': ledger.balance},
        )
        return success_response(
            data={'ledger': self.get_serializer(ledger).data},
            message=_('Ledger created successfully'),
            status_code=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        ledger = self.get_object()
        serializer = LedgerUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = ledger_service.update_ledger(ledger, **serializer.validated_data)
        self.audit(AuditAction.UPDATE_LEDGER, target=ledger, details={'changes': changes})
        return success_response(
            data={'ledger': self.get_serializer(ledger).data},
            message=_('Ledger updated successfully'),
        )

    def destroy(self, request, pk=None):
        ledger = self.get_object()
        logger.info(f"{self.log_prefix('Destroy')} Deactivating ledger {ledger.pk} ('{ledger.name}').")
        ledger_service.deactivate_ledger(ledger)
        self.audit(AuditAction.DELETE_LEDGER, target=ledger, details={'name': ledger.name})
        return success_response(message=_('Ledger deleted successfully'))

    @action(detail=False, methods=['get'])
    def summary(self, request):
        report = ledger_service.ledger_summary()
        return success_response(data=LedgerSummaryReportSerializer(report).data)
