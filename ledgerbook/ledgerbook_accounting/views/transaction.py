# ledgerbook_accounting/views/transaction.py
import logging

from django.utils.translation import gettext_lazy as _
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action

from accounts.permissions import IsAccountHolder
from ledgerbook_core.enums import AuditAction
from ledgerbook_core.mixins import AuditTrailMixin
from ledgerbook_core.pagination import EnvelopePagination
from ledgerbook_core.responses import success_response
from ledgerbook_core.utils import fetch_or_404

from ..filters import TransactionFilterSet
from ..permissions import IsTransactionOwnerOrMasterAdmin
from ..serializers import (
    TransactionCreateSerializer, TransactionSerializer, TransactionStatsQuerySerializer,
    TransactionStatsSerializer, TransactionUpdateSerializer,
)
from ..services import transaction_service

logger = logging.getLogger(__name__)


class TransactionPagination(EnvelopePagination):
    page_size = 20
    results_key = 'transactions'


@extend_schema_view(
    list=extend_schema(summary="List transactions (own only, unless master admin)"),
    retrieve=extend_schema(summary="Retrieve a transaction", responses={200: TransactionSerializer}),
    create=extend_schema(summary="Record a transaction", request=TransactionCreateSerializer,
                         responses={201: TransactionSerializer}),
    update=extend_schema(summary="Edit a transaction (creator or master admin)",
                         request=TransactionUpdateSerializer, responses={200: TransactionSerializer}),
    destroy=extend_schema(summary="Soft-delete a transaction (creator or master admin)", responses={200: None}),
    stats=extend_schema(
        summary="Transaction totals, overall and per type",
        parameters=[
            OpenApiParameter(name='start_date', type=OpenApiTypes.DATE),
            OpenApiParameter(name='end_date', type=OpenApiTypes.DATE),
        ],
        responses={200: TransactionStatsSerializer},
    ),
)
class TransactionViewSet(AuditTrailMixin, viewsets.GenericViewSet):
    serializer_class = TransactionSerializer
    permission_classes = [IsAccountHolder, IsTransactionOwnerOrMasterAdmin]
    pagination_class = TransactionPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = TransactionFilterSet

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return transaction_service.live_transactions().none()
        return transaction_service.visible_transactions(self.request.user)

    def get_object(self):
        # Looked up across all live transactions so a foreign one answers 403, not 404.
        txn = fetch_or_404(transaction_service.live_transactions(), _("Transaction not found."), pk=self.kwargs['pk'])
        self.check_object_permissions(self.request, txn)
        return txn

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        return success_response(data={'transaction': self.get_serializer(self.get_object()).data})

    def create(self, request):
        serializer = TransactionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        txn = transaction_service.create_transaction(actor=request.user, **serializer.validated_data)
        self.audit(
            AuditAction.CREATE_TRANSACTION, target=txn,
            details={
                'voucher_number': txn.voucher_number,
                'amount': txn.amount,
                'type': txn.transaction_type,
                'debit_ledger': str(txn.debit_ledger_id),
                'credit_ledger': str(txn.credit_ledger_id),
            },
        )
        return success_response(
            data={'transaction': self.get_serializer(txn).data},
            message=_('Transaction created successfully'),
            status_code=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        txn = self.get_object()
        serializer = TransactionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = transaction_service.update_transaction(txn, **serializer.validated_data)
        self.audit(
            AuditAction.UPDATE_TRANSACTION, target=txn,
            details={'voucher_number': txn.voucher_number, 'changes': changes},
        )
        return success_response(
            data={'transaction': self.get_serializer(txn).data},
            message=_('Transaction updated successfully'),
        )

    def destroy(self, request, pk=None):
        txn = self.get_object()
        logger.info(f"{self.log_prefix('Destroy')} Soft-deleting transaction {txn.voucher_number}.")
        transaction_service.delete_transaction(txn, request.user)
        self.audit(
            AuditAction.DELETE_TRANSACTION, target=txn,
            details={'voucher_number': txn.voucher_number, 'amount': txn.amount},
        )
        return success_response(message=_('Transaction deleted successfully'))

    @action(detail=False, methods=['get'])
    def stats(self, request):
        query = TransactionStatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = transaction_service.transaction_stats(request.user, **query.validated_data)
        return success_response(data=TransactionStatsSerializer(stats).data)
