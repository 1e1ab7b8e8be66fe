# ledgerbook_accounting/admin.py
import logging

from django.contrib import admin
from safedelete.admin import SafeDeleteAdmin, SafeDeleteAdminFilter, highlight_deleted

from audit import services as audit_service
from ledgerbook_core.enums import AuditAction

from .models import Ledger, Transaction
from .services import transaction_service

logger = logging.getLogger(__name__)


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    list_display = ('name', 'ledger_type', 'balance', 'is_active', 'created_by', 'updated_at')
    list_filter = ('ledger_type', 'is_active')
    search_fields = ('name', 'description')
    readonly_fields = ('id', 'created_by', 'created_at', 'updated_at')
    ordering = ('name',)

    def save_model(self, request, obj, form, change):
        if not change and not obj.created_by_id:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    def has_delete_permission(self, request, obj=None):
        # Ledgers are deactivated through the API so referencing transactions are checked.
        return False


@admin.register(Transaction)
class TransactionAdmin(SafeDeleteAdmin):
    list_display = (
        highlight_deleted, 'voucher_number', 'date', 'debit_ledger', 'credit_ledger',
        'amount', 'transaction_type', 'created_by',
    ) + SafeDeleteAdmin.list_display
    list_filter = ('transaction_type', 'date', SafeDeleteAdminFilter) + SafeDeleteAdmin.list_filter
    search_fields = ('voucher_number', 'narration')
    readonly_fields = (
        'id', 'voucher_number', 'debit_ledger', 'credit_ledger', 'amount',
        'created_by', 'deleted_by', 'created_at', 'updated_at',
    )
    date_hierarchy = 'date'
    list_select_related = ('debit_ledger', 'credit_ledger', 'created_by')

    def has_add_permission(self, request):
        # Balances are only moved by the transaction service.
        return False

    def delete_model(self, request, obj):
        if obj.deleted:
            return
        transaction_service.delete_transaction(obj, request.user)
        audit_service.record_action(
            AuditAction.DELETE_TRANSACTION, actor=request.user, target=obj,
            details={'voucher_number': obj.voucher_number, 'amount': obj.amount}, request=request,
        )
        logger.info(f"[TransactionAdmin][User:{request.user.email}] Soft-deleted {obj.voucher_number}.")

    def delete_queryset(self, request, queryset):
        for txn in queryset:
            self.delete_model(request, txn)
