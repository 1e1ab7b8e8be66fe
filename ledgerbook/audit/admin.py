from django.contrib import admin
from django.core.exceptions import PermissionDenied

from .models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""
    list_display = ('created_at', 'action', 'actor', 'actor_role', 'target_model', 'target_id', 'ip_address')
    list_filter = ('action', 'actor_role', 'target_model', 'created_at')
    search_fields = ('target_id', 'actor__email', 'ip_address')
    list_per_page = 50

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('actor')

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Audit entries cannot be changed via the admin.")

    def get_actions(self, request):
        return {}
