import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import permissions

logger = logging.getLogger(__name__)


class IsTransactionOwnerOrMasterAdmin(permissions.BasePermission):
    """
    Object-level ownership check for a single transaction.
    Master admins pass; everyone else only for transactions they created.
    """
    message = _("Access denied. You can only edit your own transactions.")

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_master_admin:
            return True

        is_owner = obj.created_by_id == user.pk
        logger.debug(
            f"[Permission Check] User: {user}, Action: {getattr(view, 'action', None)}, "
            f"Transaction PK: {obj.pk}, Owner: {obj.created_by_id}, Is Owner?: {is_owner}"
        )
        if not is_owner and request.method in permissions.SAFE_METHODS:
            self.message = _("Access denied. You can only view your own transactions.")
        return is_owner
