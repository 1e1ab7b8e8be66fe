import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import permissions

from ledgerbook_core.enums import Role

logger = logging.getLogger(__name__)

KNOWN_ROLES = frozenset(Role.values)


class RolePermission(permissions.BasePermission):
    """
    Grants access when the authenticated account's role is in `allowed_roles`.
    Roles outside the Role enum are always refused.
    """
    allowed_roles = KNOWN_ROLES
    message = _("Access denied. Invalid role.")

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        role = getattr(user, 'role', None)
        if role not in KNOWN_ROLES:
            logger.warning(f"[Permission Check] User: {user}, unknown role '{role}' refused.")
            return False

        granted = role in self.allowed_roles
        logger.debug(
            f"[Permission Check] User: {user}, Role: {role}, View: {view.__class__.__name__}, "
            f"Allowed: {sorted(self.allowed_roles)}, Granted?: {granted}"
        )
        return granted


class IsAccountHolder(RolePermission):
    """Any authenticated account with a known role."""
    allowed_roles = KNOWN_ROLES


class IsMasterAdmin(RolePermission):
    allowed_roles = frozenset({Role.MASTER_ADMIN.value})
    message = _("Access denied. Master Admin privileges required.")


class IsNotMasterAdminTarget(permissions.BasePermission):
    """
    Object-level guard for account deletion and deactivation.
    Master admin accounts are never valid targets.
    """
    message = _("Master Admin accounts cannot be modified this way.")
    action_messages = {
        'destroy': _("Cannot delete Master Admin account"),
        'deactivate': _("Cannot deactivate Master Admin account"),
    }

    def has_object_permission(self, request, view, obj):
        if obj.role != Role.MASTER_ADMIN:
            return True
        self.message = self.action_messages.get(getattr(view, 'action', None), self.message)
        logger.warning(
            f"[Permission Check] User: {request.user} attempted '{getattr(view, 'action', None)}' "
            f"on master admin {obj.pk}. Refused."
        )
        return False
