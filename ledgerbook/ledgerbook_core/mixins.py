# ledgerbook_core/mixins.py
from typing import Any, Optional

from audit.services import record_action


class AuditTrailMixin:
    """
    Gives API views an explicit audit hook.

    Views call `self.audit(...)` after the domain service has returned, so an
    entry is written only for operations whose primary write succeeded.
    The recorder never raises.
    """

    def audit(self, action: str, target: Any = None, details: Optional[dict] = None,
              actor: Any = None, target_id: Any = None) -> None:
        record_action(
            action,
            actor=actor if actor is not None else self.request.user,
            target=target,
            target_id=target_id,
            details=details,
            request=self.request,
        )

    def log_prefix(self, label: str) -> str:
        user = getattr(self.request, 'user', None)
        user_label = user.email if user is not None and user.is_authenticated else 'Anonymous'
        return f"[{self.__class__.__name__} {label}][User:{user_label}]"
