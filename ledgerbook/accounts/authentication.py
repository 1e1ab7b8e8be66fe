# accounts/authentication.py
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework_simplejwt.authentication import AUTH_HEADER_TYPE_BYTES, JWTAuthentication

from ledgerbook_core.exceptions import AccountDeactivatedError, AccountNotFoundForToken

from .tokens import verify_token

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(JWTAuthentication):
    """
    First stage of the request gate.

    Reads `Authorization: Bearer <token>`, verifies it, then reloads the
    account from the database on every request so deactivation and deletion
    take effect immediately, not at token expiry. The reloaded User becomes
    `request.user`; nothing client-supplied is trusted for identity after this.

    A missing or malformed header leaves the request anonymous; the
    permission stage then answers 401.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        claims = verify_token(raw_token)
        return self.get_account(claims), claims

    def get_raw_token(self, header):
        parts = header.split()
        if len(parts) != 2 or parts[0] not in AUTH_HEADER_TYPE_BYTES:
            return None
        return parts[1]

    def get_account(self, claims):
        try:
            user = self.user_model.objects.get(pk=claims.user_id)
        except (self.user_model.DoesNotExist, ValueError, DjangoValidationError):
            logger.info(f"Token for unknown account {claims.user_id} rejected.")
            raise AccountNotFoundForToken()

        if not user.is_active:
            logger.info(f"Token for deactivated account {user.email} rejected.")
            raise AccountDeactivatedError()
        return user
