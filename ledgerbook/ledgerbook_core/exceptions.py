"""
ledgerbook_core/exceptions.py

Custom API exceptions for the Ledgerbook service.
Each class maps a domain failure to exactly one HTTP status; the envelope
exception handler turns them into `{success: false, message}` responses.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed, NotFound, PermissionDenied


# --- Unauthenticated (401) ---

class InvalidTokenError(AuthenticationFailed):
    """
    Raised when a bearer token fails signature or structure checks.
    """
    default_detail = _('Invalid token.')
    default_code = 'invalid_token'


class TokenExpiredError(AuthenticationFailed):
    """
    Raised when a correctly signed token is past its expiry.
    """
    default_detail = _('Token expired. Please login again.')
    default_code = 'token_expired'


class AccountNotFoundForToken(AuthenticationFailed):
    default_detail = _('User not found. Token may be invalid.')
    default_code = 'user_not_found'


class InvalidCredentialsError(AuthenticationFailed):
    default_detail = _('Invalid email or password')
    default_code = 'invalid_credentials'


# --- Forbidden (403) ---

class AccountDeactivatedError(PermissionDenied):
    """
    Raised when a deactivated account tries to log in or use a still-valid token.
    """
    default_detail = _('Account is deactivated. Please contact admin.')
    default_code = 'account_deactivated'


class UserCapReachedError(PermissionDenied):
    default_detail = _('Maximum number of users reached. Cannot create more users.')
    default_code = 'user_cap_reached'


class MasterAdminProtectedError(PermissionDenied):
    """
    Raised when an operation would delete, deactivate or re-role a master admin.
    """
    default_detail = _('Master Admin accounts cannot be modified this way.')
    default_code = 'master_admin_protected'


# --- Not found (404) ---

class ResourceNotFound(NotFound):
    default_detail = _('Resource not found.')
    default_code = 'not_found'


# --- Conflict (409) ---

class ConflictError(APIException):
    """
    Raised when a request collides with existing state (duplicates, references).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = _('The request conflicts with the current state of the resource.')
    default_code = 'conflict'


class DuplicateEmailError(ConflictError):
    default_detail = _('User with this email already exists')
    default_code = 'duplicate_email'


class DuplicateLedgerNameError(ConflictError):
    default_detail = _('Ledger with this name already exists')
    default_code = 'duplicate_ledger_name'


class LedgerInUseError(ConflictError):
    default_detail = _('Cannot delete ledger. It is referenced by transactions.')
    default_code = 'ledger_in_use'
