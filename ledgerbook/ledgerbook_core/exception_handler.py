# ledgerbook_core/exception_handler.py
import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = _('Validation failed')
INTERNAL_ERROR_MESSAGE = _('Internal server error')
MISSING_TOKEN_MESSAGE = _("Access denied. No token provided.")


def flatten_errors(detail, field=None) -> list:
    """
    Flattens DRF's nested ValidationError detail into `[{field, message}]`,
    one entry per violated rule. Nested serializer fields are dotted.
    """
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                name = field
            else:
                name = key if field is None else f"{field}.{key}"
            errors.extend(flatten_errors(value, name))
    elif isinstance(detail, (list, tuple)):
        for item in detail:
            errors.extend(flatten_errors(item, field))
    else:
        errors.append({'field': field, 'message': str(detail)})
    return errors


def envelope_exception_handler(exc, context):
    """
    REST_FRAMEWORK['EXCEPTION_HANDLER'].

    Known API errors keep DRF's status code and headers (WWW-Authenticate etc.)
    but the body is rewritten to `{success: false, message, errors?}`.
    Anything DRF does not recognise is logged with its traceback and
    reported as a generic 500 with the request transaction rolled back.
    """
    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'UnknownView'

    if response is None:
        logger.error(f"[{view_name}] Unhandled exception: {exc!r}", exc_info=exc)
        set_rollback()
        return Response(
            {'success': False, 'message': str(INTERNAL_ERROR_MESSAGE)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            'success': False,
            'message': str(VALIDATION_FAILED_MESSAGE),
            'errors': flatten_errors(exc.detail),
        }
        logger.debug(f"[{view_name}] Validation failed: {response.data['errors']}")
        return response

    detail = response.data.get('detail', response.data) if isinstance(response.data, dict) else response.data
    if type(exc) is NotAuthenticated:
        # Raised by DRF itself when no authenticator recognised the request.
        detail = MISSING_TOKEN_MESSAGE
    if isinstance(detail, (list, dict)):
        messages = [item['message'] for item in flatten_errors(detail)]
        detail = ' '.join(messages)
    response.data = {'success': False, 'message': str(detail)}
    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"[{view_name}] Server error {response.status_code}: {detail}")
    else:
        logger.info(f"[{view_name}] Request rejected with {response.status_code}: {detail}")
    return response
