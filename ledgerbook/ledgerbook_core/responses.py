# ledgerbook_core/responses.py
from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response


def envelope(data: Any = None, message: Optional[str] = None, **extra: Any) -> dict:
    """
    Builds the success body shared by every endpoint:
    `{success: true, message?, data?, ...extra}`.
    """
    body = {'success': True}
    if message:
        body['message'] = str(message)
    if data is not None:
        body['data'] = data
    body.update(extra)
    return body


def success_response(data: Any = None, message: Optional[str] = None,
                     status_code: int = status.HTTP_200_OK, **extra: Any) -> Response:
    return Response(envelope(data=data, message=message, **extra), status=status_code)
