"""
accounts/tokens.py

Issues and verifies the signed session tokens handed out at login.

Tokens are plain simplejwt access tokens with the account role added as a
claim. There is no refresh token and no server-side revocation: a token is
good until it expires, and logging out simply means the client discards it.
Verification is signature and expiry only; whether the account still exists
and is active is decided by the authentication class on every request.
"""
import logging
from datetime import datetime, timezone
from typing import NamedTuple

import jwt
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from ledgerbook_core.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

ROLE_CLAIM = 'role'


class TokenClaims(NamedTuple):
    user_id: str
    role: str


def issue_token(user) -> str:
    """
    Returns a signed access token for `user`, valid for SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].
    """
    token = AccessToken.for_user(user)
    token[ROLE_CLAIM] = str(user.role)
    logger.debug(f"Issued access token for user {user.pk} (role: {user.role}), expires {token['exp']}.")
    return str(token)


def verify_token(raw_token) -> TokenClaims:
    """
    Checks signature and expiry of `raw_token`.

    Raises:
        TokenExpiredError: The token is authentic but past its expiry.
        InvalidTokenError: Anything else (bad signature, malformed, wrong type, no identity).
    """
    try:
        token = AccessToken(raw_token)
    except TokenError as exc:
        if _is_authentic_but_expired(raw_token):
            raise TokenExpiredError() from exc
        logger.info(f"Rejected bearer token: {exc}")
        raise InvalidTokenError() from exc

    user_id = token.get(api_settings.USER_ID_CLAIM)
    if user_id is None:
        raise InvalidTokenError()
    return TokenClaims(user_id=str(user_id), role=token.get(ROLE_CLAIM, ''))


def _is_authentic_but_expired(raw_token) -> bool:
    # simplejwt reports both failures as TokenError, so re-check the signature without the exp rule
    verifying_key = api_settings.VERIFYING_KEY or api_settings.SIGNING_KEY
    try:
        payload = jwt.decode(
            raw_token,
            verifying_key,
            algorithms=[api_settings.ALGORITHM],
            options={'verify_exp': False, 'verify_aud': False},
        )
    except jwt.InvalidTokenError:
        return False
    exp = payload.get('exp')
    if not isinstance(exp, (int, float)):
        return False
    return datetime.fromtimestamp(exp, tz=timezone.utc) <= datetime.now(tz=timezone.utc)
