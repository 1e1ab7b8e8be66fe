import uuid
from datetime import datetime, timedelta, timezone

import jwt
from django.test import TestCase
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from accounts.tokens import ROLE_CLAIM, issue_token, verify_token
from ledgerbook_core.enums import Role
from ledgerbook_core.exceptions import InvalidTokenError, TokenExpiredError


class TokenTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.user = User.objects.create_user(email='token@example.com', name='Token Holder', password='secret1')

    def test_issued_token_carries_identity_and_role(self):
        claims = verify_token(issue_token(self.user))

        self.assertEqual(claims.user_id, str(self.user.pk))
        self.assertEqual(claims.role, Role.USER)

    def test_token_is_valid_for_a_day(self):
        token = AccessToken(issue_token(self.user))
        lifetime = token['exp'] - token['iat']
        self.assertEqual(lifetime, int(timedelta(hours=24).total_seconds()))
        self.assertEqual(token[ROLE_CLAIM], 'user')

    def test_expired_token_is_reported_as_expired(self):
        token = AccessToken.for_user(self.user)
        token.set_exp(from_time=datetime.now(timezone.utc) - timedelta(days=2))

        with self.assertRaises(TokenExpiredError):
            verify_token(str(token))

    def test_garbage_is_invalid(self):
        with self.assertRaises(InvalidTokenError):
            verify_token('not-a-token')

    def test_wrong_signature_is_invalid_not_expired(self):
        # Expired as well, but the signature check must win.
        forged = jwt.encode(
            {
                'token_type': 'access',
                'user_id': str(self.user.pk),
                'jti': uuid.uuid4().hex,
                'exp': int((datetime.now(timezone.utc) - timedelta(hours=1)).timestamp()),
            },
            'a-completely-different-signing-key-0123456789',
            algorithm='HS256',
        )
        with self.assertRaises(InvalidTokenError):
            verify_token(forged)
