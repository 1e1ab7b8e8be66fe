import pytest


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    # Class-level fixtures are hashed before this runs, so PBKDF2 stays verifiable.
    settings.PASSWORD_HASHERS = [
        'django.contrib.auth.hashers.MD5PasswordHasher',
        'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    ]
