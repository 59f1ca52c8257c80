"""
Security Service Tests

Tests for password hashing and bearer token creation/verification.
"""

from datetime import timedelta

import pytest
from jose import jwt

from library_api.config import get_settings
from library_api.models.user import User
from library_api.services.security import (
    ALGORITHM,
    InvalidTokenError,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_is_not_plain_text(self):
        hashed = hash_password("secret")

        assert hashed != "secret"
        assert hashed.startswith("$2b$")

    def test_verify_password(self):
        hashed = hash_password("secret")

        assert verify_password("secret", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_same_password_gets_different_salts(self):
        assert hash_password("secret") != hash_password("secret")


class TestTokens:
    """Tests for token creation and decoding."""

    def test_token_carries_username_and_id(self, sample_user: User):
        payload = decode_token(create_access_token(sample_user))

        assert payload["username"] == sample_user.username
        assert payload["id"] == str(sample_user.id)

    def test_no_expiry_by_default(self, sample_user: User):
        payload = decode_token(create_access_token(sample_user))

        assert "exp" not in payload

    def test_expiry_when_requested(self, sample_user: User):
        token = create_access_token(sample_user, expires_delta=timedelta(minutes=5))

        assert "exp" in decode_token(token)

    def test_expired_token_is_invalid(self, sample_user: User):
        token = create_access_token(sample_user, expires_delta=timedelta(seconds=-10))

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_forged_token_is_invalid(self, sample_user: User):
        forged = jwt.encode(
            {"username": sample_user.username, "id": str(sample_user.id)},
            "another-secret-key-that-is-also-32-characters-long",
            algorithm=ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(forged)

    def test_garbage_token_is_invalid(self):
        with pytest.raises(InvalidTokenError):
            decode_token("not-a-jwt")

    def test_token_without_id_is_invalid(self):
        token = jwt.encode(
            {"username": "mluukkai"},
            get_settings().secret_key,
            algorithm=ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(token)
