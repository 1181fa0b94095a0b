"""
Unit tests for core.security module.
Tests password hashing, access/refresh JWT creation and validation.
"""
import pytest
import datetime as dt
import jwt
from vidhub.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    ACCESS_TOKEN_SECRET,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_SECRET,
    REFRESH_TOKEN_EXPIRE_DAYS,
    JWT_ALG,
)


def _access(user_id: str = "user-1") -> str:
    return create_access_token(user_id, "jane@example.com", "jane", "Jane Doe")


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        assert hash_password("TestPassword123") != hash_password("TestPassword123")

    def test_hash_is_not_plain_text(self):
        hashed = hash_password("TestPassword123")
        assert isinstance(hashed, str)
        assert hashed != "TestPassword123"

    def test_verify_password_correct_and_incorrect(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_rejects_empty_input(self):
        """Empty password or missing hash never verifies."""
        hashed = hash_password("TestPassword123")
        assert verify_password("", hashed) is False
        assert verify_password("TestPassword123", "") is False


class TestAccessTokens:
    """Tests for access token creation and validation."""

    def test_access_token_carries_identity(self):
        payload = decode_access_token(_access("user-42"))
        assert payload["sub"] == "user-42"
        assert payload["username"] == "jane"
        assert payload["email"] == "jane@example.com"
        assert payload["fullname"] == "Jane Doe"
        assert payload["type"] == "access"

    def test_access_token_expiration_time(self):
        payload = decode_access_token(_access())
        diff_minutes = (payload["exp"] - payload["iat"]) / 60
        assert abs(diff_minutes - ACCESS_TOKEN_EXPIRE_MINUTES) < 1
        assert payload["exp"] > dt.datetime.now(dt.timezone.utc).timestamp()

    def test_tokens_are_unique_even_for_same_user(self):
        """jti makes two tokens issued in the same second differ."""
        assert _access("same") != _access("same")
        assert create_refresh_token("same") != create_refresh_token("same")

    def test_decode_access_token_invalid_token(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token("invalid.token.here")

    def test_expired_access_token_is_rejected(self):
        past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(minutes=5)
        token = jwt.encode(
            {"sub": "u", "type": "access", "iat": past, "exp": past},
            ACCESS_TOKEN_SECRET,
            algorithm=JWT_ALG,
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)


class TestRefreshTokens:
    """Tests for refresh token creation and validation."""

    def test_refresh_token_carries_only_user_id(self):
        payload = decode_refresh_token(create_refresh_token("user-7"))
        assert payload["sub"] == "user-7"
        assert payload["type"] == "refresh"
        assert "email" not in payload

    def test_refresh_token_expiration_time(self):
        payload = decode_refresh_token(create_refresh_token("user-7"))
        diff_days = (payload["exp"] - payload["iat"]) / 86400
        assert abs(diff_days - REFRESH_TOKEN_EXPIRE_DAYS) < 0.01

    def test_refresh_token_signed_with_refresh_secret(self):
        token = create_refresh_token("user-7")
        jwt.decode(token, REFRESH_TOKEN_SECRET, algorithms=[JWT_ALG])
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, ACCESS_TOKEN_SECRET, algorithms=[JWT_ALG])

    def test_token_kinds_are_not_interchangeable(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_refresh_token(_access())
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token(create_refresh_token("user-7"))
