"""Unit tests for password hashing and access tokens."""

from datetime import timedelta

import jwt
import pytest

from commerflow.core.errors import AuthenticationError
from commerflow.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    parse_duration,
    verify_password,
)
from commerflow.server.core.config import settings


class TestParseDuration:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("30s", timedelta(seconds=30)),
            ("15m", timedelta(minutes=15)),
            ("24h", timedelta(hours=24)),
            ("7d", timedelta(days=7)),
            ("3600", timedelta(seconds=3600)),
            (" 2H ", timedelta(hours=2)),
            (90, timedelta(seconds=90)),
        ],
    )
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "h", "1w", "ten minutes", "-5m"])
    def test_invalid_durations(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestPasswords:
    def test_hash_is_bcrypt_and_verifies(self):
        hashed = hash_password("secret123")

        assert hashed.startswith("$2")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_same_password_hashes_differently(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_garbage_hash_does_not_verify(self):
        assert verify_password("secret123", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    def test_round_trip_carries_claims(self):
        token = create_access_token("user-1", {"role": "ADMIN", "email": "a@commerflow.dev"})

        claims = decode_access_token(token)

        assert claims["sub"] == "user-1"
        assert claims["id"] == "user-1"
        assert claims["role"] == "ADMIN"
        assert claims["iss"] == settings.jwt_issuer
        assert claims["aud"] == settings.jwt_audience
        assert claims["exp"] - claims["iat"] == 3600

    def test_extra_claims_cannot_override_subject(self):
        claims = decode_access_token(create_access_token("user-1", {"id": "someone-else"}))
        assert claims["id"] == "user-1"

    def test_expired_token(self):
        token = jwt.encode(
            {"sub": "user-1", "exp": 1, "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
            settings.jwt_secret,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Token has expired"):
            decode_access_token(token)

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": "user-1", "iss": settings.jwt_issuer, "aud": "someone-else"},
            settings.jwt_secret,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": "user-1", "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
            "another-secret-of-sufficient-length",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token)
