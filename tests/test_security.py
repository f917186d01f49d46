"""Tests for password hashing and JWT helpers."""

from datetime import timedelta

import pytest
from jose import JWTError

from language_platform.core.config import Settings
from language_platform.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


@pytest.fixture
def jwt_settings() -> Settings:
    return Settings(SECRET_KEY="unit-test-secret", LOG_TO_FILE=False)


class TestPasswordHashing:
    def test_hash_differs_from_password(self) -> None:
        hashed = get_password_hash("SecureP@ssword123")
        assert hashed != "SecureP@ssword123"
        assert hashed.startswith("$2")

    def test_verify_password_correct(self) -> None:
        hashed = get_password_hash("SecureP@ssword123")
        assert verify_password("SecureP@ssword123", hashed) is True

    def test_verify_password_incorrect(self) -> None:
        hashed = get_password_hash("SecureP@ssword123")
        assert verify_password("WrongP@ssword456", hashed) is False

    def test_verify_against_malformed_hash(self) -> None:
        assert verify_password("whatever", "not-a-bcrypt-hash") is False


class TestAccessToken:
    def test_round_trip(self, jwt_settings: Settings) -> None:
        token = create_access_token(jwt_settings, subject=42, claims={"role": "LEARNER"})
        payload = decode_access_token(jwt_settings, token)
        assert payload["sub"] == "42"
        assert payload["role"] == "LEARNER"
        assert "exp" in payload

    def test_expired_token(self, jwt_settings: Settings) -> None:
        token = create_access_token(jwt_settings, subject=1, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_access_token(jwt_settings, token)

    def test_wrong_secret(self, jwt_settings: Settings) -> None:
        token = create_access_token(jwt_settings, subject=1)
        other = Settings(SECRET_KEY="another-secret", LOG_TO_FILE=False)
        with pytest.raises(JWTError):
            decode_access_token(other, token)
