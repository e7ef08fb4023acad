"""Unit tests for password hashing and access tokens."""

import pytest
from jose import JWTError
from libs.auth.models import ADMIN_ROLE, AuthUser
from libs.auth.security import (
    MAX_PASSWORD_BYTES,
    check_password_length,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.mark.unit
class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("correct horse", rounds=4)
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed) is True

    def test_wrong_password_fails(self):
        hashed = hash_password("correct horse", rounds=4)
        assert verify_password("battery staple", hashed) is False

    def test_missing_or_foreign_hash_fails(self):
        assert verify_password("anything", None) is False
        assert verify_password("anything", "") is False
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_length_limit_counts_utf8_bytes(self):
        assert check_password_length(None) is None
        assert check_password_length("x" * MAX_PASSWORD_BYTES) == "x" * MAX_PASSWORD_BYTES
        # 37 two-byte characters is 74 bytes
        with pytest.raises(ValueError):
            check_password_length("\u00e9" * 37)

    def test_hash_refuses_overlong_password(self):
        with pytest.raises(ValueError):
            hash_password("x" * 100, rounds=4)


@pytest.mark.unit
class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token(7, ADMIN_ROLE, username="owner", is_master=True)
        payload = decode_access_token(token)

        assert payload["sub"] == "7"
        assert payload["role"] == ADMIN_ROLE
        assert payload["exp"] > payload["iat"]

        user = AuthUser(**payload)
        assert user.user_id == 7
        assert user.is_admin
        assert user.is_master

    def test_tampered_token_is_rejected(self):
        token = create_access_token(7, ADMIN_ROLE)
        with pytest.raises(JWTError):
            decode_access_token(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])

    def test_expired_token_is_rejected(self):
        token = create_access_token(7, ADMIN_ROLE, expires_minutes=-1)
        with pytest.raises(JWTError):
            decode_access_token(token)
