"""
Unit Tests for Security Module
Tests for: password hashing, access tokens
"""
import pytest
from datetime import datetime, timedelta
from jose import jwt

from campusnet.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_token,
)
from campusnet.core.config import settings
from campusnet.core.exceptions import InvalidTokenError


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt generates different salts"""
        assert get_password_hash("secret1") != get_password_hash("secret1")

    def test_verify_password_correct(self):
        hashed = get_password_hash("secret1")

        assert verify_password("secret1", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("secret1")

        assert verify_password("secret2", hashed) is False

    def test_hash_long_password_truncated(self):
        """Bcrypt only looks at the first 72 bytes"""
        hashed = get_password_hash("a" * 100)

        assert verify_password("a" * 100, hashed) is True
        assert verify_password("a" * 72 + "different tail", hashed) is True

    def test_hash_unicode_password(self):
        password = "sênhå-çãö"
        hashed = get_password_hash(password)

        assert verify_password(password, hashed) is True

    def test_verify_against_non_bcrypt_value(self):
        assert verify_password("secret1", "plain-text-not-a-hash") is False


class TestAccessToken:
    """Test access token functions"""

    def test_default_expiry_is_ninety_days(self):
        token = create_access_token({"sub": "1", "id": 1})

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        remaining = datetime.utcfromtimestamp(payload["exp"]) - datetime.utcnow()

        assert timedelta(days=89, hours=23) < remaining <= timedelta(days=90)

    def test_custom_expiry(self):
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(hours=1))

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        remaining = (datetime.utcfromtimestamp(payload["exp"]) - datetime.utcnow()).total_seconds()

        assert 3500 < remaining < 3700

    def test_token_round_trip_keeps_claims(self):
        data = {"sub": "7", "id": 7, "username": "ana", "role": "member"}

        payload = decode_token(create_access_token(data))

        assert payload["id"] == 7
        assert payload["username"] == "ana"
        assert payload["type"] == "access"


class TestDecodeToken:
    """Test token verification"""

    def test_expired_token(self):
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "1", "type": "access"}, "another-secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_wrong_token_type(self):
        token = jwt.encode(
            {"sub": "1", "type": "refresh", "exp": datetime.utcnow() + timedelta(hours=1)},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_token(token)

    def test_malformed_token(self):
        with pytest.raises(InvalidTokenError):
            decode_token("not.a.token")
