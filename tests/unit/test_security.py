"""
Tests for password hashing and JWT helpers
"""
from datetime import timedelta

import pytest
from jose import JWTError

from readsy.core import security


@pytest.mark.unit
class TestPasswords:
    def test_hash_and_verify(self):
        hashed = security.get_password_hash("correct horse")
        assert hashed != "correct horse"
        assert security.verify_password("correct horse", hashed)
        assert not security.verify_password("wrong horse", hashed)

    def test_missing_hash_never_verifies(self):
        assert not security.verify_password("anything", None)

    def test_malformed_hash_does_not_raise(self):
        assert not security.verify_password("anything", "not-a-bcrypt-hash")


@pytest.mark.unit
class TestTokens:
    claims = {"sub": "user-1", "email": "a@example.com", "username": "a"}

    def test_access_token_roundtrip(self):
        payload = security.decode_access_token(security.create_access_token(self.claims))
        assert payload["sub"] == "user-1"
        assert payload["type"] == security.ACCESS_TOKEN_TYPE
        assert "exp" in payload and "jti" in payload

    def test_tokens_are_unique(self):
        assert security.create_refresh_token(self.claims) != security.create_refresh_token(self.claims)

    def test_refresh_token_is_not_an_access_token(self):
        refresh = security.create_refresh_token(self.claims)
        with pytest.raises(JWTError):
            security.decode_access_token(refresh)

    def test_access_token_is_not_a_refresh_token(self):
        access = security.create_access_token(self.claims)
        with pytest.raises(JWTError):
            security.decode_refresh_token(access)

    def test_expired_token_rejected(self):
        token = security.create_access_token(self.claims, expires_delta=timedelta(seconds=-5))
        with pytest.raises(JWTError):
            security.decode_access_token(token)

    def test_token_digest(self):
        token = security.create_refresh_token(self.claims)
        digest = security.hash_token(token)
        assert security.token_matches(token, digest)
        assert not security.token_matches(token + "x", digest)
        assert not security.token_matches(token, None)
