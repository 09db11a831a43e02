"""
Tests for AuthService: signup, login and refresh-token rotation
"""
import pytest
from fastapi import HTTPException

from readsy.core import security
from readsy.schemas import UserCreate
from readsy.services.auth_service import auth_service


def _signup(db, email="new@example.com", username="newreader"):
    user_in = UserCreate(
        email=email, password="long-enough", display_name="New Reader", username=username
    )
    return auth_service.signup(db, user_in)


@pytest.mark.unit
class TestSignupAndLogin:
    def test_signup_returns_token_pair(self, test_db):
        tokens = _signup(test_db)
        assert tokens["token_type"] == "bearer"
        payload = security.decode_access_token(tokens["access_token"])
        user = auth_service.get_user_by_id(test_db, payload["sub"])
        assert user.email == "new@example.com"
        assert security.token_matches(tokens["refresh_token"], user.hashed_refresh_token)

    def test_email_is_lowercased(self, test_db):
        _signup(test_db, email="Mixed@Example.com")
        assert auth_service.get_user_by_email(test_db, "mixed@example.com") is not None

    def test_duplicate_email(self, test_db):
        _signup(test_db)
        with pytest.raises(HTTPException) as exc:
            _signup(test_db, username="other")
        assert exc.value.status_code == 409
        assert "email" in exc.value.detail

    def test_duplicate_username(self, test_db):
        _signup(test_db)
        with pytest.raises(HTTPException) as exc:
            _signup(test_db, email="other@example.com")
        assert exc.value.status_code == 409
        assert "username" in exc.value.detail

    def test_login(self, test_db, reader):
        tokens = auth_service.login(test_db, reader.email, "secret-pass")
        assert security.decode_access_token(tokens["access_token"])["sub"] == reader.id

    def test_login_wrong_password(self, test_db, reader):
        with pytest.raises(HTTPException) as exc:
            auth_service.login(test_db, reader.email, "wrong-pass")
        assert exc.value.status_code == 401

    def test_login_unknown_email(self, test_db):
        with pytest.raises(HTTPException) as exc:
            auth_service.login(test_db, "nobody@example.com", "secret-pass")
        assert exc.value.status_code == 401

    def test_login_social_account(self, test_db, make_user):
        user = make_user(hashed_password=None)
        with pytest.raises(HTTPException) as exc:
            auth_service.login(test_db, user.email, "secret-pass")
        assert exc.value.status_code == 401
        assert "social" in exc.value.detail

    def test_login_inactive_user(self, test_db, make_user):
        user = make_user(is_active=False)
        with pytest.raises(HTTPException) as exc:
            auth_service.login(test_db, user.email, "secret-pass")
        assert exc.value.status_code == 403


@pytest.mark.unit
class TestRefreshRotation:
    def test_refresh_rotates(self, test_db, reader):
        first = auth_service.login(test_db, reader.email, "secret-pass")
        second = auth_service.refresh_tokens(test_db, first["refresh_token"])
        assert second["refresh_token"] != first["refresh_token"]
        assert second["access_token"] != first["access_token"]

    def test_rotated_token_is_rejected(self, test_db, reader):
        first = auth_service.login(test_db, reader.email, "secret-pass")
        auth_service.refresh_tokens(test_db, first["refresh_token"])
        with pytest.raises(HTTPException) as exc:
            auth_service.refresh_tokens(test_db, first["refresh_token"])
        assert exc.value.status_code == 403

    def test_invalid_token(self, test_db):
        with pytest.raises(HTTPException) as exc:
            auth_service.refresh_tokens(test_db, "not-a-jwt")
        assert exc.value.status_code == 401

    def test_access_token_cannot_refresh(self, test_db, reader):
        tokens = auth_service.login(test_db, reader.email, "secret-pass")
        with pytest.raises(HTTPException) as exc:
            auth_service.refresh_tokens(test_db, tokens["access_token"])
        assert exc.value.status_code == 401

    def test_logout_revokes_refresh_token(self, test_db, reader):
        tokens = auth_service.login(test_db, reader.email, "secret-pass")
        assert auth_service.logout(test_db, reader) is True
        assert reader.hashed_refresh_token is None
        with pytest.raises(HTTPException) as exc:
            auth_service.refresh_tokens(test_db, tokens["refresh_token"])
        assert exc.value.status_code == 403
