"""
Tests for admin authentication and authorization.
"""

import pytest
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from jose import jwt

from app.core.auth import (
    ALGORITHM,
    create_access_token,
    decode_token,
    verify_admin_credentials,
)
from app.core.config import settings


@pytest.mark.unit
class TestTokens:
    """Token creation and decoding."""

    def test_create_access_token(self):
        token = create_access_token(data={"sub": "admin"})
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])

        assert payload["sub"] == "admin"
        assert payload["type"] == "access"
        assert "exp" in payload
        assert "iat" in payload
        assert "jti" in payload

    def test_tokens_are_unique(self):
        first = create_access_token(data={"sub": "admin"})
        second = create_access_token(data={"sub": "admin"})
        assert first != second

    def test_decode_token_expired(self):
        token = create_access_token(
            data={"sub": "admin"}, expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_decode_token_wrong_type(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "admin", "type": "refresh", "exp": now + timedelta(minutes=5)},
            settings.SECRET_KEY,
            algorithm=ALGORITHM,
        )
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_decode_token_invalid(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token("not-a-token")
        assert exc_info.value.status_code == 401


@pytest.mark.unit
class TestAdminCredentials:
    def test_valid(self):
        assert verify_admin_credentials(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)

    def test_wrong_password(self):
        assert not verify_admin_credentials(settings.ADMIN_USERNAME, "wrong")

    def test_disabled_without_password(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")
        assert not verify_admin_credentials(settings.ADMIN_USERNAME, "")


@pytest.mark.unit
class TestAuthEndpoints:
    def test_login(self, client):
        response = client.post(
            "/api/auth/login",
            json={
                "username": settings.ADMIN_USERNAME,
                "password": settings.ADMIN_PASSWORD,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert decode_token(data["access_token"])["sub"] == settings.ADMIN_USERNAME
        assert "auth_token=" in response.headers.get("set-cookie", "")

    def test_login_failure(self, client):
        response = client.post(
            "/api/auth/login",
            json={"username": settings.ADMIN_USERNAME, "password": "wrong"},
        )
        assert response.status_code == 401

    def test_me(self, client, admin_headers):
        response = client.get("/api/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"username": settings.ADMIN_USERNAME}

    def test_protected_endpoint_without_auth(self, client):
        response = client.get("/api/categories/")
        assert response.status_code == 401

    def test_protected_endpoint_with_invalid_token(self, client):
        response = client.get(
            "/api/categories/", headers={"Authorization": "Bearer invalid"}
        )
        assert response.status_code == 401

    def test_non_admin_subject_is_forbidden(self, client):
        token = create_access_token(data={"sub": "visitor"})
        response = client.get(
            "/api/categories/", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403

    def test_cookie_auth(self, admin_client):
        response = admin_client.get("/api/auth/me")
        assert response.status_code == 200
