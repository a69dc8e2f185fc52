"""Tests for auth dependency."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from kokopic.dependencies.auth import get_current_claims
from kokopic.dependencies.services import get_session_codec
from kokopic.services.auth.session_tokens import SessionClaims, SessionTokenCodec

SECRET = "dependency-test-secret-0123456789abcdef"


@pytest.fixture
def codec():
    return SessionTokenCodec(secret_key=SECRET)


@pytest.fixture
def test_client(codec):
    """Create test app with protected route."""
    app = FastAPI()
    app.dependency_overrides[get_session_codec] = lambda: codec

    @app.get("/protected")
    def protected_route(claims: SessionClaims = Depends(get_current_claims)):
        return {"user_id": claims.user_id, "email": claims.email}

    return TestClient(app)


def test_protected_route_with_valid_token(test_client, codec):
    """Test accessing protected route with valid token."""
    token = codec.encode(codec.issue("test@example.com", 42))

    response = test_client.get("/protected", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"user_id": 42, "email": "test@example.com"}


def test_protected_route_without_token(test_client):
    """Test accessing protected route without token."""
    response = test_client.get("/protected")
    assert response.status_code == 401


def test_protected_route_with_invalid_token(test_client):
    """Test accessing protected route with invalid token."""
    response = test_client.get("/protected", headers={"Authorization": "Bearer invalid_token"})
    assert response.status_code == 401


def test_protected_route_with_expired_token(test_client, codec):
    claims = SessionClaims(
        sub="test@example.com",
        expires_at=datetime.now(UTC) - timedelta(minutes=5),
        user_id=42,
    )
    token = codec.encode(claims)

    response = test_client.get("/protected", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_protected_route_with_foreign_signature(test_client):
    other = SessionTokenCodec(secret_key="some-other-secret-0123456789abcdef")
    token = other.encode(other.issue("test@example.com", 42))

    response = test_client.get("/protected", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_protected_route_with_wrong_scheme(test_client, codec):
    token = codec.encode(codec.issue("test@example.com", 42))

    response = test_client.get("/protected", headers={"Authorization": f"Basic {token}"})
    assert response.status_code == 401
