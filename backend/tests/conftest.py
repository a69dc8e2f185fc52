"""Shared test fixtures."""

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kokopic.database import Base, get_db
from kokopic.dependencies.services import get_notifier, get_session_factory
from kokopic.main import app
from kokopic.models import User
from kokopic.services.storage_service import LocalStorageService, get_storage_service

TEST_PASSWORD = "Secure123"

_VERIFY_LINK = re.compile(r"/verify-email/(\S+)")


class RecordingNotifier:
    """Notifier double that remembers every message."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.sent: list[tuple[str, str, str]] = []

    def send(self, recipient: str, subject: str, body: str) -> bool:
        self.sent.append((recipient, subject, body))
        return self.result

    def tokens_for(self, recipient: str) -> list[str]:
        """Verification token values mailed to ``recipient``, oldest first."""
        return [
            _VERIFY_LINK.search(body).group(1)
            for to, _, body in self.sent
            if to == recipient and _VERIFY_LINK.search(body)
        ]


def create_engine_for_tests():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def register_and_verify_user(
    test_client: TestClient,
    notifier: RecordingNotifier,
    email: str,
    password: str = TEST_PASSWORD,
    display_name: str = "Test User",
) -> dict:
    """Helper to register a user, redeem the mailed token and return the login payload."""
    test_client.post(
        "/api/v1/users",
        json={"email": email, "display_name": display_name, "password": password},
    )
    token = notifier.tokens_for(email)[-1]
    test_client.get(f"/api/v1/verify-email/{token}")

    response = test_client.post(
        "/api/v1/login",
        json={"email": email, "password": password},
    )
    return response.json()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    """Database session on a fresh in-memory schema."""
    engine = create_engine_for_tests()
    testing_session_local = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_user(db):
    """Create an unverified test user."""
    user = User(
        email="owner@example.com",
        display_name="Owner",
        password_hash="hashed",
        email_verified=False,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client(tmp_path):
    """Create test client with in-memory database, recording notifier and local storage.

    Yields a tuple of (TestClient, SessionMaker, RecordingNotifier).
    """
    engine = create_engine_for_tests()
    testing_session_local = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    notifier = RecordingNotifier()
    storage = LocalStorageService(
        base_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver/uploads",
    )

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: testing_session_local
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_storage_service] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client, testing_session_local, notifier

    app.dependency_overrides.clear()
