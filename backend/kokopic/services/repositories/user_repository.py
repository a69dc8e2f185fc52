"""User data access layer."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kokopic.models import User
from kokopic.services.auth.auth_service import AuthService
from kokopic.services.repositories.exceptions import DuplicateError, NotFoundError

logger = logging.getLogger(__name__)


class UserRepository:
    """Centralized user data access.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises exception if missing

    Writes are flushed, never committed; the caller owns the transaction.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, email: str, display_name: str, password: str) -> User:
        """Insert an unverified user with a hashed password."""
        user = User(
            email=email,
            display_name=display_name,
            password_hash=AuthService.hash_password(password),
            email_verified=False,
            created_at=datetime.now(UTC),
        )
        self._db.add(user)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("User", "email", email) from e
        return user

    def find_by_id(self, user_id: int) -> User | None:
        """Find user by primary key."""
        return self._db.query(User).filter(User.id == user_id).first()

    def find_by_email(self, email: str) -> User | None:
        """Find user by email (exact match, case-sensitive)."""
        return self._db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> User:
        """Get user by primary key or raise NotFoundError."""
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def mark_verified(self, user_id: int) -> User:
        """Flag the user's email as verified."""
        user = self.get_by_id(user_id)
        if not user.email_verified:
            user.email_verified = True
            self._db.flush()
        return user
