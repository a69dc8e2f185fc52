"""Email verification token data access layer."""

import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from kokopic.models import EmailVerificationToken
from kokopic.services.repositories.exceptions import NotFoundError

DEFAULT_EXPIRE_HOURS = 24


def generate_token_value() -> str:
    """Unguessable URL-safe token string."""
    return secrets.token_urlsafe(32)


class VerificationTokenRepository:
    """Centralized verification token data access.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises exception if missing
    """

    def __init__(self, db: Session, expire_hours: int = DEFAULT_EXPIRE_HOURS) -> None:
        self._db = db
        self._ttl = timedelta(hours=expire_hours)

    def create(self, user_id: int, category: str) -> EmailVerificationToken:
        """Insert a new live token for a user."""
        now = datetime.now(UTC)
        record = EmailVerificationToken(
            user_id=user_id,
            token=generate_token_value(),
            category=category,
            expires_at=now + self._ttl,
            used_at=None,
            created_at=now,
        )
        self._db.add(record)
        self._db.flush()
        return record

    def find_by_value(self, token: str) -> EmailVerificationToken | None:
        """Find token by its string value."""
        return (
            self._db.query(EmailVerificationToken)
            .filter(EmailVerificationToken.token == token)
            .first()
        )

    def find_by_value_for_update(self, token: str) -> EmailVerificationToken | None:
        """Find token by value with a row-level lock held until commit/rollback."""
        return (
            self._db.query(EmailVerificationToken)
            .filter(EmailVerificationToken.token == token)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def get_by_id(self, token_id: int) -> EmailVerificationToken:
        """Get token by primary key or raise NotFoundError."""
        record = (
            self._db.query(EmailVerificationToken)
            .filter(EmailVerificationToken.id == token_id)
            .first()
        )
        if record is None:
            raise NotFoundError("EmailVerificationToken", token_id)
        return record

    def mark_used(self, token_id: int) -> EmailVerificationToken:
        """Stamp the token as used now."""
        record = self.get_by_id(token_id)
        record.used_at = datetime.now(UTC)
        self._db.flush()
        return record
