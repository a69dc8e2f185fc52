"""Signed session credentials (JWT)."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

logger = logging.getLogger(__name__)


class InvalidCredentialError(Exception):
    """Session token is malformed, badly signed, expired or missing claims."""


@dataclass(frozen=True)
class SessionClaims:
    """Payload asserting an authenticated identity until ``expires_at``."""

    sub: str
    expires_at: datetime
    user_id: int

    @property
    def email(self) -> str:
        return self.sub


class SessionTokenCodec:
    """Encode and decode session claims as HMAC-signed JWTs.

    The secret is handed in once at construction; rotating it invalidates
    every outstanding session.
    """

    REQUIRED_CLAIMS = ("sub", "exp", "user_id")

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 24) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = timedelta(hours=expire_hours)

    def issue(self, email: str, user_id: int, now: datetime | None = None) -> SessionClaims:
        """Build claims for a fresh session starting at ``now``."""
        issued_at = now or datetime.now(UTC)
        return SessionClaims(sub=email, expires_at=issued_at + self._ttl, user_id=user_id)

    def encode(self, claims: SessionClaims) -> str:
        """Sign claims into a token string.

        Raises:
            jwt.PyJWTError: Signing failed (bad key or algorithm).
        """
        payload = {
            "sub": claims.sub,
            "exp": claims.expires_at,
            "user_id": claims.user_id,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> SessionClaims:
        """Verify a token and return its claims.

        Raises:
            InvalidCredentialError: Signature invalid, malformed, expired or
                missing a required claim.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": list(self.REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            logger.debug("Session token expired")
            raise InvalidCredentialError("Token expired") from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid session token: {e}")
            raise InvalidCredentialError("Invalid token") from e

        user_id = payload["user_id"]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidCredentialError("Invalid token")

        return SessionClaims(
            sub=payload["sub"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            user_id=user_id,
        )
