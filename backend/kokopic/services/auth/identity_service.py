"""Account creation, login and email verification.

``IdentityService`` is the only component that mutates accounts and
verification tokens. Paired writes (account + token on creation, account
flag + token ``used_at`` on redemption) happen inside one unit of work so
they land together or not at all. Email delivery is best effort and never
fails the operation that triggered it.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt
from sqlalchemy.exc import SQLAlchemyError

from kokopic.constants import TokenCategory
from kokopic.services.auth.auth_service import AuthService
from kokopic.services.auth.session_tokens import SessionClaims, SessionTokenCodec
from kokopic.services.email_service import (
    VERIFICATION_SUBJECT,
    Notifier,
    build_verification_email_body,
)
from kokopic.services.exceptions import (
    ConflictError,
    InternalError,
    InvalidTokenError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    UnauthorizedError,
    UserNotFoundError,
)
from kokopic.services.repositories.exceptions import (
    DuplicateError,
    NotFoundError,
    RepositoryError,
)
from kokopic.services.repositories.protocols import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    """Encoded session token together with its claims and the account."""

    token: str
    claims: SessionClaims
    user: Any


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, RepositoryError) as e:
        logger.exception(f"Store error during {operation}")
        raise InternalError() from e


class IdentityService:
    """Orchestrates account stores, session codec and notifier."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        codec: SessionTokenCodec,
        notifier: Notifier,
        frontend_url: str,
    ) -> None:
        self._uow_factory = uow_factory
        self._codec = codec
        self._notifier = notifier
        self._frontend_url = frontend_url

    def create_account(self, email: str, display_name: str, password: str) -> Any:
        """Register an unverified account and email it a verification link.

        The payload is expected to be validated already (email shape, display
        name, password rules).

        Raises:
            ConflictError: The email is already registered.
            InternalError: The store failed.
        """
        with _store_errors("account creation"):
            try:
                with self._uow_factory() as uow:
                    user = uow.users.create(email, display_name, password)
                    token = uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)
                    uow.commit()
            except DuplicateError as e:
                logger.info(f"Registration rejected, email already registered: {email}")
                raise ConflictError("Email already registered") from e

        logger.info(f"User registered (pending verification): {user.email}")
        self._send_verification(user.email, token.token)
        return user

    def login(self, email: str, password: str) -> IssuedSession:
        """Authenticate a verified account and issue a session.

        Unknown email, wrong password and unverified email all raise the same
        ``UnauthorizedError``.
        """
        with _store_errors("login"):
            with self._uow_factory() as uow:
                user = uow.users.find_by_email(email)

        if user is None:
            # Keep timing close to the found-account path
            AuthService.verify_password(password, AuthService.get_dummy_hash())
            logger.info(f"Login failed, unknown email: {email}")
            raise UnauthorizedError()

        if not AuthService.verify_password(password, user.password_hash):
            logger.info(f"Login failed, wrong password for user {user.id}")
            raise UnauthorizedError()

        if not user.email_verified:
            logger.info(f"Login failed, email not verified for user {user.id}")
            raise UnauthorizedError()

        return self._issue_session(user)

    def send_verification_email(self, user_id: int) -> None:
        """Create a fresh verification token for the account and email it.

        Earlier tokens stay redeemable.

        Raises:
            UserNotFoundError: No such account.
        """
        with _store_errors("verification token creation"):
            with self._uow_factory() as uow:
                user = uow.users.find_by_id(user_id)
                if user is None:
                    raise UserNotFoundError()
                token = uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)
                uow.commit()

        logger.info(f"Verification token issued for user {user.id}")
        self._send_verification(user.email, token.token)

    def resend_verification_by_email(self, email: str) -> None:
        """Resend the verification email if the address belongs to an unverified account.

        Does nothing otherwise, so callers learn nothing about registration.
        """
        with _store_errors("verification resend"):
            with self._uow_factory() as uow:
                user = uow.users.find_by_email(email)

        if user is None or user.email_verified:
            logger.debug(f"Verification resend skipped for {email}")
            return

        try:
            self.send_verification_email(user.id)
        except UserNotFoundError:
            logger.debug(f"Account for {email} vanished before resend")

    def verify_email(self, token: str) -> IssuedSession:
        """Redeem a verification token and sign the account in.

        The token row stays locked from lookup to commit, so concurrent
        redemptions of one token produce a single success.

        Raises:
            InvalidTokenError: Unknown token.
            TokenExpiredError: Token is past ``expires_at`` (checked before use).
            TokenAlreadyUsedError: Token was redeemed before.
        """
        with _store_errors("email verification"):
            with self._uow_factory() as uow:
                record = uow.tokens.find_by_value_for_update(token)
                if record is None:
                    raise InvalidTokenError()

                if _as_utc(record.expires_at) <= datetime.now(UTC):
                    raise TokenExpiredError()
                if record.used_at is not None:
                    raise TokenAlreadyUsedError()

                try:
                    user = uow.users.mark_verified(record.user_id)
                    uow.tokens.mark_used(record.id)
                except NotFoundError as e:
                    raise UserNotFoundError() from e
                uow.commit()

        logger.info(f"Email verified for user {user.id}")
        return self._issue_session(user)

    def get_account_by_id(self, user_id: int) -> Any:
        """Look up an account.

        Raises:
            UserNotFoundError: No such account.
        """
        with _store_errors("account lookup"):
            with self._uow_factory() as uow:
                user = uow.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def _issue_session(self, user: Any) -> IssuedSession:
        claims = self._codec.issue(user.email, user.id)
        try:
            encoded = self._codec.encode(claims)
        except (jwt.PyJWTError, NotImplementedError) as e:
            logger.exception(f"Failed to sign session token for user {user.id}")
            raise InternalError() from e
        return IssuedSession(token=encoded, claims=claims, user=user)

    def _send_verification(self, email: str, token: str) -> None:
        body = build_verification_email_body(token, self._frontend_url)
        try:
            sent = self._notifier.send(email, VERIFICATION_SUBJECT, body)
        except Exception:
            logger.exception(f"Notifier raised while sending verification email to {email}")
            return
        if not sent:
            logger.warning(f"Verification email to {email} was not delivered")
