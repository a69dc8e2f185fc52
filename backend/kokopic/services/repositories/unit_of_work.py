"""SQLAlchemy-backed unit of work."""

from collections.abc import Callable
from types import TracebackType
from typing import Self

from sqlalchemy.orm import Session

from kokopic.services.repositories.user_repository import UserRepository
from kokopic.services.repositories.verification_token_repository import (
    DEFAULT_EXPIRE_HOURS,
    VerificationTokenRepository,
)


class SqlAlchemyUnitOfWork:
    """One database session and transaction shared by the user and token stores.

    Usage:
        with SqlAlchemyUnitOfWork(SessionLocal) as uow:
            user = uow.users.create(...)
            uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)
            uow.commit()

    Anything not committed when the block exits is rolled back, which also
    releases row locks taken with ``find_by_value_for_update``.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        token_expire_hours: int = DEFAULT_EXPIRE_HOURS,
    ) -> None:
        self._session_factory = session_factory
        self._token_expire_hours = token_expire_hours
        self._session: Session | None = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Unit of work used outside of its 'with' block")
        return self._session

    def __enter__(self) -> Self:
        self._session = self._session_factory()
        self.users = UserRepository(self._session)
        self.tokens = VerificationTokenRepository(
            self._session, expire_hours=self._token_expire_hours
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            # Detach loaded rows first; rollback would expire them.
            self.session.expunge_all()
            self.rollback()
        finally:
            self.session.close()
            self._session = None

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
