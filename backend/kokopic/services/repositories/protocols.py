"""Store contracts used by the identity service.

Any backing store (SQLAlchemy, in-memory) that provides these operations can
be plugged into ``IdentityService``. Returned records expose the attributes
of ``kokopic.models.User`` / ``kokopic.models.EmailVerificationToken``.
"""

from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable


@runtime_checkable
class UserStore(Protocol):
    """Persistence for accounts. No business rules."""

    def create(self, email: str, display_name: str, password: str) -> Any:
        """Hash ``password`` and insert an unverified account.

        Raises:
            DuplicateError: ``email`` is already registered.
        """
        ...

    def find_by_email(self, email: str) -> Any | None:
        """Exact-match lookup by email."""
        ...

    def find_by_id(self, user_id: int) -> Any | None:
        """Lookup by primary key."""
        ...

    def mark_verified(self, user_id: int) -> Any:
        """Set ``email_verified``; no-op when already set.

        Raises:
            NotFoundError: ``user_id`` does not exist.
        """
        ...


@runtime_checkable
class VerificationTokenStore(Protocol):
    """Persistence for verification tokens. No business rules."""

    def create(self, user_id: int, category: str) -> Any:
        """Insert a fresh random token expiring after the configured TTL."""
        ...

    def find_by_value(self, token: str) -> Any | None:
        """Plain lookup by token string."""
        ...

    def find_by_value_for_update(self, token: str) -> Any | None:
        """Lookup by token string holding an exclusive row lock.

        The lock is held until the enclosing unit of work ends, so concurrent
        redemptions of the same token serialize here.
        """
        ...

    def mark_used(self, token_id: int) -> Any:
        """Stamp ``used_at`` with the current time.

        Raises:
            NotFoundError: ``token_id`` does not exist.
        """
        ...


class UnitOfWork(Protocol):
    """Transaction boundary handing out both stores.

    Writes become visible only after ``commit()``; leaving the ``with`` block
    without committing rolls everything back.
    """

    users: UserStore
    tokens: VerificationTokenStore

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
