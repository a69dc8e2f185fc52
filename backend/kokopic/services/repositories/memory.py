"""In-process stores satisfying the identity store protocols.

Used by the identity service tests and handy for local experiments without
a database. Every read hands out a copy so callers never mutate shared state
outside a commit, and token rows carry their own lock so
``find_by_value_for_update`` serializes concurrent redemptions the way
``SELECT ... FOR UPDATE`` does in PostgreSQL.
"""

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from types import TracebackType
from typing import Self

from kokopic.services.auth.auth_service import AuthService
from kokopic.services.repositories.exceptions import DuplicateError, NotFoundError
from kokopic.services.repositories.verification_token_repository import (
    DEFAULT_EXPIRE_HOURS,
    generate_token_value,
)


@dataclass
class UserRecord:
    id: int
    email: str
    display_name: str
    password_hash: str
    email_verified: bool
    created_at: datetime


@dataclass
class TokenRecord:
    id: int
    user_id: int
    token: str
    category: str
    expires_at: datetime
    used_at: datetime | None
    created_at: datetime


class InMemoryDatabase:
    """Committed rows plus id sequences and row locks."""

    def __init__(self) -> None:
        self.users: dict[int, UserRecord] = {}
        self.tokens: dict[int, TokenRecord] = {}
        self.mutex = threading.Lock()
        self._next_user_id = 1
        self._next_token_id = 1
        self._row_locks: dict[int, threading.Lock] = {}

    def next_user_id(self) -> int:
        with self.mutex:
            value = self._next_user_id
            self._next_user_id += 1
            return value

    def next_token_id(self) -> int:
        with self.mutex:
            value = self._next_token_id
            self._next_token_id += 1
            return value

    def token_row_lock(self, token_id: int) -> threading.Lock:
        with self.mutex:
            return self._row_locks.setdefault(token_id, threading.Lock())


class InMemoryUserStore:
    """Account store over an ``InMemoryDatabase`` with staged writes."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self.staged: dict[int, UserRecord] = {}

    def create(self, email: str, display_name: str, password: str) -> UserRecord:
        if self.find_by_email(email) is not None:
            raise DuplicateError("User", "email", email)
        record = UserRecord(
            id=self._db.next_user_id(),
            email=email,
            display_name=display_name,
            password_hash=AuthService.hash_password(password),
            email_verified=False,
            created_at=datetime.now(UTC),
        )
        self.staged[record.id] = record
        return replace(record)

    def find_by_id(self, user_id: int) -> UserRecord | None:
        record = self.staged.get(user_id)
        if record is None:
            with self._db.mutex:
                record = self._db.users.get(user_id)
        return replace(record) if record else None

    def find_by_email(self, email: str) -> UserRecord | None:
        for record in self.staged.values():
            if record.email == email:
                return replace(record)
        with self._db.mutex:
            for record in self._db.users.values():
                if record.email == email:
                    return replace(record)
        return None

    def mark_verified(self, user_id: int) -> UserRecord:
        record = self.find_by_id(user_id)
        if record is None:
            raise NotFoundError("User", user_id)
        record.email_verified = True
        self.staged[user_id] = record
        return replace(record)


class InMemoryVerificationTokenStore:
    """Token store over an ``InMemoryDatabase`` with staged writes."""

    def __init__(self, db: InMemoryDatabase, expire_hours: int = DEFAULT_EXPIRE_HOURS) -> None:
        self._db = db
        self._ttl = timedelta(hours=expire_hours)
        self.staged: dict[int, TokenRecord] = {}
        self.held_locks: list[threading.Lock] = []

    def create(self, user_id: int, category: str) -> TokenRecord:
        now = datetime.now(UTC)
        record = TokenRecord(
            id=self._db.next_token_id(),
            user_id=user_id,
            token=generate_token_value(),
            category=category,
            expires_at=now + self._ttl,
            used_at=None,
            created_at=now,
        )
        self.staged[record.id] = record
        return replace(record)

    def find_by_value(self, token: str) -> TokenRecord | None:
        for record in self.staged.values():
            if record.token == token:
                return replace(record)
        with self._db.mutex:
            for record in self._db.tokens.values():
                if record.token == token:
                    return replace(record)
        return None

    def find_by_value_for_update(self, token: str) -> TokenRecord | None:
        found = self.find_by_value(token)
        if found is None or found.id in self.staged:
            return found
        lock = self._db.token_row_lock(found.id)
        if lock not in self.held_locks:
            lock.acquire()
            self.held_locks.append(lock)
        # Re-read after the lock is granted; another holder may have committed.
        with self._db.mutex:
            return replace(self._db.tokens[found.id])

    def mark_used(self, token_id: int) -> TokenRecord:
        record = self.staged.get(token_id)
        if record is None:
            with self._db.mutex:
                record = self._db.tokens.get(token_id)
        if record is None:
            raise NotFoundError("EmailVerificationToken", token_id)
        record = replace(record, used_at=datetime.now(UTC))
        self.staged[token_id] = record
        return replace(record)

    def release_locks(self) -> None:
        while self.held_locks:
            self.held_locks.pop().release()


class InMemoryUnitOfWork:
    """Unit of work over an ``InMemoryDatabase``.

    Writes are staged per unit of work and applied under the database mutex
    on ``commit()``. Row locks are released on commit, rollback or exit.
    """

    def __init__(
        self, db: InMemoryDatabase, token_expire_hours: int = DEFAULT_EXPIRE_HOURS
    ) -> None:
        self._db = db
        self._token_expire_hours = token_expire_hours

    def __enter__(self) -> Self:
        self.users = InMemoryUserStore(self._db)
        self.tokens = InMemoryVerificationTokenStore(
            self._db, expire_hours=self._token_expire_hours
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()

    def commit(self) -> None:
        try:
            with self._db.mutex:
                for record in self.users.staged.values():
                    for existing in self._db.users.values():
                        if existing.email == record.email and existing.id != record.id:
                            raise DuplicateError("User", "email", record.email)
                self._db.users.update(self.users.staged)
                self._db.tokens.update(self.tokens.staged)
        finally:
            self.users.staged.clear()
            self.tokens.staged.clear()
            self.tokens.release_locks()

    def rollback(self) -> None:
        self.users.staged.clear()
        self.tokens.staged.clear()
        self.tokens.release_locks()
