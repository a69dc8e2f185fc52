"""Tests for SqlAlchemyUnitOfWork and the in-memory unit of work."""

import threading

import pytest
from sqlalchemy.orm import sessionmaker

from kokopic.constants import TokenCategory
from kokopic.models import EmailVerificationToken, User
from kokopic.services.repositories import (
    DuplicateError,
    InMemoryDatabase,
    InMemoryUnitOfWork,
    SqlAlchemyUnitOfWork,
    UserStore,
    VerificationTokenStore,
)
from tests.conftest import create_engine_for_tests


@pytest.fixture
def session_factory():
    engine = create_engine_for_tests()
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class TestSqlAlchemyUnitOfWork:
    def test_stores_satisfy_protocols(self, session_factory):
        with SqlAlchemyUnitOfWork(session_factory) as uow:
            assert isinstance(uow.users, UserStore)
            assert isinstance(uow.tokens, VerificationTokenStore)

    def test_commit_persists_paired_writes(self, session_factory):
        with SqlAlchemyUnitOfWork(session_factory) as uow:
            user = uow.users.create("a@example.com", "A", "password123")
            uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)
            uow.commit()

        db = session_factory()
        assert db.query(User).count() == 1
        assert db.query(EmailVerificationToken).count() == 1
        db.close()

    def test_exit_without_commit_rolls_back(self, session_factory):
        with SqlAlchemyUnitOfWork(session_factory) as uow:
            user = uow.users.create("a@example.com", "A", "password123")
            uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)

        db = session_factory()
        assert db.query(User).count() == 0
        assert db.query(EmailVerificationToken).count() == 0
        db.close()

    def test_exception_rolls_back(self, session_factory):
        with pytest.raises(RuntimeError):
            with SqlAlchemyUnitOfWork(session_factory) as uow:
                uow.users.create("a@example.com", "A", "password123")
                raise RuntimeError("boom")

        db = session_factory()
        assert db.query(User).count() == 0
        db.close()

    def test_rows_readable_after_exit(self, session_factory):
        with SqlAlchemyUnitOfWork(session_factory) as uow:
            uow.users.create("a@example.com", "A", "password123")
            uow.commit()

        with SqlAlchemyUnitOfWork(session_factory) as uow:
            user = uow.users.find_by_email("a@example.com")

        assert user.email == "a@example.com"
        assert user.display_name == "A"

    def test_session_unavailable_outside_block(self, session_factory):
        uow = SqlAlchemyUnitOfWork(session_factory)
        with pytest.raises(RuntimeError):
            uow.commit()


class TestInMemoryUnitOfWork:
    def test_stores_satisfy_protocols(self):
        with InMemoryUnitOfWork(InMemoryDatabase()) as uow:
            assert isinstance(uow.users, UserStore)
            assert isinstance(uow.tokens, VerificationTokenStore)

    def test_commit_persists(self):
        database = InMemoryDatabase()
        with InMemoryUnitOfWork(database) as uow:
            user = uow.users.create("a@example.com", "A", "password123")
            uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)
            uow.commit()

        assert len(database.users) == 1
        assert len(database.tokens) == 1

    def test_exit_without_commit_rolls_back(self):
        database = InMemoryDatabase()
        with InMemoryUnitOfWork(database) as uow:
            user = uow.users.create("a@example.com", "A", "password123")
            uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION)

        assert database.users == {}
        assert database.tokens == {}

    def test_duplicate_email(self):
        database = InMemoryDatabase()
        with InMemoryUnitOfWork(database) as uow:
            uow.users.create("a@example.com", "A", "password123")
            uow.commit()

        with InMemoryUnitOfWork(database) as uow:
            with pytest.raises(DuplicateError):
                uow.users.create("a@example.com", "B", "password123")

    def test_reads_are_copies(self):
        database = InMemoryDatabase()
        with InMemoryUnitOfWork(database) as uow:
            uow.users.create("a@example.com", "A", "password123")
            uow.commit()

        with InMemoryUnitOfWork(database) as uow:
            user = uow.users.find_by_email("a@example.com")
            user.email_verified = True

        assert next(iter(database.users.values())).email_verified is False

    def test_row_lock_blocks_second_holder_until_commit(self):
        database = InMemoryDatabase()
        with InMemoryUnitOfWork(database) as uow:
            user = uow.users.create("a@example.com", "A", "password123")
            value = uow.tokens.create(user.id, TokenCategory.EMAIL_VERIFICATION).token
            uow.commit()

        seen = {}

        def second_holder():
            with InMemoryUnitOfWork(database) as other:
                seen["used_at"] = other.tokens.find_by_value_for_update(value).used_at

        with InMemoryUnitOfWork(database) as uow:
            token = uow.tokens.find_by_value_for_update(value)
            thread = threading.Thread(target=second_holder)
            thread.start()
            thread.join(timeout=0.2)
            assert thread.is_alive()

            uow.tokens.mark_used(token.id)
            uow.commit()

        thread.join(timeout=5)
        assert not thread.is_alive()
        assert seen["used_at"] is not None
