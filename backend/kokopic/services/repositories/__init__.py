"""Data access layer."""

from kokopic.services.repositories.exceptions import (
    DuplicateError,
    NotFoundError,
    RepositoryError,
)
from kokopic.services.repositories.memory import InMemoryDatabase, InMemoryUnitOfWork
from kokopic.services.repositories.picture_repository import PictureRepository
from kokopic.services.repositories.protocols import (
    UnitOfWork,
    UserStore,
    VerificationTokenStore,
)
from kokopic.services.repositories.request_repository import RequestRepository
from kokopic.services.repositories.unit_of_work import SqlAlchemyUnitOfWork
from kokopic.services.repositories.user_repository import UserRepository
from kokopic.services.repositories.verification_token_repository import (
    VerificationTokenRepository,
)

__all__ = [
    "DuplicateError",
    "InMemoryDatabase",
    "InMemoryUnitOfWork",
    "NotFoundError",
    "PictureRepository",
    "RepositoryError",
    "RequestRepository",
    "SqlAlchemyUnitOfWork",
    "UnitOfWork",
    "UserRepository",
    "UserStore",
    "VerificationTokenRepository",
    "VerificationTokenStore",
]
