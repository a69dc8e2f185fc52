"""Service providers for FastAPI routes.

Each provider is a plain dependency so tests can swap it through
``app.dependency_overrides``.
"""

from collections.abc import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from kokopic.config import settings
from kokopic.database import SessionLocal, get_db
from kokopic.services.auth.identity_service import IdentityService
from kokopic.services.auth.session_tokens import SessionTokenCodec
from kokopic.services.email_service import EmailService, Notifier
from kokopic.services.picture_service import PictureService
from kokopic.services.repositories.unit_of_work import SqlAlchemyUnitOfWork
from kokopic.services.request_service import RequestService
from kokopic.services.storage_service import StorageService, get_storage_service


def get_session_factory() -> Callable[[], Session]:
    """Factory opening a fresh session per unit of work."""
    return SessionLocal


def get_session_codec() -> SessionTokenCodec:
    return SessionTokenCodec(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_hours=settings.session_token_expire_hours,
    )


def get_notifier() -> Notifier:
    return EmailService(
        api_key=settings.sendgrid_api_key,
        from_address=settings.email_from_address,
        from_name=settings.email_from_name,
    )


def get_identity_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    codec: SessionTokenCodec = Depends(get_session_codec),
    notifier: Notifier = Depends(get_notifier),
) -> IdentityService:
    def uow_factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(
            session_factory, token_expire_hours=settings.verification_token_expire_hours
        )

    return IdentityService(
        uow_factory=uow_factory,
        codec=codec,
        notifier=notifier,
        frontend_url=settings.frontend_url,
    )


def get_request_service(db: Session = Depends(get_db)) -> RequestService:
    return RequestService(db)


def get_picture_service(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> PictureService:
    return PictureService(db, storage)
