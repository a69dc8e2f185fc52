"""Database configuration and session management."""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from kokopic.config import settings


# Base class for ORM models
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


# READ COMMITTED keeps plain reads non-blocking while a redemption holds
# its row lock; lock_timeout bounds how long a second redemption waits.
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
    pool_recycle=3600,
    echo=False,
    isolation_level="READ COMMITTED",
    connect_args={"options": "-c lock_timeout=5000"},
)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Prevent lazy loading errors after commit
)


# Dependency for FastAPI routes
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Yields:
        Session: SQLAlchemy database session

    Example:
        @app.get("/requests")
        def list_requests(db: Session = Depends(get_db)):
            return db.query(PhotoRequest).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
