"""Database initialization script."""

from kokopic.database import Base, engine
from kokopic.models import EmailVerificationToken, Picture, PhotoRequest, User  # noqa: F401


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def init_db():
    """Initialize database schema."""
    print("Initializing database...")
    try:
        create_tables()
    except Exception as e:
        print(f"\nError during database initialization: {e}")
        raise
    print("\nDatabase initialization complete!")


if __name__ == "__main__":
    init_db()
