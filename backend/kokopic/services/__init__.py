"""Services layer - business logic and external integrations.

This module is organized into:
- auth/: Password hashing, session tokens, account and email verification
- repositories/: Data access layer
- request_service / picture_service: Photo requests and uploaded pictures
- storage_service / email_service: Blob storage and outbound email

Common imports for convenience:
    from kokopic.services import DuplicateError, NotFoundError
"""

# Re-export commonly used components for convenience
from kokopic.services.repositories import (
    DuplicateError,
    NotFoundError,
    RepositoryError,
)

__all__ = [
    # Repositories
    "DuplicateError",
    "NotFoundError",
    "RepositoryError",
]
