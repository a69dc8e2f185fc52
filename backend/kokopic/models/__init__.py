"""SQLAlchemy ORM models."""

from kokopic.models.email_verification_token import EmailVerificationToken
from kokopic.models.picture import Picture
from kokopic.models.request import PhotoRequest
from kokopic.models.user import User

__all__ = [
    "EmailVerificationToken",
    "Picture",
    "PhotoRequest",
    "User",
]
