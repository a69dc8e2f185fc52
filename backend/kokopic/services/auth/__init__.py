"""Authentication services.

Handles password hashing, session tokens and the account/verification flow.
"""

from .auth_service import AuthService
from .identity_service import IdentityService, IssuedSession
from .session_tokens import InvalidCredentialError, SessionClaims, SessionTokenCodec

__all__ = [
    "AuthService",
    "IdentityService",
    "InvalidCredentialError",
    "IssuedSession",
    "SessionClaims",
    "SessionTokenCodec",
]
