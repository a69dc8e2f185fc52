"""Authentication dependencies for protected routes."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from kokopic.dependencies.services import get_session_codec
from kokopic.services.auth.session_tokens import (
    InvalidCredentialError,
    SessionClaims,
    SessionTokenCodec,
)

security = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    codec: SessionTokenCodec = Depends(get_session_codec),
) -> SessionClaims:
    """
    Get the session claims from the bearer token.

    Usage:
        @router.get("/protected")
        def protected_route(claims: SessionClaims = Depends(get_current_claims)):
            return {"user_id": claims.user_id}
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return codec.decode(credentials.credentials)
    except InvalidCredentialError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
