"""Account, login and email verification router."""

import logging

from fastapi import APIRouter, Depends, status

from kokopic.dependencies.auth import get_current_claims
from kokopic.dependencies.services import get_identity_service
from kokopic.schemas.auth import (
    LoginResponse,
    MessageResponse,
    ResendVerificationRequest,
    UserInfo,
    UserLogin,
    UserRegister,
)
from kokopic.services.auth.identity_service import IdentityService, IssuedSession
from kokopic.services.auth.session_tokens import SessionClaims

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["authentication"])


def _login_response(session: IssuedSession) -> LoginResponse:
    return LoginResponse(
        token=session.token,
        user_id=session.user.id,
        email=session.user.email,
        display_name=session.user.display_name,
    )


@router.post("/users", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserRegister,
    identity: IdentityService = Depends(get_identity_service),
):
    """Register a new account and send the verification email."""
    return identity.create_account(data.email, data.display_name, data.password)


@router.post("/login", response_model=LoginResponse)
def login(
    data: UserLogin,
    identity: IdentityService = Depends(get_identity_service),
):
    """Exchange email and password for a session token (verified accounts only)."""
    return _login_response(identity.login(data.email, data.password))


@router.get("/verify-email/{token}", response_model=LoginResponse)
def verify_email(
    token: str,
    identity: IdentityService = Depends(get_identity_service),
):
    """Redeem a verification token; the account is signed in on success."""
    return _login_response(identity.verify_email(token))


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(
    data: ResendVerificationRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    """Resend the verification email. Always succeeds to prevent email enumeration."""
    identity.resend_verification_by_email(data.email)
    return {"message": "If the email is registered and unverified, a verification link has been sent."}


@router.post("/users/me/resend-verification", response_model=MessageResponse)
def resend_my_verification(
    claims: SessionClaims = Depends(get_current_claims),
    identity: IdentityService = Depends(get_identity_service),
):
    """Issue a new verification email for the signed-in account."""
    identity.send_verification_email(claims.user_id)
    return {"message": "Verification email sent."}


@router.get("/users/me", response_model=UserInfo)
def get_me(
    claims: SessionClaims = Depends(get_current_claims),
    identity: IdentityService = Depends(get_identity_service),
):
    """Get the signed-in account."""
    return identity.get_account_by_id(claims.user_id)
