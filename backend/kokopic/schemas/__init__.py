"""Pydantic schemas for API request/response validation."""

from kokopic.schemas.auth import (
    LoginResponse,
    MessageResponse,
    ResendVerificationRequest,
    UserInfo,
    UserLogin,
    UserRegister,
)
from kokopic.schemas.picture import Picture, PictureList
from kokopic.schemas.request import Request, RequestCreate, RequestList, RequestWithDistance

__all__ = [
    "LoginResponse",
    "MessageResponse",
    "Picture",
    "PictureList",
    "Request",
    "RequestCreate",
    "RequestList",
    "RequestWithDistance",
    "ResendVerificationRequest",
    "UserInfo",
    "UserLogin",
    "UserRegister",
]
