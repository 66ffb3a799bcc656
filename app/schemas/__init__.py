"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CredentialsRequest,
    LoginRequest,
    LogoutResponse,
    SessionResponse,
    ValidateResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.profile import (
    ProfileData,
    ProfileDeletedResponse,
    ProfileMessageResponse,
    ProfileUpdateRequest,
    ProfileViewResponse,
)

__all__ = [
    "CredentialsRequest",
    "HealthResponse",
    "LoginRequest",
    "LogoutResponse",
    "ProfileData",
    "ProfileDeletedResponse",
    "ProfileMessageResponse",
    "ProfileUpdateRequest",
    "ProfileViewResponse",
    "SessionResponse",
    "ValidateResponse",
]
