"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Username and password for registration; lengths match the users table."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """
    Username and password for login. No length limits: any unknown or
    malformed username must get the same 401 as a wrong password.
    """

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class SessionResponse(BaseModel):
    """Returned after register/login; the token itself travels in the auth cookie."""

    success: bool = True
    redirect: str = Field(default="/profile", description="Where the client should navigate next")


class ValidateResponse(BaseModel):
    """Returned by GET /auth/validate once the gate has admitted the request."""

    tokenIsValid: bool = True


class LogoutResponse(BaseModel):
    success: bool = True
