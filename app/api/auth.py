"""Register, login, logout and token validation. The session token lives in an httpOnly cookie."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import CurrentUserId, get_token_codec
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import SERVER_ERROR_BODY, ApiError, failure
from app.core.security import TokenCodec
from app.schemas.auth import (
    CredentialsRequest,
    LoginRequest,
    LogoutResponse,
    SessionResponse,
    ValidateResponse,
)
from app.services.accounts import (
    InvalidCredentialsError,
    UsernameTakenError,
    authenticate_user,
    register_user,
)

logger = logging.getLogger(__name__)
router = APIRouter()

USERNAME_TAKEN_MESSAGE = "Username is already in use. Please choose a different one."
# Same text for unknown username and wrong password so usernames can't be probed.
BAD_CREDENTIALS_MESSAGE = "Username and/or password is incorrect."
AUTH_COOKIE_SAMESITE = "strict"


def _set_auth_cookie(response: Response, token: str, codec: TokenCodec, settings: Settings) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=codec.ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=AUTH_COOKIE_SAMESITE,
    )


def _clear_auth_cookie(response: Response, settings: Settings) -> None:
    # Attributes must match _set_auth_cookie or browsers keep the cookie.
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=AUTH_COOKIE_SAMESITE,
    )


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: CredentialsRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """
    Create a user with a default profile and start a session.
    The JWT is set in the auth cookie; the body tells the client to go to /profile.
    """
    try:
        user = register_user(db, body.username, body.password)
    except UsernameTakenError as e:
        logger.info("Registration rejected: username taken")
        raise failure(status.HTTP_409_CONFLICT, USERNAME_TAKEN_MESSAGE) from e
    except SQLAlchemyError as e:
        logger.exception("Registration failed")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_BODY) from e

    _set_auth_cookie(response, codec.issue(user.id), codec, settings)
    return SessionResponse()


@router.post("/login", response_model=SessionResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Check username and password and start a session (JWT in the auth cookie)."""
    try:
        user = authenticate_user(db, body.username, body.password)
    except InvalidCredentialsError as e:
        logger.info("Login failed for username=%r", body.username)
        raise failure(status.HTTP_401_UNAUTHORIZED, BAD_CREDENTIALS_MESSAGE) from e
    except SQLAlchemyError as e:
        logger.exception("Login failed")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_BODY) from e

    _set_auth_cookie(response, codec.issue(user.id), codec, settings)
    logger.info("Login succeeded for user id=%s", user.id)
    return SessionResponse()


@router.get("/validate", response_model=ValidateResponse)
def validate(_user_id: CurrentUserId) -> ValidateResponse:
    """Report that the auth cookie holds a valid token. Rejections come from the gate."""
    return ValidateResponse()


@router.post("/logout", response_model=LogoutResponse)
def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> LogoutResponse:
    """
    Tell the client to drop the auth cookie. No-op when no cookie was sent.
    The token is not revoked server-side; it still expires on its own.
    """
    _clear_auth_cookie(response, settings)
    return LogoutResponse()
