"""Route dependencies: token codec injection and the authorization gate."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.errors import ApiError
from app.core.gate import ShortCircuit, authorize
from app.core.security import TokenCodec


@lru_cache
def get_token_codec() -> TokenCodec:
    """Codec built once from settings; override in tests via app.dependency_overrides."""
    return TokenCodec.from_settings(get_settings())


def get_current_user_id(
    request: Request,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> int:
    """
    Dependency: run the authorization gate on the request's auth cookie.
    Raises 401 when no token is sent and 403 when it does not verify.
    The admitted user id is also stored on request.state.user_id.
    """
    result = authorize(request.cookies, codec, cookie_name=settings.AUTH_COOKIE_NAME)
    if isinstance(result, ShortCircuit):
        raise ApiError(result.status_code, result.body)
    user_id: int = result.context["user_id"]
    request.state.user_id = user_id
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
