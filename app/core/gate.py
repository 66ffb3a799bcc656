"""
Authorization gate: decides whether a request may reach a protected handler.

The gate is a small pipeline of stages. Each stage receives the request
context and returns either Continue (with an updated context) or
ShortCircuit (with the status and body to answer immediately). It does not
depend on FastAPI; app.api.deps adapts it to a route dependency.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from app.core.security import TokenCodec, TokenVerificationError

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "Access Denied: No token provided"
INVALID_TOKEN_MESSAGE = "Forbidden: Invalid token"


@dataclass(frozen=True)
class Continue:
    """Stage passed; hand the context to the next stage."""

    context: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ShortCircuit:
    """Stage rejected the request; respond with this status and body."""

    status_code: int
    body: dict[str, Any]


StageResult = Continue | ShortCircuit
Stage = Callable[[dict[str, Any]], StageResult]


def run_pipeline(stages: Sequence[Stage], context: dict[str, Any]) -> StageResult:
    """Run stages in order, stopping at the first ShortCircuit."""
    result: StageResult = Continue(dict(context))
    for stage in stages:
        result = stage(result.context)
        if isinstance(result, ShortCircuit):
            return result
    return result


def _reject(status_code: int, message: str) -> ShortCircuit:
    return ShortCircuit(status_code, {"success": False, "message": message})


def extract_token(cookie_name: str) -> Stage:
    """Stage: pull the token out of the named cookie; 401 when absent or empty."""

    def stage(context: dict[str, Any]) -> StageResult:
        cookies: Mapping[str, str] = context.get("cookies") or {}
        token = cookies.get(cookie_name)
        if not token:
            return _reject(401, NO_TOKEN_MESSAGE)
        return Continue({**context, "token": token})

    return stage


def verify_token(codec: TokenCodec) -> Stage:
    """Stage: verify the token and attach user_id; 403 on any verification error."""

    def stage(context: dict[str, Any]) -> StageResult:
        try:
            user_id = codec.verify(context["token"])
        except TokenVerificationError as e:
            logger.info("Rejected session token: reason=%s", e.reason)
            return _reject(403, INVALID_TOKEN_MESSAGE)
        return Continue({**context, "user_id": user_id})

    return stage


def authorize(
    cookies: Mapping[str, str],
    codec: TokenCodec,
    cookie_name: str = "auth_token",
) -> StageResult:
    """Run the gate for a request's cookies. On success the context holds user_id."""
    stages = (extract_token(cookie_name), verify_token(codec))
    return run_pipeline(stages, {"cookies": cookies})
