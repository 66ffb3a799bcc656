"""JSON error responses shared by all routers."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# Bodies for unexpected failures; details are logged, never returned.
SERVER_ERROR_BODY: dict[str, Any] = {"error": "Server error"}


class ApiError(Exception):
    """An HTTP error with an exact JSON body the client depends on."""

    def __init__(self, status_code: int, body: dict[str, Any]) -> None:
        super().__init__(f"{status_code}: {body}")
        self.status_code = status_code
        self.body = body


def failure(status_code: int, message: str) -> ApiError:
    """Build the {"success": false, "message": ...} error used across the API."""
    return ApiError(status_code, {"success": False, "message": message})


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=SERVER_ERROR_BODY)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ApiError handler and the generic 500 fallback."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
