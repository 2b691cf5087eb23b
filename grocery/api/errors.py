"""Translate domain exceptions into JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from grocery.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from grocery.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    UpstreamError: 502,
}


def _handler(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.warning("upstream_error", path=request.url.path, error=str(exc))
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": str(exc)},
            headers=headers,
        )

    return handle


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_type, _handler(status_code))
