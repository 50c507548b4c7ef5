import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def public(self, message: str) -> "APIError":
        """Same failure, caller-facing message. Code and details stay for the logs."""
        return APIError(self.code, message, status_code=500, details=self.details)


def _error_payload(message: str) -> dict[str, Any]:
    return {"error": message}


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.error(
        "Request failed",
        extra={"path": request.url.path, "code": exc.code, "status_code": exc.status_code, "details": exc.details},
    )
    return JSONResponse(status_code=exc.status_code, content=_error_payload(exc.message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        extra={"path": request.url.path, "type": exc.__class__.__name__},
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=_error_payload("Unexpected server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
