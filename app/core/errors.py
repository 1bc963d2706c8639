"""Error taxonomy and the JSON error envelope.

Every failure leaves the API as ``{"error": str, "code"?: str}``. Domain
errors subclass :class:`AppError`, which is a regular FastAPI
``HTTPException`` with an optional machine-readable ``code``.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"
    code: str | None = None

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class MissingToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authorization token required"


class InvalidOrExpiredToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired token"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class InsufficientPermissions(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Insufficient permissions"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Permission denied"


class PlanLimitExceeded(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Note limit reached. Upgrade to Pro plan for unlimited notes."
    code = "NOTE_LIMIT_REACHED"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


def error_body(message: str, code: str | None = None) -> dict:
    body = {"error": message}
    if code:
        body["code"] = code
    return body


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), getattr(exc, "code", None)),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug("Rejected request body: %s", exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid request body"),
    )


async def _catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error"),
        )


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error envelope on *app*."""
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.middleware("http")(_catch_unhandled)
