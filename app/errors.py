"""Error taxonomy, persistence-error translation and FastAPI exception handlers.

Every failure leaves the API as an :class:`~app.schemas.common.ApiResponse`
envelope.  Operational errors carry a user-safe message; anything else is
collapsed to a generic 500 outside of development.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.common import ApiResponse

logger = logging.getLogger("app.errors")

GENERIC_ERROR_MESSAGE = "Something went wrong on our end. Please try again later."


class ApiError(Exception):
    """Base exception for the API.

    Attributes:
        status_code: HTTP status rendered in the envelope.
        message: Human-readable, user-safe summary.
        errors: Optional ordered list of detail messages.
        is_operational: ``False`` for unexpected faults whose details must not leak.
    """

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        errors: list[str] | None = None,
        *,
        status_code: int | None = None,
        is_operational: bool = True,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.errors = errors
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational

    def to_envelope(self, path: str | None = None) -> ApiResponse:
        return ApiResponse.build(self.status_code, self.message, errors=self.errors, path=path)


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad request"


class MissingFieldError(BadRequestError):
    """Required input absent or malformed; ``errors`` lists every offending field."""

    default_message = "Missing fields"


class ConflictError(BadRequestError):
    """Uniqueness violation, from the pre-check or from the database constraint."""

    default_message = "Already existing company"


class InvalidEnumError(BadRequestError):
    def __init__(self, field: str, allowed: tuple[str, ...] | list[str]) -> None:
        super().__init__(f"Invalid {field}. Allowed values are: {', '.join(allowed)}")
        self.allowed = list(allowed)


class NoFieldsProvidedError(BadRequestError):
    default_message = "No fields provided to update"


class BadQueryError(BadRequestError):
    default_message = "Invalid query parameter"


class InvalidInputError(ApiError):
    status_code = 422
    default_message = "Invalid input data"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class TooManyRequestsError(ApiError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later."


class InternalError(ApiError):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, errors: list[str] | None = None) -> None:
        super().__init__(message, errors, is_operational=False)


class ServiceUnavailableError(ApiError):
    status_code = 503
    default_message = "Unable to connect to database. Please try again later."


class GatewayTimeoutError(ApiError):
    status_code = 504
    default_message = "Database operation timed out. Please try again."


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


def duplicate_field(exc: sa_exc.IntegrityError, candidates: tuple[str, ...] = ("name", "email")) -> str | None:
    """Best-effort name of the unique column an IntegrityError complains about."""
    text = str(exc.orig).lower()
    for field in candidates:
        if f"uq_companies_{field}" in text or f"companies.{field}" in text or f"({field})" in text:
            return field
    return None


def translate_db_error(exc: sa_exc.SQLAlchemyError) -> ApiError:
    """Map a SQLAlchemy exception onto the error taxonomy."""
    if isinstance(exc, sa_exc.IntegrityError):
        field = duplicate_field(exc)
        errors = [f"Duplicate field value: {field}. Please use another value."] if field else None
        return ConflictError(errors=errors)
    if isinstance(exc, sa_exc.TimeoutError):
        return GatewayTimeoutError()
    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.DisconnectionError)):
        return ServiceUnavailableError()
    if isinstance(exc, sa_exc.DataError):
        return BadRequestError("Invalid input data")
    return InternalError()


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _is_development(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


def _render(request: Request, error: ApiError, cause: BaseException) -> JSONResponse:
    path = request.url.path
    if _is_development(request):
        body: dict[str, Any] = error.to_envelope(path).to_dict()
        body["error"] = {"type": type(cause).__name__, "detail": str(cause)}
        body["stack"] = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
        body["method"] = request.method
        return JSONResponse(status_code=error.status_code, content=body)

    if not error.is_operational:
        logger.error("Non-operational error on %s %s: %r", request.method, path, cause)
        return ApiResponse.build(500, GENERIC_ERROR_MESSAGE, path=path).to_response()
    return error.to_envelope(path).to_response()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return _render(request, exc, exc.__cause__ or exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return _render(request, BadRequestError("Invalid request", errors), exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        error = NotFoundError(f"Cannot {request.method} {request.url.path}")
    else:
        error = ApiError(str(exc.detail), status_code=exc.status_code)
    response = _render(request, error, exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return _render(request, InternalError(), exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
