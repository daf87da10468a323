"""Application exceptions and the handlers that render them.

Every error response has the same shape:

    {"error": {"code": "ERROR_CODE", "message": "...", "details": {...}}}

Wizard step validation never raises; routers turn a failed verdict into
`StepValidationError` so the field map lands in `details.errors`.
"""

import logging
import traceback
from typing import Union

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from provider_portal.services.store import StoreError

logger = logging.getLogger(__name__)


class PortalException(Exception):
    """Base exception for provider portal errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class BusinessLogicError(PortalException):
    """Exception for business logic violations."""

    def __init__(self, message: str, error_code: str = "BUSINESS_LOGIC_ERROR"):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=error_code,
        )


class ProfileNotFoundError(PortalException):
    """Missing and private profiles are reported identically."""

    def __init__(self):
        super().__init__(
            message="Profile not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="PROFILE_NOT_FOUND",
        )


class StepNotReachableError(BusinessLogicError):
    def __init__(self, step: int, reachable: list[int]):
        allowed = ", ".join(str(s) for s in reachable) or "none"
        super().__init__(
            message=f"Step {step} is not reachable (reachable: {allowed})",
            error_code="STEP_NOT_REACHABLE",
        )


class StepValidationError(PortalException):
    """A wizard step rejected its input; `errors` maps field → message."""

    def __init__(self, step: int, errors: dict[str, str]):
        self.step = step
        self.errors = errors
        super().__init__(
            message=f"Step {step} has invalid fields",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_ERROR",
            details={"step": step, "errors": errors},
        )


class DraftIncompleteError(PortalException):
    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(
            message="Profile is incomplete; finish the wizard before publishing",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="DRAFT_INCOMPLETE",
            details={"errors": errors},
        )


class InvalidSlugError(PortalException):
    def __init__(self, raw: str | None):
        super().__init__(
            message=f"Slug {raw!r} is empty after normalization; use letters or digits",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="INVALID_SLUG",
        )


class SlugTakenError(PortalException):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(
            message=f"The address '{slug}' is already taken; choose another",
            status_code=status.HTTP_409_CONFLICT,
            error_code="SLUG_TAKEN",
        )


class UnauthenticatedError(PortalException):
    def __init__(self, message: str = "Sign in to publish your profile"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHENTICATED",
        )


class PersistenceError(PortalException):
    """Store failure, surfaced verbatim; the caller may simply retry."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="PERSISTENCE_ERROR",
        )


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "ERROR",
    details: Union[dict, list, None] = None,
    headers: dict | None = None,
) -> JSONResponse:
    content = {
        "error": {
            "code": error_code,
            "message": message,
        }
    }

    if details:
        content["error"]["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
    )


async def portal_exception_handler(
    request: Request,
    exc: PortalException,
) -> JSONResponse:
    """Handle custom portal exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Portal exception: {exc.error_code} - {exc.message}",
        extra={
            "error_code": exc.error_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        headers=headers,
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException],
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions."""
    if exc.status_code >= 500:
        logger.error(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: Union[RequestValidationError, ValidationError],
) -> JSONResponse:
    """Handle request body / query validation errors."""
    logger.warning(
        f"Validation error on {request.url.path}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        },
    )

    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code="VALIDATION_ERROR",
        details={"errors": errors},
    )


async def database_exception_handler(
    request: Request,
    exc: IntegrityError,
) -> JSONResponse:
    """Integrity errors that escaped the store (e.g. at commit time)."""
    logger.error(
        f"Database integrity error on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    error_msg = str(exc.orig) if hasattr(exc, "orig") else str(exc)

    if "slug" in error_msg.lower() and "unique" in error_msg.lower():
        status_code = status.HTTP_409_CONFLICT
        message = "This address is already taken; choose another"
        error_code = "SLUG_TAKEN"
    elif "unique" in error_msg.lower():
        status_code = status.HTTP_409_CONFLICT
        message = "A record with this value already exists"
        error_code = "DUPLICATE_RECORD"
    elif "not null" in error_msg.lower():
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        message = "Required field is missing"
        error_code = "NULL_VALUE_NOT_ALLOWED"
    else:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        message = "Database constraint violation"
        error_code = "INTEGRITY_ERROR"

    return create_error_response(
        status_code=status_code,
        message=message,
        error_code=error_code,
    )


async def operational_exception_handler(
    request: Request,
    exc: OperationalError,
) -> JSONResponse:
    """Handle database operational errors (connection issues, etc.)."""
    logger.error(
        f"Database operational error on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return create_error_response(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        message="Database temporarily unavailable. Please try again.",
        error_code="DATABASE_UNAVAILABLE",
    )


async def store_exception_handler(
    request: Request,
    exc: StoreError,
) -> JSONResponse:
    """Store failures outside the publish workflow (lookups, listings)."""
    logger.error(
        f"Store error on {request.url.path}: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return create_error_response(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        message=str(exc),
        error_code="PERSISTENCE_ERROR",
    )


async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "traceback": traceback.format_exc(),
        },
        exc_info=True,
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code="INTERNAL_SERVER_ERROR",
    )


def register_exception_handlers(app):
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(PortalException, portal_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, database_exception_handler)
    app.add_exception_handler(OperationalError, operational_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
