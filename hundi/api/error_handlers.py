"""Error Handlers — global exception handlers for the donor API.

Invariants:
    - HundiError → envelope {success: false, message, error: {kind, code, ...}, errors?}
    - RequestValidationError → ValidationFailed envelope with field-level details
    - Exception (catch-all) → Unexpected envelope; never leaks internal details
    - Unexpected detail is only included when ENVIRONMENT=development

Design Decisions:
    - Three-layer handler: domain (HundiError), validation (Pydantic), catch-all (Exception)
    - Validation and catch-all reuse the HundiError envelope so clients parse one shape
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from hundi.config import get_settings
from hundi.core.errors import (
    FieldError, HundiError, UnexpectedError, ValidationFailedError,
)

logger = logging.getLogger(__name__)

# Request sections FastAPI prefixes onto error locations
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_hundi_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_hundi_error_handler(app: FastAPI) -> None:
    """Register donor domain/infrastructure error handler."""

    @app.exception_handler(HundiError)
    async def hundi_error_handler(request: Request, exc: HundiError):
        """Handle all donor-backend domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"HundiError: {exc.message}",
            extra={
                "error_code": exc.code,
                "error_kind": exc.kind.value,
                "path": request.url.path,
            },
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(expose_detail=get_settings().is_development),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        wrapped = UnexpectedError(request.url.path, str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=wrapped.to_response(
                expose_detail=get_settings().is_development,
            ),
        )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    errors = [
        FieldError(_field_name(e["loc"]), e["msg"]) for e in exc.errors()
    ]
    return ValidationFailedError(errors).to_response()
