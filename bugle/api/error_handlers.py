"""Error Handlers — global exception handlers installed on every service.

Invariants:
    - BugleError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level details (malformed ids included)
    - Exception (catch-all) → 500 with a fixed message, never internal details

Design Decisions:
    - Three-layer handler: domain (BugleError), validation (Pydantic), catch-all (Exception)
    - The service name is stamped into the error context so a client talking to
      four services can tell which one refused
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bugle.core.errors import BugleError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_bugle_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _service_name(request: Request) -> str | None:
    service = getattr(request.app.state, "service", None)
    return service.value if service is not None else None


def _register_bugle_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(BugleError)
    async def bugle_error_handler(request: Request, exc: BugleError):
        """Handle all Daily Bugle domain/infrastructure errors."""
        exc.context.service = exc.context.service or _service_name(request)
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"BugleError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status_code": exc.http_status,
                "service": exc.context.service,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
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
            content=_build_validation_error_response(exc, _service_name(request)),
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
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "Internal server error",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(
    exc: RequestValidationError, service: str | None,
) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
            "context": {"service": service},
        },
    }
