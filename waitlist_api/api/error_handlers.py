"""Error Handlers — global exception handlers for the waitlist API.

Invariants:
    - WaitlistError → {"error": message} with the error's own status code
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Two-layer handler: domain (WaitlistError) and catch-all (Exception)
    - Log level follows ErrorSeverity one-to-one; storage detail (context.debug_info
      and the chained cause) is logged here, once, and only server-side
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from waitlist_api.core.errors import ErrorSeverity, WaitlistError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_waitlist_error_handler(app)
    _register_generic_error_handler(app)


def _register_waitlist_error_handler(app: FastAPI) -> None:
    """Register waitlist domain/infrastructure error handler."""

    @app.exception_handler(WaitlistError)
    async def waitlist_error_handler(request: Request, exc: WaitlistError):
        """Handle all waitlist domain/infrastructure errors."""
        detail = exc.context.debug_info
        logger.log(
            _LOG_LEVELS[exc.severity],
            f"WaitlistError: {exc.message}" + (f" ({detail})" if detail else ""),
            exc_info=exc.__cause__,
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "operation": getattr(exc, "operation", None),
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
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
            content={"error": "An unexpected error occurred"},
        )
