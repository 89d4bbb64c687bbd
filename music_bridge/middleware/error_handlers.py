"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from music_bridge.exceptions import ErrorCode, MusicBridgeException
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.middleware.logging_middleware import redact_sensitive_data

logger = get_logger(__name__)


async def music_bridge_exception_handler(request: Request, exc: MusicBridgeException) -> JSONResponse:
    """Handle music-bridge exceptions with proper HTTP status codes.

    Returns structured JSON error responses with error code, the exception's
    user-facing message, and optional details for client-side error handling.
    """
    log_with_context(
        logger,
        "error" if exc.status_code >= 500 else "warning",
        "Music bridge error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="music_bridge_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.user_message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR.value, "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(MusicBridgeException, music_bridge_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
