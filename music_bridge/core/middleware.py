"""Middleware configuration."""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from music_bridge.config import Settings
from music_bridge.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# UI clients run on the same machine
LOCAL_ORIGIN_PATTERN = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install CORS for local UIs and the request accounting middleware.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    log_with_context(
        logger,
        "info",
        "Configuring CORS middleware",
        pattern=LOCAL_ORIGIN_PATTERN,
        api_host=settings.api_host,
        event_type="security_config",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=LOCAL_ORIGIN_PATTERN,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def account_request(request: Request, call_next):
        """Count requests for readiness and log each one with its latency."""
        request.app.state.request_count = getattr(request.app.state, "request_count", 0) + 1
        started = time.perf_counter()
        response = await call_next(request)
        log_with_context(
            logger,
            "info",
            "API request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
            event_type="api_request",
        )
        return response
