"""Application lifespan management."""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI

from music_bridge import __version__
from music_bridge.config import Settings, get_settings
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.middleware.logging_middleware import redact_sensitive_data
from music_bridge.providers.registry import ProviderRegistry
from music_bridge.providers.ytmusic_provider import YouTubeMusicProvider
from music_bridge.secret_store import FileSecretStore
from music_bridge.services.device_auth import DeviceFlowAuthenticator
from music_bridge.services.ytmusic_client import CatalogClient

logger = get_logger(__name__)

_STARTED_AT = "music_bridge.started_at"


async def log_request(request: httpx.Request) -> None:
    """Event hook stamping the request and logging its redacted target."""
    request.extensions[_STARTED_AT] = time.perf_counter()
    log_with_context(
        logger,
        "debug",
        "Outbound request",
        method=request.method,
        host=request.url.host,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    """Event hook logging status and latency of an outbound call."""
    request = response.request
    started = request.extensions.get(_STARTED_AT)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 1) if started is not None else None
    log_with_context(
        logger,
        "info" if response.status_code < 400 else "warning",
        "Outbound response",
        method=request.method,
        host=request.url.host,
        path=request.url.path,
        status_code=response.status_code,
        elapsed_ms=elapsed_ms,
        event_type="http_response",
    )


def create_http_client(timeout: float) -> httpx.AsyncClient:
    """Shared HTTP client used for both OAuth and youtubei calls."""
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=5.0),
        limits=httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        ),
        follow_redirects=True,
        event_hooks=event_hooks,
    )


async def build_providers(
    client: httpx.AsyncClient, settings: Settings
) -> tuple[DeviceFlowAuthenticator, CatalogClient, ProviderRegistry]:
    """Restore the stored credential and wire the YouTube Music provider."""
    authenticator = DeviceFlowAuthenticator(client, FileSecretStore(settings.secret_store_path), settings)
    await authenticator.initialize()
    catalog = CatalogClient(client, authenticator, settings)
    registry = ProviderRegistry([YouTubeMusicProvider(catalog, authenticator)])
    return authenticator, catalog, registry


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create shared resources on startup and release them on shutdown.

    Exceptions raised while serving are logged and re-raised after cleanup.
    """
    settings = get_settings()
    app.state.startup_time = time.time()
    app.state.request_count = 0

    log_with_context(
        logger,
        "info",
        "Starting music-bridge",
        version=__version__,
        event_type="app_startup",
    )

    client = create_http_client(settings.request_timeout)
    app.state.http_client = client

    authenticator, catalog, registry = await build_providers(client, settings)
    app.state.authenticator = authenticator
    app.state.catalog_client = catalog
    app.state.provider_registry = registry
    log_with_context(
        logger,
        "info",
        "Providers ready",
        providers=[provider.provider_id for provider in registry.providers],
        auth_status=authenticator.state.status.value,
        event_type="providers_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        await authenticator.cleanup()
        await client.aclose()
        log_with_context(
            logger,
            "info",
            "music-bridge stopped",
            event_type="app_shutdown",
        )
