"""Health endpoints."""

import time

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from music_bridge import __version__
from music_bridge.dependencies import get_authenticator, get_http_client, get_provider_registry
from music_bridge.models import HealthResponse
from music_bridge.providers.registry import ProviderRegistry
from music_bridge.services.device_auth import DeviceFlowAuthenticator

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    Returns simple status for container healthchecks and basic monitoring.
    For dependency status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready")
async def readiness_check(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    authenticator: DeviceFlowAuthenticator = Depends(get_authenticator),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    """Readiness probe - can the application serve traffic?

    **Returns:**
    - 200: HTTP client and providers are initialized
    - 503: A dependency is missing
    """
    checks = {
        "http_client": "ok" if not client.is_closed else "closed",
        "auth": authenticator.state.status.value,
        "providers": str(len(registry.providers)),
    }
    ready = not client.is_closed and bool(registry.providers)

    startup_time = getattr(request.app.state, "startup_time", None)
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "version": __version__,
            "uptime_seconds": int(time.time() - startup_time) if startup_time else None,
            "requests": getattr(request.app.state, "request_count", 0),
            "checks": checks,
        },
    )
