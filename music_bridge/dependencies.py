"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Request

from music_bridge.providers.registry import ProviderRegistry
from music_bridge.services.device_auth import DeviceFlowAuthenticator


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_authenticator(request: Request) -> DeviceFlowAuthenticator:
    """
    Get the device-flow authenticator from app state.

    Raises:
        RuntimeError: If the authenticator is not initialized.
    """
    authenticator: DeviceFlowAuthenticator | None = getattr(request.app.state, "authenticator", None)

    if authenticator is None:
        raise RuntimeError("Authenticator not initialized.")

    return authenticator


async def get_provider_registry(request: Request) -> ProviderRegistry:
    """
    Get the provider registry from app state.

    Raises:
        RuntimeError: If the registry is not initialized.
    """
    registry: ProviderRegistry | None = getattr(request.app.state, "provider_registry", None)

    if registry is None:
        raise RuntimeError("Provider registry not initialized.")

    return registry
