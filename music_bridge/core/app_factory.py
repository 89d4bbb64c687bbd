"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from music_bridge import __version__
from music_bridge.config import get_settings
from music_bridge.core.lifespan import lifespan
from music_bridge.core.middleware import setup_middleware
from music_bridge.middleware.error_handlers import register_error_handlers
from music_bridge.routers import auth_router, health_router, provider_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="music-bridge API",
        description="""
        **music-bridge** - YouTube Music behind the same item contract as the media server

        ## Sign-in
        1. `POST /api/auth/device` returns a user code and verification URL
        2. Show them to the user, then `POST /api/auth/device/poll`
        3. Follow `GET /api/auth/status` until it reports `authenticated`

        ## Catalog
        - `/api/providers` - registered providers and their capabilities
        - `/api/providers/{id}/...` - library, album and artist pages
        - `/api/search?q=` - search across providers

        ## Health
        - `/health` - Basic health check
        - `/health/ready` - Readiness probe
        """,
        version=__version__,
        lifespan=lifespan,
        license_info={
            "name": "MIT",
        },
    )

    # Configure middleware
    setup_middleware(app, settings)

    # Register exception handlers
    register_error_handlers(app)

    # Health endpoints
    app.include_router(health_router.router, tags=["health"])

    # API routes
    app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
    app.include_router(provider_router.router, prefix="/api", tags=["providers"])

    return app
