"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv

from music_bridge.config import get_settings
from music_bridge.core.app_factory import create_app
from music_bridge.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
setup_logging(get_settings().log_level)

# Create application
app = create_app()


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "music-bridge API", "docs": "/docs"}


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "music_bridge.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
