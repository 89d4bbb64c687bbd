from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # music-bridge/

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings with validation.

    OAuth client credentials are required and must be provided via
    environment variables or the .env file. Everything else has a default
    matching the catalog's current web client.
    """

    # API server settings
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")
    log_level: str = Field(default="INFO", description="Root log level")

    # OAuth device flow - client credentials are required
    ytmusic_client_id: str = Field(min_length=1, description="OAuth client ID (TV and limited input device)")
    ytmusic_client_secret: str = Field(min_length=1, description="OAuth client secret")
    ytmusic_oauth_scope: str = Field(default="https://www.googleapis.com/auth/youtube", description="OAuth scope")
    ytmusic_device_code_url: str = Field(
        default="https://oauth2.googleapis.com/device/code", description="Device-code endpoint"
    )
    ytmusic_token_url: str = Field(default="https://oauth2.googleapis.com/token", description="Token endpoint")

    # Catalog API client context
    ytmusic_api_base_url: str = Field(
        default="https://music.youtube.com/youtubei/v1/", description="Base URL for youtubei endpoints"
    )
    ytmusic_origin: str = Field(default="https://music.youtube.com", description="Origin/Referer pinned site")
    ytmusic_client_name: str = Field(default="WEB_REMIX", min_length=1, description="Client name in request context")
    ytmusic_client_version: str = Field(
        default="1.20241111.01.00", min_length=1, description="Client version in request context"
    )
    ytmusic_language: str = Field(default="en", min_length=2, description="Response language (hl)")
    ytmusic_region: str = Field(default="US", min_length=2, description="Response region (gl)")
    ytmusic_user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1, description="Browser user agent")
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Secret storage
    secret_store_path: Path = Field(
        default=Path.home() / ".music_bridge_secrets.json",
        description="File holding the stored credential",
    )

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("api_host", "ytmusic_client_id", "ytmusic_client_secret", mode="after")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values."""
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty")
        return v

    @field_validator(
        "ytmusic_device_code_url",
        "ytmusic_token_url",
        "ytmusic_api_base_url",
        "ytmusic_origin",
        mode="after",
    )
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Ensure endpoint settings are http(s) URLs."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("must be a valid http:// or https:// URL")
        return v

    @field_validator("ytmusic_api_base_url", mode="after")
    @classmethod
    def validate_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are joined onto the base URL."""
        return v if v.endswith("/") else f"{v}/"

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a stdlib logging level."""
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
