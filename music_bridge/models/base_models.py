"""Pydantic models for request/response validation."""

from typing import Any

from pydantic import BaseModel, Field

from music_bridge.models.auth import AuthFailureReason, AuthState, AuthStatus
from music_bridge.models.items import CatalogItem


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class ErrorBody(BaseModel):
    """Error payload."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response rendered by the exception handlers."""

    error: ErrorBody


class AuthStatusResponse(BaseModel):
    """Authenticator state as exposed to UI clients.

    The device code itself stays server-side; only what the user needs to
    complete sign-in is returned.
    """

    status: AuthStatus
    failure: AuthFailureReason | None = None
    error: ErrorBody | None = Field(default=None, description="Why sign-in failed, with a message for the user")
    user_code: str | None = None
    verification_url: str | None = None
    expires_at: float | None = None
    is_authenticated: bool = Field(..., description="Whether a credential is stored")

    @classmethod
    def from_state(cls, state: AuthState, is_authenticated: bool) -> "AuthStatusResponse":
        grant = state.grant
        error = state.error
        return cls(
            status=state.status,
            failure=state.failure,
            error=ErrorBody(code=error.code.value, message=error.user_message) if error else None,
            user_code=grant.user_code if grant else None,
            verification_url=grant.verification_url if grant else None,
            expires_at=grant.deadline if grant else None,
            is_authenticated=is_authenticated,
        )


class ProviderInfo(BaseModel):
    """Identity and capabilities of a registered provider."""

    id: str
    display_name: str
    requires_auth: bool
    is_authenticated: bool
    capabilities: list[str] = Field(default_factory=list)


class ProviderSearchResults(BaseModel):
    """Search results grouped by provider id, plus per-provider failures."""

    results: dict[str, list[CatalogItem]] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
