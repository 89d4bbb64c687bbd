"""Models for the OAuth device-authorization flow."""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from music_bridge.exceptions import AuthCodeExpiredException, AuthDeniedException, MusicBridgeException


class Credential(BaseModel):
    """Stored session with the catalog.

    A credential always has a non-empty access token and an absolute expiry
    (Unix timestamp). It is replaced as a whole, never field by field.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class DeviceCodeGrant(BaseModel):
    """Device code issued at the start of a flow."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device_code: str = Field(min_length=1)
    user_code: str = Field(min_length=1)
    verification_url: str = Field(validation_alias=AliasChoices("verification_url", "verification_uri"))
    expires_in: int = Field(gt=0)
    interval: int = Field(default=5, ge=0)
    issued_at: float = 0.0

    @property
    def deadline(self) -> float:
        return self.issued_at + self.expires_in


class TokenResponse(BaseModel):
    """Body of a successful token or refresh request."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    expires_in: int = 3600
    token_type: str = "Bearer"
    scope: str | None = None


class AuthStatus(str, Enum):
    """Authenticator states."""

    IDLE = "idle"
    AWAITING_USER_ACTION = "awaiting_user_action"
    POLLING = "polling"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class AuthFailureReason(str, Enum):
    """Why a flow ended in FAILED."""

    DENIED = "denied"
    EXPIRED = "expired"


class AuthState(BaseModel):
    """Snapshot of the authenticator state.

    ``grant`` is set while awaiting the user and while polling so observers can
    keep showing the code. ``failure`` is set only in FAILED.
    """

    model_config = ConfigDict(frozen=True)

    status: AuthStatus = AuthStatus.IDLE
    grant: DeviceCodeGrant | None = None
    failure: AuthFailureReason | None = None

    @classmethod
    def idle(cls) -> "AuthState":
        return cls(status=AuthStatus.IDLE)

    @classmethod
    def awaiting_user_action(cls, grant: DeviceCodeGrant) -> "AuthState":
        return cls(status=AuthStatus.AWAITING_USER_ACTION, grant=grant)

    @classmethod
    def polling(cls, grant: DeviceCodeGrant) -> "AuthState":
        return cls(status=AuthStatus.POLLING, grant=grant)

    @classmethod
    def authenticated(cls) -> "AuthState":
        return cls(status=AuthStatus.AUTHENTICATED)

    @classmethod
    def failed(cls, reason: AuthFailureReason) -> "AuthState":
        return cls(status=AuthStatus.FAILED, failure=reason)

    @property
    def is_terminal(self) -> bool:
        return self.status == AuthStatus.FAILED

    @property
    def error(self) -> MusicBridgeException | None:
        """Exception describing a FAILED state."""
        if self.failure is AuthFailureReason.DENIED:
            return AuthDeniedException()
        if self.failure is AuthFailureReason.EXPIRED:
            return AuthCodeExpiredException()
        return None
