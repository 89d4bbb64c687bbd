"""OAuth 2.0 device-authorization flow for YouTube Music.

Device flow is used because the host has no browser:

1. request a device code
2. show the user code and verification URL
3. the user authorizes on another device
4. poll the token endpoint until authorization completes

The authenticator owns the stored credential and refreshes it on demand.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from music_bridge.config import Settings, get_settings
from music_bridge.exceptions import (
    AuthTokenRefreshFailedException,
    HTTPStatusException,
    InvalidResponseException,
    NetworkException,
    NotAuthenticatedException,
)
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models.auth import (
    AuthFailureReason,
    AuthState,
    AuthStatus,
    Credential,
    DeviceCodeGrant,
    TokenResponse,
)
from music_bridge.protocols import SecretStore
from music_bridge.state_managers import AuthStateHolder, StateCallback, StateManager

logger = get_logger(__name__)

ACCESS_TOKEN_KEY = "ytmusic_access_token"
REFRESH_TOKEN_KEY = "ytmusic_refresh_token"
TOKEN_EXPIRATION_KEY = "ytmusic_token_expiration"

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
SLOW_DOWN_INCREMENT = 5

_FLOW_STATUSES = frozenset({AuthStatus.AWAITING_USER_ACTION, AuthStatus.POLLING})

Clock = Callable[[], float]
CancellableWait = Callable[[asyncio.Event, float], Awaitable[bool]]


class PollSignal(str, Enum):
    """Non-success answers of the token endpoint while polling."""

    PENDING = "authorization_pending"
    SLOW_DOWN = "slow_down"
    DENIED = "access_denied"
    EXPIRED = "expired_token"


async def wait_or_cancel(cancel: asyncio.Event, timeout: float) -> bool:
    """Sleep for ``timeout`` seconds unless ``cancel`` is set first.

    Returns:
        True if cancelled
    """
    try:
        await asyncio.wait_for(cancel.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise InvalidResponseException(
            "Response body is not JSON", details={"status_code": response.status_code}
        ) from e


class DeviceFlowAuthenticator(StateManager):
    """Runs the device flow and keeps the stored credential fresh.

    State changes go through one ``AuthStateHolder``; subscribe to it with
    ``subscribe``. At most one polling loop runs at a time.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: SecretStore,
        settings: Settings | None = None,
        clock: Clock = time.time,
        wait: CancellableWait = wait_or_cancel,
    ):
        """Initialize the authenticator.

        Args:
            client: Shared HTTP client from dependency injection
            store: Secret store holding the credential
            settings: Settings instance (defaults to singleton)
            clock: Wall clock returning Unix time
            wait: Cancellable timed wait used between polls
        """
        self._client = client
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock
        self._wait = wait

        self._credential_lock = asyncio.Lock()
        self._poll_task: asyncio.Task[None] | None = None
        self._cancel_event: asyncio.Event | None = None

        credential = self._load_credential()
        initial = AuthState.authenticated() if credential and not credential.is_expired(clock()) else AuthState.idle()
        self._holder = AuthStateHolder(initial)

    async def initialize(self) -> None:
        """Initialize the authenticator."""
        log_with_context(
            logger,
            "info",
            "Authenticator ready",
            status=self.state.status.value,
            event_type="auth_initialized",
        )

    async def cleanup(self) -> None:
        """Stop any polling loop and drop subscribers."""
        await self._stop_polling()
        await self._holder.cleanup()

    # State

    @property
    def state(self) -> AuthState:
        return self._holder.state

    @property
    def is_authenticated(self) -> bool:
        """Whether an access token is stored (it may still need a refresh)."""
        return bool(self._store.get(ACCESS_TOKEN_KEY))

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        return self._holder.subscribe(callback)

    # Flow control

    async def start(self) -> DeviceCodeGrant:
        """Request a device code and move to AWAITING_USER_ACTION.

        A running polling loop is cancelled first. If the request fails the
        state is left as it was.

        Raises:
            NetworkException: Token server unreachable
            HTTPStatusException: Non-200 answer
            InvalidResponseException: Body is not a device code grant
        """
        if self._poll_task is not None and not self._poll_task.done():
            await self.cancel()

        grant = await self._request_device_code()
        await self._holder.supersede(AuthState.awaiting_user_action(grant))
        log_with_context(
            logger,
            "info",
            "Device code issued",
            verification_url=grant.verification_url,
            expires_in=grant.expires_in,
            interval=grant.interval,
            event_type="auth_device_code_issued",
        )
        return grant

    async def begin_polling(self) -> "asyncio.Task[None] | None":
        """Start polling the token endpoint in a background task.

        Returns:
            The polling task, or None when there is no device code to poll for
        """
        current = self.state
        if current.status is not AuthStatus.AWAITING_USER_ACTION or current.grant is None:
            log_with_context(
                logger,
                "warning",
                "begin_polling called without a device code",
                status=current.status.value,
                event_type="auth_poll_not_started",
            )
            return None

        await self._stop_polling()
        grant = current.grant
        attempt = await self._holder.supersede(
            AuthState.polling(grant), from_statuses={AuthStatus.AWAITING_USER_ACTION}
        )
        if attempt is None:
            return None

        cancel = asyncio.Event()
        self._cancel_event = cancel
        self._poll_task = asyncio.create_task(self._poll_for_token(grant, attempt, cancel))
        return self._poll_task

    async def cancel(self) -> None:
        """Abandon the current flow and return to IDLE.

        The state changes immediately; a token request already in flight is
        allowed to finish and its result is discarded.
        """
        await self._holder.supersede(AuthState.idle(), from_statuses=_FLOW_STATUSES)
        await self._stop_polling()

    async def sign_out(self) -> None:
        """Stop polling, delete the stored credential and return to IDLE."""
        async with self._credential_lock:
            await self._holder.supersede(AuthState.idle(), effect=self._clear_credential)
        await self._stop_polling()
        log_with_context(logger, "info", "Signed out", event_type="auth_signed_out")

    async def wait_for_polling(self) -> None:
        """Wait until the active polling loop, if any, has finished.

        Raises:
            AuthDeniedException: The user declined the request
            AuthCodeExpiredException: The code expired before approval
        """
        task = self._poll_task
        if task is None:
            return
        await task
        error = self.state.error
        if error is not None:
            raise error

    async def _stop_polling(self) -> None:
        task, cancel = self._poll_task, self._cancel_event
        self._poll_task = None
        self._cancel_event = None
        if cancel is not None:
            cancel.set()
        if task is not None and not task.done():
            await task

    # Tokens

    async def get_valid_access_token(self) -> str:
        """Return a usable access token, refreshing the credential if expired.

        Concurrent callers share a single refresh.

        Raises:
            NotAuthenticatedException: No credential, or the refresh was rejected
            NetworkException: Token server unreachable during refresh
        """
        credential = self._load_credential()
        if credential is not None and not credential.is_expired(self._clock()):
            return credential.access_token

        async with self._credential_lock:
            # Another caller may have refreshed while this one waited.
            credential = self._load_credential()
            if credential is not None and not credential.is_expired(self._clock()):
                return credential.access_token

            try:
                credential = await self._refresh_locked()
            except AuthTokenRefreshFailedException as e:
                raise NotAuthenticatedException("Session could not be renewed", details=e.details) from e

        await self._holder.transition(AuthState.authenticated(), from_statuses={AuthStatus.IDLE})
        return credential.access_token

    async def refresh_access_token(self) -> Credential:
        """Force a refresh with the stored refresh token.

        Raises:
            NotAuthenticatedException: No refresh token stored
            AuthTokenRefreshFailedException: Token server rejected the refresh
            NetworkException: Token server unreachable
        """
        async with self._credential_lock:
            credential = await self._refresh_locked()
        await self._holder.transition(AuthState.authenticated(), from_statuses={AuthStatus.IDLE})
        return credential

    async def _refresh_locked(self) -> Credential:
        refresh_token = self._store.get(REFRESH_TOKEN_KEY)
        if not refresh_token:
            raise NotAuthenticatedException("No refresh token stored")

        log_with_context(logger, "info", "Refreshing access token", event_type="auth_token_refresh")
        response = await self._post_form(
            self._settings.ytmusic_token_url,
            {
                "client_id": self._settings.ytmusic_client_id,
                "client_secret": self._settings.ytmusic_client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
        )
        if response.status_code != 200:
            log_with_context(
                logger,
                "warning",
                "Token refresh rejected",
                status_code=response.status_code,
                event_type="auth_token_refresh_failed",
            )
            raise AuthTokenRefreshFailedException(details={"upstream_status": response.status_code})

        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AuthTokenRefreshFailedException("Refresh response unreadable") from e

        credential = self._credential_from_token(token, fallback_refresh_token=refresh_token)
        self._save_credential(credential)
        log_with_context(
            logger,
            "info",
            "Access token refreshed",
            expires_in=token.expires_in,
            event_type="auth_token_refreshed",
        )
        return credential

    # Polling

    async def _poll_for_token(self, grant: DeviceCodeGrant, attempt: int, cancel: asyncio.Event) -> None:
        interval = float(grant.interval)

        while self._clock() < grant.deadline:
            if cancel.is_set():
                return
            if await self._wait(cancel, interval):
                return
            if cancel.is_set():
                return

            try:
                outcome = await self._request_token(grant.device_code)
            except (NetworkException, HTTPStatusException, InvalidResponseException) as e:
                log_with_context(
                    logger,
                    "warning",
                    "Token poll failed, will retry",
                    error=e.message,
                    error_code=e.code.value,
                    event_type="auth_poll_error",
                )
                continue

            if isinstance(outcome, TokenResponse):
                credential = self._credential_from_token(outcome)
                await self._holder.transition(
                    AuthState.authenticated(),
                    attempt=attempt,
                    effect=lambda: self._save_credential(credential),
                )
                return

            if outcome is PollSignal.PENDING:
                continue
            if outcome is PollSignal.SLOW_DOWN:
                interval += SLOW_DOWN_INCREMENT
                log_with_context(
                    logger,
                    "info",
                    "Token server asked to slow down",
                    interval=interval,
                    event_type="auth_poll_slow_down",
                )
                continue
            if outcome is PollSignal.DENIED:
                await self._holder.transition(AuthState.failed(AuthFailureReason.DENIED), attempt=attempt)
                return
            if outcome is PollSignal.EXPIRED:
                await self._holder.transition(AuthState.failed(AuthFailureReason.EXPIRED), attempt=attempt)
                return

        log_with_context(logger, "info", "Device code deadline reached", event_type="auth_poll_deadline")
        await self._holder.transition(AuthState.failed(AuthFailureReason.EXPIRED), attempt=attempt)

    # HTTP

    async def _post_form(self, url: str, form: dict[str, str]) -> httpx.Response:
        try:
            return await self._client.post(url, data=form, timeout=self._settings.request_timeout)
        except httpx.RequestError as e:
            raise NetworkException(e) from e

    async def _request_device_code(self) -> DeviceCodeGrant:
        response = await self._post_form(
            self._settings.ytmusic_device_code_url,
            {"client_id": self._settings.ytmusic_client_id, "scope": self._settings.ytmusic_oauth_scope},
        )
        if response.status_code != 200:
            raise HTTPStatusException(response.status_code, "Device code request failed")

        data = _decode_json(response)
        if not isinstance(data, dict):
            raise InvalidResponseException("Device code response is not an object")
        try:
            return DeviceCodeGrant.model_validate({**data, "issued_at": self._clock()})
        except ValidationError as e:
            raise InvalidResponseException("Device code response is missing fields") from e

    async def _request_token(self, device_code: str) -> TokenResponse | PollSignal:
        response = await self._post_form(
            self._settings.ytmusic_token_url,
            {
                "client_id": self._settings.ytmusic_client_id,
                "client_secret": self._settings.ytmusic_client_secret,
                "device_code": device_code,
                "grant_type": DEVICE_CODE_GRANT_TYPE,
            },
        )
        data = _decode_json(response)

        if response.status_code == 200:
            try:
                return TokenResponse.model_validate(data)
            except ValidationError as e:
                raise InvalidResponseException("Token response is missing fields") from e

        error = data.get("error") if isinstance(data, dict) else None
        try:
            return PollSignal(error)
        except ValueError:
            description = data.get("error_description") if isinstance(data, dict) else None
            raise HTTPStatusException(response.status_code, description) from None

    # Credential storage

    def _credential_from_token(self, token: TokenResponse, fallback_refresh_token: str | None = None) -> Credential:
        return Credential(
            access_token=token.access_token,
            refresh_token=token.refresh_token or fallback_refresh_token,
            expires_at=self._clock() + token.expires_in,
        )

    def _load_credential(self) -> Credential | None:
        access_token = self._store.get(ACCESS_TOKEN_KEY)
        if not access_token:
            return None
        try:
            expires_at = float(self._store.get(TOKEN_EXPIRATION_KEY) or 0)
        except ValueError:
            expires_at = 0.0  # unreadable expiry counts as expired
        return Credential(
            access_token=access_token,
            refresh_token=self._store.get(REFRESH_TOKEN_KEY),
            expires_at=expires_at,
        )

    def _save_credential(self, credential: Credential) -> None:
        self._store.set(ACCESS_TOKEN_KEY, credential.access_token)
        if credential.refresh_token:
            self._store.set(REFRESH_TOKEN_KEY, credential.refresh_token)
        else:
            self._store.delete(REFRESH_TOKEN_KEY)
        self._store.set(TOKEN_EXPIRATION_KEY, str(credential.expires_at))

    def _clear_credential(self) -> None:
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, TOKEN_EXPIRATION_KEY):
            self._store.delete(key)
