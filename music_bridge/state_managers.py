"""State managers for handling application-wide mutable state.

This module provides task-safe state management using asyncio.Lock
for async operations. All state managers inherit from StateManager ABC.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection

from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models.auth import AuthState, AuthStatus

logger = get_logger(__name__)

StateCallback = Callable[[AuthState], None]


class StateManager(ABC):
    """Base class for all state managers.

    State managers provide task-safe access to mutable application state.
    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class AuthStateHolder(StateManager):
    """Observable holder of the authenticator state.

    Every change goes through ``transition`` or ``supersede``, which mutate and
    notify subscribers under one lock, so observers see transitions in order.

    Each device flow runs as a numbered attempt. ``supersede`` starts a new
    attempt; a ``transition`` tagged with an older attempt number is discarded.
    This is how results from a cancelled or replaced polling loop are dropped.
    """

    def __init__(self, initial: AuthState | None = None):
        """Initialize the auth state holder."""
        self._state = initial or AuthState.idle()
        self._attempt = 0
        self._subscribers: list[StateCallback] = []
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the auth state holder."""
        # No initialization needed for now
        pass

    async def cleanup(self) -> None:
        """Drop all subscribers."""
        async with self._lock:
            self._subscribers.clear()

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def attempt(self) -> int:
        return self._attempt

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Register ``callback`` for every future transition.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def transition(
        self,
        new_state: AuthState,
        attempt: int | None = None,
        from_statuses: Collection[AuthStatus] | None = None,
        effect: Callable[[], None] | None = None,
    ) -> bool:
        """Move to ``new_state`` unless the change no longer applies.

        Args:
            new_state: State to move to
            attempt: Attempt the caller belongs to; stale attempts are discarded
            from_statuses: Apply only when the current status is one of these
            effect: Run under the lock just before the change, only if it applies

        Returns:
            True if the state was changed
        """
        async with self._lock:
            if attempt is not None and attempt != self._attempt:
                log_with_context(
                    logger,
                    "debug",
                    "Discarded transition from stale attempt",
                    attempt=attempt,
                    current_attempt=self._attempt,
                    target_status=new_state.status.value,
                    event_type="auth_transition_discarded",
                )
                return False
            if from_statuses is not None and self._state.status not in from_statuses:
                return False
            if effect is not None:
                effect()
            self._apply(new_state)
            return True

    async def supersede(
        self,
        new_state: AuthState,
        from_statuses: Collection[AuthStatus] | None = None,
        effect: Callable[[], None] | None = None,
    ) -> int | None:
        """Start a new attempt in ``new_state``, invalidating older ones.

        Returns:
            The new attempt number, or None if the current status did not match
        """
        async with self._lock:
            if from_statuses is not None and self._state.status not in from_statuses:
                return None
            if effect is not None:
                effect()
            self._attempt += 1
            self._apply(new_state)
            return self._attempt

    def _apply(self, new_state: AuthState) -> None:
        previous = self._state
        self._state = new_state
        log_with_context(
            logger,
            "info",
            "Auth state changed",
            from_status=previous.status.value,
            to_status=new_state.status.value,
            failure=new_state.failure.value if new_state.failure else None,
            attempt=self._attempt,
            event_type="auth_state_changed",
        )
        for callback in list(self._subscribers):
            try:
                callback(new_state)
            except Exception as e:
                log_with_context(
                    logger,
                    "error",
                    "Auth state subscriber failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="auth_subscriber_error",
                )
