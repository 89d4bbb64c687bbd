"""Unit tests for state managers."""

import pytest

from music_bridge.models import AuthFailureReason, AuthState, AuthStatus, DeviceCodeGrant
from music_bridge.state_managers import AuthStateHolder

GRANT = DeviceCodeGrant(
    device_code="dev", user_code="ABCD-EFGH", verification_url="https://www.google.com/device", expires_in=1800
)


@pytest.mark.asyncio
async def test_auth_state_holder_initial_state():
    """Test holder starts idle unless given a state."""
    assert AuthStateHolder().state.status is AuthStatus.IDLE
    assert AuthStateHolder(AuthState.authenticated()).state.status is AuthStatus.AUTHENTICATED


@pytest.mark.asyncio
async def test_auth_state_holder_notifies_in_order():
    """Test subscribers see every transition in order."""
    holder = AuthStateHolder()
    seen = []
    holder.subscribe(lambda state: seen.append(state.status))

    await holder.supersede(AuthState.awaiting_user_action(GRANT))
    await holder.transition(AuthState.polling(GRANT))
    await holder.transition(AuthState.authenticated())

    assert seen == [AuthStatus.AWAITING_USER_ACTION, AuthStatus.POLLING, AuthStatus.AUTHENTICATED]


@pytest.mark.asyncio
async def test_auth_state_holder_discards_stale_attempt():
    """Test a transition from a superseded attempt is ignored."""
    holder = AuthStateHolder()
    old_attempt = await holder.supersede(AuthState.polling(GRANT))
    await holder.supersede(AuthState.idle())

    changed = await holder.transition(AuthState.failed(AuthFailureReason.DENIED), attempt=old_attempt)

    assert not changed
    assert holder.state.status is AuthStatus.IDLE


@pytest.mark.asyncio
async def test_auth_state_holder_from_statuses_guard():
    """Test changes only apply from the listed statuses."""
    holder = AuthStateHolder(AuthState.failed(AuthFailureReason.EXPIRED))
    effects = []

    attempt = await holder.supersede(
        AuthState.idle(), from_statuses={AuthStatus.POLLING}, effect=lambda: effects.append("ran")
    )

    assert attempt is None
    assert effects == []
    assert holder.state.status is AuthStatus.FAILED


@pytest.mark.asyncio
async def test_auth_state_holder_effect_runs_before_notify():
    """Test the effect runs before subscribers are told."""
    holder = AuthStateHolder()
    order = []
    holder.subscribe(lambda state: order.append("notified"))

    await holder.transition(AuthState.authenticated(), effect=lambda: order.append("effect"))

    assert order == ["effect", "notified"]


@pytest.mark.asyncio
async def test_auth_state_holder_subscriber_errors_isolated():
    """Test a failing subscriber does not block others."""
    holder = AuthStateHolder()
    seen = []

    def broken(state):
        raise RuntimeError("subscriber bug")

    holder.subscribe(broken)
    holder.subscribe(lambda state: seen.append(state.status))

    await holder.transition(AuthState.authenticated())

    assert seen == [AuthStatus.AUTHENTICATED]


@pytest.mark.asyncio
async def test_auth_state_holder_unsubscribe_and_cleanup():
    """Test subscriptions can be removed."""
    holder = AuthStateHolder()
    seen = []
    unsubscribe = holder.subscribe(lambda state: seen.append(state.status))

    unsubscribe()
    unsubscribe()
    await holder.transition(AuthState.authenticated())
    holder.subscribe(lambda state: seen.append(state.status))
    await holder.cleanup()
    await holder.transition(AuthState.idle())

    assert seen == []
