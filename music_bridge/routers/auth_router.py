"""Device-flow sign-in routes for YouTube Music."""

from fastapi import APIRouter, Depends

from music_bridge.dependencies import get_authenticator
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models import AuthStatusResponse, ErrorResponse
from music_bridge.services.device_auth import DeviceFlowAuthenticator

router = APIRouter()
logger = get_logger(__name__)


def _status(authenticator: DeviceFlowAuthenticator) -> AuthStatusResponse:
    return AuthStatusResponse.from_state(authenticator.state, authenticator.is_authenticated)


@router.get("/status", response_model=AuthStatusResponse, summary="Get sign-in state")
async def get_status(authenticator: DeviceFlowAuthenticator = Depends(get_authenticator)):
    """Current authenticator state, with the user code while a flow is open."""
    return _status(authenticator)


@router.post(
    "/device",
    response_model=AuthStatusResponse,
    summary="Start device sign-in",
    description="""
    Requests a new device code. Show `user_code` and `verification_url` to the
    user, then call `/device/poll` to wait for them to approve.

    Any sign-in already in progress is cancelled.
    """,
    responses={502: {"model": ErrorResponse, "description": "Token server unreachable or returned an error"}},
)
async def start_device_flow(authenticator: DeviceFlowAuthenticator = Depends(get_authenticator)):
    await authenticator.start()
    return _status(authenticator)


@router.post("/device/poll", response_model=AuthStatusResponse, summary="Wait for the user to approve")
async def begin_polling(authenticator: DeviceFlowAuthenticator = Depends(get_authenticator)):
    """Starts polling in the background. Follow progress with `/status`."""
    task = await authenticator.begin_polling()
    if task is None:
        log_with_context(
            logger,
            "info",
            "Poll requested without an open device code",
            status=authenticator.state.status.value,
            event_type="auth_poll_rejected",
        )
    return _status(authenticator)


@router.post("/cancel", response_model=AuthStatusResponse, summary="Cancel device sign-in")
async def cancel_device_flow(authenticator: DeviceFlowAuthenticator = Depends(get_authenticator)):
    await authenticator.cancel()
    return _status(authenticator)


@router.post("/sign-out", response_model=AuthStatusResponse, summary="Sign out and forget the credential")
async def sign_out(authenticator: DeviceFlowAuthenticator = Depends(get_authenticator)):
    await authenticator.sign_out()
    return _status(authenticator)
