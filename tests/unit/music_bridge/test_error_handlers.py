"""Unit tests for the exception handlers."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from music_bridge.exceptions import NetworkException, NotSupportedException, ProviderException
from music_bridge.middleware.error_handlers import register_error_handlers


def make_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/unsupported")
    async def unsupported():
        raise NotSupportedException("Local Library has no playlists", details={"provider": "local"})

    @app.get("/network")
    async def network():
        raise NetworkException(ConnectionError("refused"))

    @app.get("/provider")
    async def provider():
        raise ProviderException("The music provider returned an error", details={"operation": "search"})

    @app.get("/boom")
    async def boom():
        raise RuntimeError("internal detail")

    return TestClient(app, raise_server_exceptions=False)


def test_music_bridge_exception_body():
    """Test errors render code, user message and details."""
    response = make_client().get("/unsupported")

    assert response.status_code == 501
    assert response.json() == {
        "error": {
            "code": "NOT_SUPPORTED",
            "message": "Operation not supported",
            "details": {"provider": "local"},
        }
    }


def test_network_exception_status():
    """Test network failures map to 502 with a user-facing message."""
    response = make_client().get("/network")

    assert response.status_code == 502
    body = response.json()["error"]
    assert body["code"] == "NETWORK_ERROR"
    assert body["message"] == "Could not reach the music provider"
    assert body["details"] == {"error_type": "ConnectionError"}


def test_provider_exception():
    """Test provider errors keep their details."""
    response = make_client().get("/provider")

    assert response.status_code == 502
    assert response.json()["error"]["details"] == {"operation": "search"}


def test_unhandled_exception_hides_details():
    """Test unexpected errors return a generic 500."""
    response = make_client().get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}}
    assert "internal detail" not in response.text
