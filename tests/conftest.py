"""Pytest configuration and shared fixtures."""

import asyncio
import os
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Settings are read when the app module is imported
os.environ.setdefault("YTMUSIC_CLIENT_ID", "test-client-id")
os.environ.setdefault("YTMUSIC_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SECRET_STORE_PATH", str(Path(tempfile.gettempdir()) / "music_bridge_test_secrets.json"))

from music_bridge.config import Settings  # noqa: E402
from music_bridge.secret_store import InMemorySecretStore  # noqa: E402

START_TIME = 1_700_000_000.0


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for external API calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get = AsyncMock()
    mock_client.post = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_settings(tmp_path):
    """Settings instance with test values."""
    return Settings(
        api_host="127.0.0.1",
        api_port=8000,
        ytmusic_client_id="test-client-id",
        ytmusic_client_secret="test-client-secret",
        secret_store_path=tmp_path / "secrets.json",
        request_timeout=5.0,
    )


@pytest.fixture
def secret_store():
    """Empty in-memory secret store."""
    return InMemorySecretStore()


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def instant_wait(fake_clock):
    """Cancellable wait that advances the fake clock instead of sleeping."""
    waits: list[float] = []

    async def wait(cancel: asyncio.Event, timeout: float) -> bool:
        waits.append(timeout)
        await asyncio.sleep(0)
        fake_clock.advance(timeout)
        return cancel.is_set()

    wait.calls = waits
    return wait


def make_response(status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> MagicMock:
    """Mock httpx response with a JSON body."""
    response = MagicMock()
    response.status_code = status_code
    if invalid_json:
        response.json = MagicMock(side_effect=ValueError("Expecting value"))
    else:
        response.json = lambda: payload
    return response


@pytest.fixture
def response_factory():
    return make_response


# YouTube Music payload builders


def thumbs(*sizes: tuple[int, int], base: str = "https://lh3.googleusercontent.com/img") -> dict[str, Any]:
    return {"thumbnails": [{"url": f"{base}=w{w}-h{h}", "width": w, "height": h} for w, h in sizes]}


def run(text: str, browse_id: str | None = None, video_id: str | None = None) -> dict[str, Any]:
    item: dict[str, Any] = {"text": text}
    if browse_id:
        item["navigationEndpoint"] = {"browseEndpoint": {"browseId": browse_id}}
    elif video_id:
        item["navigationEndpoint"] = {"watchEndpoint": {"videoId": video_id}}
    return item


def flex_column(runs: list[dict[str, Any]]) -> dict[str, Any]:
    return {"musicResponsiveListItemFlexColumnRenderer": {"text": {"runs": runs}}}


def explicit_badges() -> list[dict[str, Any]]:
    return [
        {
            "musicInlineBadgeRenderer": {
                "icon": {"iconType": "MUSIC_EXPLICIT_BADGE"},
                "accessibilityData": {"accessibilityData": {"label": "Explicit"}},
            }
        }
    ]


def list_item(
    title: str,
    subtitle: list[dict[str, Any]] | None = None,
    browse_id: str | None = None,
    video_id: str | None = None,
    watch_endpoint: bool = False,
    duration: str | None = None,
    thumbnails: dict[str, Any] | None = None,
    explicit: bool = False,
    set_video_id: str | None = None,
) -> dict[str, Any]:
    renderer: dict[str, Any] = {"flexColumns": [flex_column([run(title)]), flex_column(subtitle or [])]}
    if browse_id:
        renderer["navigationEndpoint"] = {"browseEndpoint": {"browseId": browse_id}}
    elif watch_endpoint and video_id:
        renderer["navigationEndpoint"] = {"watchEndpoint": {"videoId": video_id}}
    if video_id:
        renderer["playlistItemData"] = {"videoId": video_id}
        if set_video_id:
            renderer["playlistItemData"]["playlistSetVideoId"] = set_video_id
    if duration:
        renderer["fixedColumns"] = [
            {"musicResponsiveListItemFixedColumnRenderer": {"text": {"runs": [{"text": duration}]}}}
        ]
    if thumbnails:
        renderer["thumbnail"] = {"musicThumbnailRenderer": {"thumbnail": thumbnails}}
    if explicit:
        renderer["badges"] = explicit_badges()
    return {"musicResponsiveListItemRenderer": renderer}


def two_row_item(
    title: str,
    browse_id: str,
    subtitle: list[dict[str, Any]] | None = None,
    thumbnails: dict[str, Any] | None = None,
) -> dict[str, Any]:
    renderer: dict[str, Any] = {
        "title": {"runs": [run(title, browse_id=browse_id)]},
        "subtitle": {"runs": subtitle or []},
        "navigationEndpoint": {"browseEndpoint": {"browseId": browse_id}},
    }
    if thumbnails:
        renderer["thumbnailRenderer"] = {"musicThumbnailRenderer": {"thumbnail": thumbnails}}
    return {"musicTwoRowItemRenderer": renderer}


def shelf(items: list[dict[str, Any]]) -> dict[str, Any]:
    return {"musicShelfRenderer": {"contents": items}}


def single_column(sections: list[dict[str, Any]], **extra: Any) -> dict[str, Any]:
    return {
        "contents": {
            "singleColumnBrowseResultsRenderer": {
                "tabs": [{"tabRenderer": {"content": {"sectionListRenderer": {"contents": sections}}}}]
            }
        },
        **extra,
    }


def search_page(sections: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "contents": {
            "tabbedSearchResultsRenderer": {
                "tabs": [{"tabRenderer": {"content": {"sectionListRenderer": {"contents": sections}}}}]
            }
        }
    }


def tracking_params(browse_id: str) -> dict[str, Any]:
    return {
        "serviceTrackingParams": [
            {"service": "GFEEDBACK", "params": [{"key": "browse_id", "value": browse_id}]},
        ]
    }


@pytest.fixture
def ytm():
    """Builders for YouTube Music response payloads."""
    return SimpleNamespace(
        thumbs=thumbs,
        run=run,
        flex_column=flex_column,
        explicit_badges=explicit_badges,
        list_item=list_item,
        two_row_item=two_row_item,
        shelf=shelf,
        single_column=single_column,
        search_page=search_page,
        tracking_params=tracking_params,
    )
