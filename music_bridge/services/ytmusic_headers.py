"""Request headers, context and endpoint constants for the YouTube Music API.

The internal API only accepts requests that look like they come from the
music.youtube.com web client, so every request carries browser-like headers
and a client context in its JSON body.
"""

from enum import Enum
from typing import Any

from music_bridge.config import Settings


class Endpoint(str, Enum):
    """Known youtubei endpoints, relative to the API base URL."""

    SEARCH = "search"
    BROWSE = "browse"
    PLAYER = "player"
    SEARCH_SUGGESTIONS = "music/get_search_suggestions"
    NEXT = "next"


class BrowseId:
    """Fixed browse ids of library pages."""

    LIBRARY_ARTISTS = "FEmusic_library_corpus_track_artists"
    LIBRARY_ALBUMS = "FEmusic_liked_albums"
    LIBRARY_PLAYLISTS = "FEmusic_liked_playlists"
    LIKED_SONGS = "FEmusic_liked_videos"
    HISTORY = "FEmusic_history"


class SearchFilter:
    """``params`` values that restrict a search to one kind of result."""

    SONGS = "EgWKAQIIAWoMEA4QChADEAQQCRAF"
    ALBUMS = "EgWKAQIYAWoMEA4QChADEAQQCRAF"
    ARTISTS = "EgWKAQIgAWoMEA4QChADEAQQCRAF"


def endpoint_url(settings: Settings, endpoint: Endpoint) -> str:
    return f"{settings.ytmusic_api_base_url}{endpoint.value}"


def standard_headers(settings: Settings, access_token: str | None = None) -> dict[str, str]:
    """Headers sent with every catalog request.

    Args:
        settings: Settings instance
        access_token: OAuth access token, added as a Bearer credential when given
    """
    origin = settings.ytmusic_origin.rstrip("/")
    headers = {
        "User-Agent": settings.ytmusic_user_agent,
        "Accept": "*/*",
        "Accept-Language": f"{settings.ytmusic_language}-{settings.ytmusic_region},{settings.ytmusic_language};q=0.9",
        "Content-Type": "application/json",
        "X-Goog-AuthUser": "0",
        "X-Origin": origin,
        "Origin": origin,
        "Referer": f"{origin}/",
    }
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def request_context(settings: Settings) -> dict[str, Any]:
    """The ``context`` object every youtubei request body starts with."""
    client: dict[str, Any] = {
        "clientName": settings.ytmusic_client_name,
        "clientVersion": settings.ytmusic_client_version,
        "hl": settings.ytmusic_language,
        "gl": settings.ytmusic_region,
        "platform": "DESKTOP",
        "userAgent": settings.ytmusic_user_agent,
    }
    return {"context": {"client": client}}


def build_request_body(settings: Settings, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """Request context merged with endpoint-specific parameters."""
    body = request_context(settings)
    body.update(params or {})
    return body
