"""Typed client for the YouTube Music internal API.

Every call POSTs a JSON body to a youtubei endpoint and hands the decoded
response to the parsers. Library reads require a signed-in user; catalog
reads (artists, albums, search) work anonymously and send the user's token
when one is available.
"""

from collections.abc import Sequence
from typing import Any, TypeVar

import httpx

from music_bridge.config import Settings, get_settings
from music_bridge.exceptions import (
    HTTPStatusException,
    InvalidResponseException,
    NetworkException,
    NotAuthenticatedException,
    NotFoundException,
)
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models.catalog import Album, AlbumDetail, Artist, Playlist, SearchResult, Track
from music_bridge.parsing import response_parser
from music_bridge.services.device_auth import DeviceFlowAuthenticator
from music_bridge.services.ytmusic_headers import (
    BrowseId,
    Endpoint,
    SearchFilter,
    build_request_body,
    endpoint_url,
    standard_headers,
)

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_LIBRARY_LIMIT = 25
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 20


def _truncate(items: Sequence[T], limit: int | None) -> list[T]:
    return list(items if limit is None else items[: max(limit, 0)])


class CatalogClient:
    """YouTube Music catalog access returning domain records.

    The client holds no parsed state; each call issues one request.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        authenticator: DeviceFlowAuthenticator,
        settings: Settings | None = None,
    ):
        """Initialize the catalog client.

        Args:
            client: Shared HTTP client from dependency injection
            authenticator: Source of access tokens
            settings: Settings instance (defaults to singleton)
        """
        self._client = client
        self._auth = authenticator
        self._settings = settings or get_settings()

    # Transport

    async def _optional_token(self) -> str | None:
        if not self._auth.is_authenticated:
            return None
        try:
            return await self._auth.get_valid_access_token()
        except NotAuthenticatedException as e:
            log_with_context(
                logger,
                "info",
                "Continuing without a session",
                reason=e.message,
                event_type="catalog_anonymous_request",
            )
            return None

    async def _request(
        self,
        endpoint: Endpoint,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> dict[str, Any]:
        """POST to a youtubei endpoint and return the decoded JSON object.

        Args:
            endpoint: Endpoint to call
            params: Endpoint-specific body fields merged after the client context
            authenticated: Require a signed-in user

        Raises:
            NotAuthenticatedException: ``authenticated`` and no usable token (no request is made)
            NetworkException: Transport failure
            HTTPStatusException: Non-200 status
            InvalidResponseException: Body is not a JSON object
        """
        if authenticated:
            token: str | None = await self._auth.get_valid_access_token()
        else:
            token = await self._optional_token()

        url = endpoint_url(self._settings, endpoint)
        try:
            response = await self._client.post(
                url,
                json=build_request_body(self._settings, params),
                headers=standard_headers(self._settings, token),
                timeout=self._settings.request_timeout,
            )
        except httpx.RequestError as e:
            log_with_context(
                logger,
                "error",
                "Catalog request failed",
                endpoint=endpoint.value,
                error=str(e),
                error_type=type(e).__name__,
                event_type="catalog_request_error",
            )
            raise NetworkException(e) from e

        if response.status_code != 200:
            log_with_context(
                logger,
                "warning",
                "Catalog request returned error status",
                endpoint=endpoint.value,
                status_code=response.status_code,
                event_type="catalog_http_error",
            )
            raise HTTPStatusException(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise InvalidResponseException("Catalog response is not JSON", details={"endpoint": endpoint.value}) from e
        if not isinstance(data, dict):
            raise InvalidResponseException("Catalog response is not an object", details={"endpoint": endpoint.value})
        return data

    async def _browse(self, browse_id: str, authenticated: bool = True) -> dict[str, Any]:
        return await self._request(Endpoint.BROWSE, {"browseId": browse_id}, authenticated=authenticated)

    async def _search(self, query: str, filter_params: str | None = None) -> list[SearchResult]:
        if not query.strip():
            return []
        params: dict[str, Any] = {"query": query}
        if filter_params:
            params["params"] = filter_params
        response = await self._request(Endpoint.SEARCH, params, authenticated=False)
        return response_parser.parse_search_results(response)

    # Library

    async def get_library_artists(self, limit: int | None = DEFAULT_LIBRARY_LIMIT) -> list[Artist]:
        response = await self._browse(BrowseId.LIBRARY_ARTISTS)
        return _truncate(response_parser.parse_library_artists(response), limit)

    async def get_library_albums(self, limit: int | None = DEFAULT_LIBRARY_LIMIT) -> list[Album]:
        response = await self._browse(BrowseId.LIBRARY_ALBUMS)
        return _truncate(response_parser.parse_library_albums(response), limit)

    async def get_library_playlists(self, limit: int | None = DEFAULT_LIBRARY_LIMIT) -> list[Playlist]:
        response = await self._browse(BrowseId.LIBRARY_PLAYLISTS)
        return _truncate(response_parser.parse_library_playlists(response), limit)

    async def get_liked_songs(self, limit: int | None = None) -> list[Track]:
        response = await self._browse(BrowseId.LIKED_SONGS)
        return _truncate(response_parser.parse_playlist_tracks(response), limit)

    async def get_history(self, limit: int | None = DEFAULT_HISTORY_LIMIT) -> list[Track]:
        """Recently played tracks, most recent first."""
        response = await self._browse(BrowseId.HISTORY)
        return _truncate(response_parser.parse_history(response), limit)

    # Artist and album pages

    async def get_artist(self, artist_id: str) -> Artist:
        """Artist page header.

        Raises:
            NotFoundException: Page not recognized
        """
        response = await self._browse(artist_id, authenticated=False)
        artist = response_parser.parse_artist_details(response, fallback_id=artist_id)
        if artist is None:
            raise NotFoundException("Artist not found", details={"artist_id": artist_id})
        return artist

    async def get_artist_albums(self, artist_id: str) -> list[Album]:
        """Discography shown on an artist page."""
        response = await self._browse(artist_id, authenticated=False)
        return response_parser.parse_artist_albums(response, fallback_id=artist_id)

    async def get_album(self, album_id: str) -> AlbumDetail:
        """Album header with its tracks.

        Raises:
            NotFoundException: Page not recognized
        """
        response = await self._browse(album_id, authenticated=False)
        detail = response_parser.parse_album_page(response, fallback_id=album_id)
        if detail is None:
            raise NotFoundException("Album not found", details={"album_id": album_id})
        return detail

    # Search

    async def search(self, query: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[SearchResult]:
        """Mixed artists, albums and tracks in catalog order."""
        return _truncate(await self._search(query), limit)

    async def search_artists(self, query: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[Artist]:
        results = await self._search(query, SearchFilter.ARTISTS)
        return _truncate([item for item in results if isinstance(item, Artist)], limit)

    async def search_albums(self, query: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[Album]:
        results = await self._search(query, SearchFilter.ALBUMS)
        return _truncate([item for item in results if isinstance(item, Album)], limit)

    async def search_songs(self, query: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[Track]:
        results = await self._search(query, SearchFilter.SONGS)
        return _truncate([item for item in results if isinstance(item, Track)], limit)

    async def get_search_suggestions(self, query: str) -> list[str]:
        if not query.strip():
            return []
        response = await self._request(Endpoint.SEARCH_SUGGESTIONS, {"input": query}, authenticated=False)
        return response_parser.parse_search_suggestions(response)
