"""YouTube Music adapter for the provider abstraction."""

from collections.abc import Iterator
from contextlib import contextmanager

from music_bridge.exceptions import (
    AuthTokenRefreshFailedException,
    HTTPStatusException,
    InvalidResponseException,
    ProviderException,
)
from music_bridge.logging_config import get_logger, log_with_context
from music_bridge.models.items import CatalogItem
from music_bridge.providers import mapping
from music_bridge.providers.base import MusicProvider, ProviderCapability
from music_bridge.services.device_auth import DeviceFlowAuthenticator
from music_bridge.services.ytmusic_client import CatalogClient

logger = get_logger(__name__)


@contextmanager
def provider_errors(operation: str) -> Iterator[None]:
    """Translate client-internal failures to ``ProviderException``.

    Errors that are already part of the shared taxonomy (not authenticated,
    not found, network) pass through unchanged.
    """
    try:
        yield
    except (HTTPStatusException, InvalidResponseException, AuthTokenRefreshFailedException) as e:
        log_with_context(
            logger,
            "warning",
            "YouTube Music operation failed",
            operation=operation,
            error=e.message,
            error_code=e.code.value,
            event_type="provider_error",
        )
        raise ProviderException(e.user_message, details={"operation": operation, **e.details}) from e


class YouTubeMusicProvider(MusicProvider):
    """Serves library, search and detail pages from YouTube Music."""

    provider_id = mapping.PROVIDER_ID
    display_name = "YouTube Music"
    requires_auth = True
    capabilities = frozenset(
        {
            ProviderCapability.SEARCH,
            ProviderCapability.ARTIST_DETAILS,
            ProviderCapability.ALBUM_DETAILS,
            ProviderCapability.PLAYLISTS,
        }
    )

    def __init__(self, catalog: CatalogClient, authenticator: DeviceFlowAuthenticator):
        self._catalog = catalog
        self._auth = authenticator

    @property
    def is_authenticated(self) -> bool:
        return self._auth.is_authenticated

    async def get_artists(self, limit: int | None = None) -> list[CatalogItem]:
        with provider_errors("get_artists"):
            artists = await self._catalog.get_library_artists(limit=limit)
        return mapping.to_items(artists)

    async def get_albums(self, artist_id: str | None = None, limit: int | None = None) -> list[CatalogItem]:
        with provider_errors("get_albums"):
            if artist_id is None:
                albums = await self._catalog.get_library_albums(limit=limit)
            else:
                albums = await self._catalog.get_artist_albums(artist_id)
                if limit is not None:
                    albums = albums[: max(limit, 0)]
        return mapping.to_items(albums)

    async def get_tracks(self, album_id: str) -> list[CatalogItem]:
        with provider_errors("get_tracks"):
            detail = await self._catalog.get_album(album_id)
        return mapping.to_items(detail.tracks)

    async def get_recently_played(self, limit: int = 20) -> list[CatalogItem]:
        with provider_errors("get_recently_played"):
            tracks = await self._catalog.get_history(limit=limit)
        return mapping.to_items(tracks)

    async def get_playlists(self, limit: int | None = None) -> list[CatalogItem]:
        with provider_errors("get_playlists"):
            playlists = await self._catalog.get_library_playlists(limit=limit)
        return mapping.to_items(playlists)

    async def search(self, query: str, limit: int | None = None) -> list[CatalogItem]:
        with provider_errors("search"):
            if limit is None:
                results = await self._catalog.search(query)
            else:
                results = await self._catalog.search(query, limit=limit)
        return mapping.to_items(results)

    async def get_artist_details(self, artist_id: str) -> CatalogItem:
        with provider_errors("get_artist_details"):
            artist = await self._catalog.get_artist(artist_id)
        return mapping.artist_to_item(artist)

    async def get_album_details(self, album_id: str) -> CatalogItem:
        with provider_errors("get_album_details"):
            detail = await self._catalog.get_album(album_id)
        return mapping.album_to_item(detail.album)
