"""Provider abstraction shared by every catalog backend.

A provider adapts one music source (the media server's own library, YouTube
Music, ...) to a single contract returning ``CatalogItem`` records, so the
calling layer never needs to know which backend it is talking to.
"""

from abc import ABC, abstractmethod
from enum import Enum

from music_bridge.exceptions import NotFoundException, NotSupportedException
from music_bridge.models.base_models import ProviderInfo
from music_bridge.models.items import CatalogItem


class ProviderCapability(str, Enum):
    """Optional operations a provider may implement."""

    SEARCH = "search"
    ARTIST_DETAILS = "artist_details"
    ALBUM_DETAILS = "album_details"
    PLAYLISTS = "playlists"


class MusicProvider(ABC):
    """Base class for music providers.

    Library operations are required. The optional operations have default
    bodies: ``search`` finds nothing, the detail lookups raise not found and
    ``get_playlists`` is not supported. A provider that overrides one lists
    the matching entry in ``capabilities``.
    """

    provider_id: str
    display_name: str
    requires_auth: bool = True
    capabilities: frozenset[ProviderCapability] = frozenset()

    @property
    @abstractmethod
    def is_authenticated(self) -> bool:
        """Whether the user is signed in to this provider."""

    @property
    def is_usable(self) -> bool:
        return self.is_authenticated or not self.requires_auth

    def supports(self, capability: ProviderCapability) -> bool:
        return capability in self.capabilities

    def info(self) -> ProviderInfo:
        return ProviderInfo(
            id=self.provider_id,
            display_name=self.display_name,
            requires_auth=self.requires_auth,
            is_authenticated=self.is_authenticated,
            capabilities=sorted(capability.value for capability in self.capabilities),
        )

    # Library

    @abstractmethod
    async def get_artists(self, limit: int | None = None) -> list[CatalogItem]:
        """Artists in the user's library."""

    @abstractmethod
    async def get_albums(self, artist_id: str | None = None, limit: int | None = None) -> list[CatalogItem]:
        """Albums in the user's library, or one artist's albums."""

    @abstractmethod
    async def get_tracks(self, album_id: str) -> list[CatalogItem]:
        """Tracks of an album in album order."""

    @abstractmethod
    async def get_recently_played(self, limit: int = 20) -> list[CatalogItem]:
        """Recently played tracks, most recent first."""

    # Optional

    async def search(self, query: str, limit: int | None = None) -> list[CatalogItem]:
        return []

    async def get_playlists(self, limit: int | None = None) -> list[CatalogItem]:
        raise NotSupportedException(
            f"{self.display_name} has no playlists", details={"provider": self.provider_id}
        )

    async def get_artist_details(self, artist_id: str) -> CatalogItem:
        raise NotFoundException("Artist not found", details={"provider": self.provider_id, "artist_id": artist_id})

    async def get_album_details(self, album_id: str) -> CatalogItem:
        raise NotFoundException("Album not found", details={"provider": self.provider_id, "album_id": album_id})
