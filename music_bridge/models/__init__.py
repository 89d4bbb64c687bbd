"""music-bridge models"""

from music_bridge.models.auth import (
    AuthFailureReason,
    AuthState,
    AuthStatus,
    Credential,
    DeviceCodeGrant,
    TokenResponse,
)
from music_bridge.models.base_models import (
    AuthStatusResponse,
    ErrorBody,
    ErrorResponse,
    HealthResponse,
    ProviderInfo,
    ProviderSearchResults,
)
from music_bridge.models.catalog import (
    Album,
    AlbumDetail,
    AlbumRef,
    AlbumType,
    Artist,
    ArtistRef,
    Playlist,
    SearchResult,
    SearchResultType,
    Thumbnail,
    Track,
    best_quality,
    closest_to,
    format_duration,
    parse_duration,
)
from music_bridge.models.items import CatalogItem, ItemKind, NameIdPair

__all__ = [
    "Album",
    "AlbumDetail",
    "AlbumRef",
    "AlbumType",
    "Artist",
    "ArtistRef",
    "AuthFailureReason",
    "AuthState",
    "AuthStatus",
    "AuthStatusResponse",
    "CatalogItem",
    "Credential",
    "DeviceCodeGrant",
    "ErrorBody",
    "ErrorResponse",
    "HealthResponse",
    "ItemKind",
    "NameIdPair",
    "Playlist",
    "ProviderInfo",
    "ProviderSearchResults",
    "SearchResult",
    "SearchResultType",
    "Thumbnail",
    "TokenResponse",
    "Track",
    "best_quality",
    "closest_to",
    "format_duration",
    "parse_duration",
]
