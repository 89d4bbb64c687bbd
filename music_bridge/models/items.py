"""Provider-neutral item model.

Every backend maps its results onto ``CatalogItem`` so the calling layer can
render artists, albums, tracks and playlists from any provider the same way.
Field names follow the media server's item shape.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

TICKS_PER_SECOND = 10_000_000


class ItemKind(str, Enum):
    """Item types understood by the calling layer."""

    MUSIC_ARTIST = "MusicArtist"
    MUSIC_ALBUM = "MusicAlbum"
    AUDIO = "Audio"
    PLAYLIST = "Playlist"


class NameIdPair(BaseModel):
    """Name with an optional id, used for artist cross references."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str


class CatalogItem(BaseModel):
    """Normalized item returned by every provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: ItemKind
    provider_id: str
    overview: str | None = None
    taglines: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    production_year: int | None = None
    album_artist: str | None = None
    album_artists: list[NameIdPair] = Field(default_factory=list)
    artists: list[str] = Field(default_factory=list)
    artist_items: list[NameIdPair] = Field(default_factory=list)
    album: str | None = None
    album_id: str | None = None
    index_number: int | None = None
    child_count: int | None = None
    run_time_ticks: int | None = None
    image_url: str | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)

    @property
    def run_time_seconds(self) -> int | None:
        if self.run_time_ticks is None:
            return None
        return self.run_time_ticks // TICKS_PER_SECOND
