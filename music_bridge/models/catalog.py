"""Domain records for YouTube Music catalog content.

These are immutable value objects. They carry no behavior beyond derived
convenience properties and never hold untyped response data.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def parse_duration(text: str | None) -> int | None:
    """Convert a display duration ("3:45", "1:02:03") to seconds.

    Returns None unless the text splits into two or three ASCII numeric parts.
    """
    if not text:
        return None

    parts = [part.strip() for part in text.split(":")]
    if not all(part.isascii() and part.isdecimal() for part in parts):
        return None

    numbers = [int(part) for part in parts]
    if len(numbers) == 2:
        return numbers[0] * 60 + numbers[1]
    if len(numbers) == 3:
        return numbers[0] * 3600 + numbers[1] * 60 + numbers[2]
    return None


def format_duration(seconds: int) -> str:
    """Render seconds as m:ss, or h:mm:ss from one hour up."""
    hours, remainder = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class Thumbnail(BaseModel):
    """Thumbnail image at one size."""

    model_config = ConfigDict(frozen=True)

    url: str
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


def best_quality(thumbnails: Sequence[Thumbnail]) -> Thumbnail | None:
    """Largest thumbnail by width x height; the earliest entry wins ties."""
    if not thumbnails:
        return None
    return max(thumbnails, key=lambda thumb: thumb.area)


def closest_to(thumbnails: Sequence[Thumbnail], size: int) -> Thumbnail | None:
    """Thumbnail whose width is nearest ``size``; the earliest entry wins ties."""
    if not thumbnails:
        return None
    return min(thumbnails, key=lambda thumb: abs(thumb.width - size))


class ArtistRef(BaseModel):
    """Lightweight reference to an artist. ``id`` is None when the source had no link."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str

    @property
    def is_browseable(self) -> bool:
        return self.id is not None


class AlbumRef(BaseModel):
    """Lightweight reference to an album. ``id`` is None when the source had no link."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str

    @property
    def is_browseable(self) -> bool:
        return self.id is not None


class AlbumType(str, Enum):
    """Release type shown on album cards."""

    ALBUM = "Album"
    SINGLE = "Single"
    EP = "EP"
    UNKNOWN = "Unknown"

    @classmethod
    def from_text(cls, text: str | None) -> "AlbumType":
        """Case-insensitive keyword match, UNKNOWN otherwise."""
        if not text:
            return cls.UNKNOWN
        return {
            "album": cls.ALBUM,
            "single": cls.SINGLE,
            "ep": cls.EP,
        }.get(text.strip().lower(), cls.UNKNOWN)


class SearchResultType(str, Enum):
    """Kinds of content that can appear in mixed search results."""

    ARTIST = "artist"
    ALBUM = "album"
    SONG = "song"
    UNKNOWN = "unknown"


class Artist(BaseModel):
    """An artist (channel) in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    subscriber_count: str | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    description: str | None = None
    radio_id: str | None = None
    shuffle_id: str | None = None
    album_count: int | None = None

    @property
    def browse_id(self) -> str:
        return self.id

    @property
    def thumbnail_url(self) -> str | None:
        thumb = best_quality(self.thumbnails)
        return thumb.url if thumb else None

    @property
    def as_ref(self) -> ArtistRef:
        return ArtistRef(id=self.id, name=self.name)


class Album(BaseModel):
    """An album, single or EP."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: AlbumType = AlbumType.UNKNOWN
    artists: list[ArtistRef] = Field(default_factory=list)
    year: str | None = None
    track_count: int | None = None
    duration: str | None = None  # display text such as "45 minutes"
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    is_explicit: bool = False
    playlist_id: str | None = None
    audio_playlist_id: str | None = None

    @property
    def browse_id(self) -> str:
        return self.id

    @property
    def thumbnail_url(self) -> str | None:
        thumb = best_quality(self.thumbnails)
        return thumb.url if thumb else None

    @property
    def artist_name(self) -> str | None:
        return self.artists[0].name if self.artists else None

    @property
    def as_ref(self) -> AlbumRef:
        return AlbumRef(id=self.id, name=self.title)


class Track(BaseModel):
    """A song or music video.

    ``duration_seconds`` is authoritative; when it is not supplied it is
    derived from the ``duration`` display string.
    """

    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str
    artists: list[ArtistRef] = Field(default_factory=list)
    album: AlbumRef | None = None
    duration_seconds: int | None = None
    duration: str | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    is_explicit: bool = False
    is_available: bool = True
    track_number: int | None = None
    set_video_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def derive_duration_seconds(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("duration_seconds") is None:
            seconds = parse_duration(data.get("duration"))
            if seconds is not None:
                data = {**data, "duration_seconds": seconds}
        return data

    @property
    def id(self) -> str:
        return self.video_id

    @property
    def thumbnail_url(self) -> str | None:
        thumb = best_quality(self.thumbnails)
        return thumb.url if thumb else None

    @property
    def artist_name(self) -> str | None:
        return self.artists[0].name if self.artists else None

    @property
    def album_name(self) -> str | None:
        return self.album.name if self.album else None

    @property
    def formatted_duration(self) -> str:
        if self.duration:
            return self.duration
        if self.duration_seconds is None:
            return "--:--"
        return format_duration(self.duration_seconds)


class Playlist(BaseModel):
    """A user or editorial playlist."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    track_count: int | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    author: ArtistRef | None = None
    duration: str | None = None
    year: str | None = None

    @property
    def thumbnail_url(self) -> str | None:
        thumb = best_quality(self.thumbnails)
        return thumb.url if thumb else None


class AlbumDetail(BaseModel):
    """An album page: header metadata plus its track list."""

    model_config = ConfigDict(frozen=True)

    album: Album
    tracks: list[Track] = Field(default_factory=list)


SearchResult = Artist | Album | Track
