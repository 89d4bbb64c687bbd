"""Field extraction heuristics for catalog response items.

Each function takes one renderer object (a list item, card or page header)
and pulls a single field out of it. None of them raise on unexpected input;
a field that cannot be located comes back as None or an empty collection.
"""

import re
from typing import Any
from urllib.parse import urlparse

from music_bridge.models.catalog import AlbumRef, AlbumType, ArtistRef, SearchResultType, Thumbnail
from music_bridge.parsing.navigator import (
    navigate,
    navigate_dict,
    navigate_dicts,
    navigate_int,
    navigate_str,
)

ARTIST_ID_PREFIX = "UC"
ALBUM_ID_PREFIX = "MPREb"
SUBTITLE_SEPARATOR = " • "
MIN_YEAR = 1901
MAX_YEAR = 2099

_FLEX_COLUMN = "musicResponsiveListItemFlexColumnRenderer"
_FIXED_COLUMN = "musicResponsiveListItemFixedColumnRenderer"
_COUNT_PATTERN = re.compile(r"[0-9][0-9,.]*")
_YEAR_PATTERN = re.compile(r"[0-9]{4}")
_WORD_PATTERN = re.compile(r"[a-z]+")


# Text runs


def join_runs(container: Any) -> str | None:
    """Concatenate every text run of a ``{"runs": [...]}`` container."""
    runs = navigate_dicts(container, ["runs"])
    if not runs:
        return None
    texts = [text for text in (navigate_str(run, ["text"]) for run in runs) if text is not None]
    return "".join(texts) if texts else None


def first_run_text(container: Any) -> str | None:
    return navigate_str(container, ["runs", 0, "text"])


def flex_column_text(column: Any) -> str | None:
    return join_runs(navigate(column, [_FLEX_COLUMN, "text"]))


def flex_column_runs(renderer: Any, index: int) -> list[dict[str, Any]]:
    return navigate_dicts(renderer, ["flexColumns", index, _FLEX_COLUMN, "text", "runs"])


def extract_title(renderer: Any) -> str | None:
    """First text run of the first (title) column."""
    return navigate_str(renderer, ["flexColumns", 0, _FLEX_COLUMN, "text", "runs", 0, "text"])


def extract_subtitle(renderer: Any) -> str | None:
    """All text runs of the second (subtitle) column, concatenated."""
    return join_runs(navigate(renderer, ["flexColumns", 1, _FLEX_COLUMN, "text"]))


def extract_two_row_title(renderer: Any) -> str | None:
    return first_run_text(navigate(renderer, ["title"]))


def extract_two_row_subtitle(renderer: Any) -> str | None:
    return join_runs(navigate(renderer, ["subtitle"]))


# Identifiers


def run_browse_id(run: Any) -> str | None:
    return navigate_str(run, ["navigationEndpoint", "browseEndpoint", "browseId"])


def extract_browse_id(renderer: Any) -> str | None:
    return navigate_str(renderer, ["navigationEndpoint", "browseEndpoint", "browseId"])


def extract_video_id(renderer: Any) -> str | None:
    """Video id from the play overlay, the item's watch target, or playlist item data."""
    for path in (
        [
            "overlay",
            "musicItemThumbnailOverlayRenderer",
            "content",
            "musicPlayButtonRenderer",
            "playNavigationEndpoint",
            "watchEndpoint",
            "videoId",
        ],
        ["navigationEndpoint", "watchEndpoint", "videoId"],
        ["playlistItemData", "videoId"],
    ):
        video_id = navigate_str(renderer, path)
        if video_id:
            return video_id
    return None


def extract_set_video_id(renderer: Any) -> str | None:
    return navigate_str(renderer, ["playlistItemData", "playlistSetVideoId"]) or navigate_str(
        renderer, ["playlistItemData", "videoId"]
    )


def extract_page_browse_id(response: Any) -> str | None:
    """Browse id of a detail page, from the response tracking params."""
    for tracking in navigate_dicts(response, ["responseContext", "serviceTrackingParams"]):
        for param in navigate_dicts(tracking, ["params"]):
            if navigate_str(param, ["key"]) == "browse_id":
                value = navigate_str(param, ["value"])
                if value:
                    return value
    return None


# Thumbnails


def parse_thumbnail(raw: Any) -> Thumbnail | None:
    """One thumbnail triple, or None when the url or a dimension is unusable."""
    url = navigate_str(raw, ["url"])
    width = navigate_int(raw, ["width"])
    height = navigate_int(raw, ["height"])
    if url is None or width is None or height is None:
        return None

    if url.startswith("//"):
        url = f"https:{url}"
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None

    return Thumbnail(url=url, width=width, height=height)


def thumbnails_from_container(container: Any) -> list[Thumbnail]:
    """Every valid thumbnail in a ``{"thumbnails": [...]}`` container, in order."""
    thumbnails = []
    for raw in navigate_dicts(container, ["thumbnails"]):
        thumbnail = parse_thumbnail(raw)
        if thumbnail is not None:
            thumbnails.append(thumbnail)
    return thumbnails


def extract_thumbnails_from_renderer(renderer: Any) -> list[Thumbnail]:
    """Thumbnails under whichever thumbnail wrapper the renderer uses."""
    for path in (
        ["musicThumbnailRenderer", "thumbnail"],
        ["thumbnail", "musicThumbnailRenderer", "thumbnail"],
        ["thumbnailRenderer", "musicThumbnailRenderer", "thumbnail"],
        ["thumbnail", "croppedSquareThumbnailRenderer", "thumbnail"],
        ["thumbnail"],
    ):
        container = navigate_dict(renderer, path)
        if container is not None and "thumbnails" in container:
            return thumbnails_from_container(container)
    return []


def extract_thumbnails(renderer: Any) -> list[Thumbnail]:
    """Thumbnails of a list item (nested under its ``thumbnail`` key)."""
    container = navigate_dict(renderer, ["thumbnail"])
    if container is None:
        return []
    return extract_thumbnails_from_renderer(container)


# Flags and small values


def extract_is_explicit(renderer: Any, key: str = "badges") -> bool:
    """True when any badge's accessibility label mentions explicit content.

    List items keep badges under ``badges``; cards and page headers use
    ``subtitleBadges`` or ``subtitleBadge``.
    """
    for badge in navigate_dicts(renderer, [key]):
        label = navigate_str(
            badge, ["musicInlineBadgeRenderer", "accessibilityData", "accessibilityData", "label"]
        )
        if label and "explicit" in label.lower():
            return True
    return False


def parse_year(text: str | None) -> str | None:
    if not text:
        return None
    candidate = text.strip()
    if _YEAR_PATTERN.fullmatch(candidate) is None:
        return None
    return candidate if MIN_YEAR <= int(candidate) <= MAX_YEAR else None


def parse_count(text: str | None) -> int | None:
    """Leading number in texts like "1,204 songs"."""
    if not text:
        return None
    match = _COUNT_PATTERN.search(text)
    if match is None:
        return None
    digits = match.group().replace(",", "").replace(".", "")
    return int(digits) if digits.isascii() and digits.isdecimal() else None


def extract_duration_text(renderer: Any) -> str | None:
    """Duration shown in the first fixed column, if it looks like one."""
    text = navigate_str(renderer, ["fixedColumns", 0, _FIXED_COLUMN, "text", "runs", 0, "text"])
    if text is None:
        text = navigate_str(renderer, ["fixedColumns", 0, _FIXED_COLUMN, "text", "simpleText"])
    return text if text and ":" in text else None


# Classification


def _words(text: str) -> set[str]:
    return set(_WORD_PATTERN.findall(text.lower()))


def _hint_from_text(text: str) -> SearchResultType:
    words = _words(text)
    if "artist" in words:
        return SearchResultType.ARTIST
    if words & {"album", "single", "ep"}:
        return SearchResultType.ALBUM
    if "song" in words:
        return SearchResultType.SONG
    return SearchResultType.UNKNOWN


def classify_search_item(renderer: Any) -> SearchResultType:
    """Decide what a mixed search result item is.

    The navigation endpoint is checked first: a browse id with the artist
    channel prefix or the album prefix, or a watch target. Only when it gives
    no answer are the column texts scanned for keywords. The first signal that
    matches decides; anything else is UNKNOWN.
    """
    endpoint = navigate_dict(renderer, ["navigationEndpoint"])
    if endpoint is not None:
        if "browseEndpoint" in endpoint:
            browse_id = navigate_str(endpoint, ["browseEndpoint", "browseId"]) or ""
            if browse_id.startswith(ARTIST_ID_PREFIX):
                return SearchResultType.ARTIST
            if browse_id.startswith(ALBUM_ID_PREFIX):
                return SearchResultType.ALBUM
        elif "watchEndpoint" in endpoint:
            return SearchResultType.SONG

    for column in navigate_dicts(renderer, ["flexColumns"]):
        text = flex_column_text(column)
        if text:
            hint = _hint_from_text(text)
            if hint is not SearchResultType.UNKNOWN:
                return hint

    return SearchResultType.UNKNOWN


# Composite fields


def parse_album_subtitle(subtitle: str | None) -> tuple[list[ArtistRef], str | None, AlbumType]:
    """Split an album subtitle such as "Album • Artist • 2023".

    Each segment is an album type keyword, a year, or else an artist name.
    Subtitle segments carry no links, so artist refs have no id.
    """
    artists: list[ArtistRef] = []
    year = None
    album_type = AlbumType.UNKNOWN

    if not subtitle:
        return artists, year, album_type

    for segment in subtitle.split(SUBTITLE_SEPARATOR.strip()):
        segment = segment.strip()
        if not segment:
            continue
        segment_type = AlbumType.from_text(segment)
        if segment_type is not AlbumType.UNKNOWN:
            album_type = segment_type
        elif parse_year(segment):
            year = segment
        else:
            artists.append(ArtistRef(id=None, name=segment))

    return artists, year, album_type


def parse_linked_runs(runs: list[dict[str, Any]]) -> tuple[list[ArtistRef], AlbumRef | None]:
    """Artist and album refs from runs that link to browse pages."""
    artists: list[ArtistRef] = []
    album = None
    for run in runs:
        text = navigate_str(run, ["text"])
        browse_id = run_browse_id(run)
        if not text or not browse_id:
            continue
        if browse_id.startswith(ARTIST_ID_PREFIX):
            artists.append(ArtistRef(id=browse_id, name=text))
        elif browse_id.startswith(ALBUM_ID_PREFIX):
            album = AlbumRef(id=browse_id, name=text)
    return artists, album


def parse_track_columns(renderer: Any) -> tuple[list[ArtistRef], AlbumRef | None, str | None]:
    """Artists, album and duration text from a track row's columns.

    The second column usually reads "Artist • Album • 3:45"; the fixed column,
    when present, holds the duration and takes precedence.
    """
    runs = flex_column_runs(renderer, 1)
    artists, album = parse_linked_runs(runs)

    duration = None
    for run in runs:
        text = navigate_str(run, ["text"])
        if text and run_browse_id(run) is None and ":" in text and len(text) <= 8:
            duration = text

    fixed = extract_duration_text(renderer)
    if fixed:
        duration = fixed

    return artists, album, duration
