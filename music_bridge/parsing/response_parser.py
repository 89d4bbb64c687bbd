"""Parses YouTube Music API responses into domain records.

The catalog's internal API returns deeply nested renderer trees. Listing
responses typically look like::

    {
      "contents": {
        "singleColumnBrowseResultsRenderer": {
          "tabs": [{"tabRenderer": {"content": {"sectionListRenderer": {
            "contents": [{"musicShelfRenderer": {"contents": [...]}}]
          }}}}]
        }
      }
    }

Listing parsers return an empty list when no known shape matches and skip
items that cannot be read; detail parsers return None. Nothing in this module
raises for untrusted input.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import ValidationError

from music_bridge.logging_config import get_logger, log_with_context
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
    Track,
)
from music_bridge.parsing import extractors as ex
from music_bridge.parsing.navigator import (
    first_present,
    navigate,
    navigate_dict,
    navigate_dicts,
    navigate_str,
)

logger = get_logger(__name__)

T = TypeVar("T")

LIST_ITEM = "musicResponsiveListItemRenderer"
TWO_ROW_ITEM = "musicTwoRowItemRenderer"

_SINGLE_COLUMN_SECTIONS = [
    "contents",
    "singleColumnBrowseResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
    "contents",
]
_TWO_COLUMN_SECTIONS = [
    "contents",
    "twoColumnBrowseResultsRenderer",
    "secondaryContents",
    "sectionListRenderer",
    "contents",
]
_TWO_COLUMN_HEADER = [
    "contents",
    "twoColumnBrowseResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
    "contents",
    0,
    "musicResponsiveHeaderRenderer",
]
_SEARCH_SECTIONS = [
    "contents",
    "tabbedSearchResultsRenderer",
    "tabs",
    0,
    "tabRenderer",
    "content",
    "sectionListRenderer",
    "contents",
]
_FILTERED_SEARCH_SECTIONS = ["contents", "sectionListRenderer", "contents"]


# Helpers


def _collect(items: Iterable[Any], parse: Callable[[Any], T | None], kind: str) -> list[T]:
    """Parse items in order, skipping any that are unreadable."""
    results: list[T] = []
    skipped = 0
    for item in items:
        try:
            parsed = parse(item)
        except ValidationError:
            parsed = None
        if parsed is None:
            skipped += 1
            continue
        results.append(parsed)

    if skipped:
        log_with_context(
            logger,
            "debug",
            "Skipped unreadable items",
            kind=kind,
            skipped=skipped,
            parsed=len(results),
            event_type="parse_items_skipped",
        )
    return results


def _unrecognized(kind: str) -> None:
    log_with_context(
        logger,
        "info",
        "Response shape not recognized",
        kind=kind,
        event_type="parse_shape_unrecognized",
    )


def _sections(response: Any) -> list[dict[str, Any]] | None:
    """Section list of a browse page, single- or two-column layout."""
    for path in (_SINGLE_COLUMN_SECTIONS, _TWO_COLUMN_SECTIONS):
        if isinstance(navigate(response, path), list):
            return navigate_dicts(response, path)
    return None


def _shelf_items(sections: list[dict[str, Any]]) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for section in sections:
        items.extend(navigate_dicts(section, ["musicShelfRenderer", "contents"]))
    return items


def _library_items(response: Any) -> list[dict[str, Any]] | None:
    """Items of the first library section, list or grid layout."""
    found = first_present(
        response,
        [*_SINGLE_COLUMN_SECTIONS, 0, "musicShelfRenderer", "contents"],
        [*_SINGLE_COLUMN_SECTIONS, 0, "gridRenderer", "items"],
    )
    if not isinstance(found, list):
        return None
    return [item for item in found if isinstance(item, dict)]


# Item parsers


def parse_artist_item(renderer: dict[str, Any]) -> Artist | None:
    """Artist from a list row (search results, library)."""
    browse_id = ex.extract_browse_id(renderer)
    name = ex.extract_title(renderer)
    if not browse_id or not name:
        return None
    return Artist(
        id=browse_id,
        name=name,
        subscriber_count=ex.extract_subtitle(renderer),
        thumbnails=ex.extract_thumbnails(renderer),
    )


def parse_artist_card(renderer: dict[str, Any]) -> Artist | None:
    """Artist from a two-row grid card."""
    browse_id = ex.extract_browse_id(renderer)
    name = ex.extract_two_row_title(renderer)
    if not browse_id or not name:
        return None
    return Artist(
        id=browse_id,
        name=name,
        subscriber_count=ex.extract_two_row_subtitle(renderer),
        thumbnails=ex.extract_thumbnails_from_renderer(renderer),
    )


def parse_album_item(renderer: dict[str, Any]) -> Album | None:
    """Album from a list row; type, artists and year come from the subtitle."""
    browse_id = ex.extract_browse_id(renderer)
    title = ex.extract_title(renderer)
    if not browse_id or not title:
        return None
    artists, year, album_type = ex.parse_album_subtitle(ex.extract_subtitle(renderer))
    return Album(
        id=browse_id,
        title=title,
        type=album_type,
        artists=artists,
        year=year,
        thumbnails=ex.extract_thumbnails(renderer),
        is_explicit=ex.extract_is_explicit(renderer),
    )


def parse_album_card(renderer: dict[str, Any]) -> Album | None:
    """Album from a two-row card (library grid, artist discography carousel)."""
    browse_id = ex.extract_browse_id(renderer)
    title = ex.extract_two_row_title(renderer)
    if not browse_id or not title:
        return None
    artists, year, album_type = ex.parse_album_subtitle(ex.extract_two_row_subtitle(renderer))
    linked_artists, _ = ex.parse_linked_runs(navigate_dicts(renderer, ["subtitle", "runs"]))
    if linked_artists:
        artists = linked_artists
    return Album(
        id=browse_id,
        title=title,
        type=album_type,
        artists=artists,
        year=year,
        thumbnails=ex.extract_thumbnails_from_renderer(renderer),
        is_explicit=ex.extract_is_explicit(renderer, "subtitleBadges"),
        audio_playlist_id=navigate_str(
            renderer,
            ["thumbnailOverlay", "musicItemThumbnailOverlayRenderer", "content", "musicPlayButtonRenderer",
             "playNavigationEndpoint", "watchPlaylistEndpoint", "playlistId"],
        ),
    )


def parse_track_item(
    renderer: dict[str, Any],
    track_number: int | None = None,
    album: AlbumRef | None = None,
) -> Track | None:
    """Track from a list row (search, playlists, history, album pages)."""
    video_id = ex.extract_video_id(renderer)
    title = ex.extract_title(renderer)
    if not video_id or not title:
        return None

    artists, column_album, duration = ex.parse_track_columns(renderer)
    return Track(
        video_id=video_id,
        title=title,
        artists=artists,
        album=column_album or album,
        duration=duration,
        thumbnails=ex.extract_thumbnails(renderer),
        is_explicit=ex.extract_is_explicit(renderer),
        is_available=navigate_str(renderer, ["musicItemRendererDisplayPolicy"])
        != "MUSIC_ITEM_RENDERER_DISPLAY_POLICY_GREY_OUT",
        track_number=track_number,
        set_video_id=ex.extract_set_video_id(renderer),
    )


def parse_playlist_card(renderer: dict[str, Any]) -> Playlist | None:
    """Playlist from a two-row grid card."""
    browse_id = ex.extract_browse_id(renderer)
    title = ex.extract_two_row_title(renderer)
    if not browse_id or not title:
        return None

    track_count = None
    author = None
    for run in navigate_dicts(renderer, ["subtitle", "runs"]):
        text = navigate_str(run, ["text"])
        if not text:
            continue
        lowered = text.lower()
        author_id = ex.run_browse_id(run)
        if "song" in lowered or "track" in lowered:
            track_count = ex.parse_count(text)
        elif author_id:
            author = ArtistRef(id=author_id, name=text)

    return Playlist(
        id=browse_id,
        title=title,
        track_count=track_count,
        thumbnails=ex.extract_thumbnails_from_renderer(renderer),
        author=author,
    )


def _list_item(item: dict[str, Any]) -> dict[str, Any] | None:
    return navigate_dict(item, [LIST_ITEM])


def parse_search_item(item: dict[str, Any]) -> SearchResult | None:
    """One mixed search result; UNKNOWN and unsupported kinds are dropped."""
    renderer = _list_item(item)
    if renderer is None:
        return None

    result_type = ex.classify_search_item(renderer)
    if result_type is SearchResultType.ARTIST:
        return parse_artist_item(renderer)
    if result_type is SearchResultType.ALBUM:
        return parse_album_item(renderer)
    if result_type is SearchResultType.SONG:
        return parse_track_item(renderer)
    return None


# Search


def parse_search_results(response: Any) -> list[SearchResult]:
    """Mixed artists, albums and tracks, in the order they appear."""
    sections = first_present(response, _SEARCH_SECTIONS, _FILTERED_SEARCH_SECTIONS)
    if not isinstance(sections, list):
        _unrecognized("search")
        return []
    items = _shelf_items([section for section in sections if isinstance(section, dict)])
    return _collect(items, parse_search_item, "search")


def parse_search_suggestions(response: Any) -> list[str]:
    """Plain-text query suggestions."""
    suggestions: list[str] = []
    for section in navigate_dicts(response, ["contents"]):
        for entry in navigate_dicts(section, ["searchSuggestionsSectionRenderer", "contents"]):
            text = ex.join_runs(navigate(entry, ["searchSuggestionRenderer", "suggestion"]))
            if text:
                suggestions.append(text)
    return suggestions


# Library


def parse_library_artists(response: Any) -> list[Artist]:
    items = _library_items(response)
    if items is None:
        _unrecognized("library_artists")
        return []

    def parse(item: dict[str, Any]) -> Artist | None:
        if (renderer := _list_item(item)) is not None:
            return parse_artist_item(renderer)
        if (card := navigate_dict(item, [TWO_ROW_ITEM])) is not None:
            return parse_artist_card(card)
        return None

    return _collect(items, parse, "library_artists")


def parse_library_albums(response: Any) -> list[Album]:
    items = _library_items(response)
    if items is None:
        _unrecognized("library_albums")
        return []

    def parse(item: dict[str, Any]) -> Album | None:
        if (card := navigate_dict(item, [TWO_ROW_ITEM])) is not None:
            return parse_album_card(card)
        if (renderer := _list_item(item)) is not None:
            return parse_album_item(renderer)
        return None

    return _collect(items, parse, "library_albums")


def parse_library_playlists(response: Any) -> list[Playlist]:
    items = _library_items(response)
    if items is None:
        _unrecognized("library_playlists")
        return []

    def parse(item: dict[str, Any]) -> Playlist | None:
        card = navigate_dict(item, [TWO_ROW_ITEM])
        return parse_playlist_card(card) if card is not None else None

    return _collect(items, parse, "library_playlists")


def parse_playlist_tracks(response: Any) -> list[Track]:
    """Tracks of a playlist page such as liked songs."""
    sections = _sections(response)
    first = sections[0] if sections else None
    items = first_present(
        first,
        ["musicPlaylistShelfRenderer", "contents"],
        ["musicShelfRenderer", "contents"],
    )
    if not isinstance(items, list):
        _unrecognized("playlist_tracks")
        return []

    def parse(item: dict[str, Any]) -> Track | None:
        renderer = _list_item(item)
        return parse_track_item(renderer) if renderer is not None else None

    return _collect((item for item in items if isinstance(item, dict)), parse, "playlist_tracks")


def parse_history(response: Any) -> list[Track]:
    """Play history; the page groups tracks into one shelf per day."""
    sections = _sections(response)
    if sections is None:
        _unrecognized("history")
        return []

    def parse(item: dict[str, Any]) -> Track | None:
        renderer = _list_item(item)
        return parse_track_item(renderer) if renderer is not None else None

    return _collect(_shelf_items(sections), parse, "history")


# Artist pages


def _artist_header(response: Any) -> tuple[dict[str, Any], bool] | None:
    immersive = navigate_dict(response, ["header", "musicImmersiveHeaderRenderer"])
    if immersive is not None:
        return immersive, True
    visual = navigate_dict(response, ["header", "musicVisualHeaderRenderer"])
    if visual is not None:
        return visual, False
    return None


def _discography_cards(response: Any) -> list[dict[str, Any]] | None:
    """Album cards from the carousels on an artist page, None for other layouts."""
    sections = _sections(response)
    if sections is None:
        return None
    cards = []
    for section in sections:
        for item in navigate_dicts(section, ["musicCarouselShelfRenderer", "contents"]):
            card = navigate_dict(item, [TWO_ROW_ITEM])
            if card is not None and (ex.extract_browse_id(card) or "").startswith(ex.ALBUM_ID_PREFIX):
                cards.append(card)
    return cards


def _parse_artist_header(response: Any, fallback_id: str | None, album_count: int | None) -> Artist | None:
    found = _artist_header(response)
    if found is None:
        _unrecognized("artist_details")
        return None
    header, immersive = found

    name = ex.first_run_text(navigate(header, ["title"]))
    browse_id = ex.extract_page_browse_id(response) or fallback_id
    if not name or not browse_id:
        return None

    if not immersive:
        return Artist(
            id=browse_id,
            name=name,
            thumbnails=ex.extract_thumbnails_from_renderer(header),
            album_count=album_count,
        )

    subscriber_count = first_present(
        header,
        ["subscriptionButton", "subscribeButtonRenderer", "subscriberCountText", "runs", 0, "text"],
        ["subscriptionButton", "subscriberCountText", "runs", 0, "text"],
    )
    return Artist(
        id=browse_id,
        name=name,
        subscriber_count=subscriber_count if isinstance(subscriber_count, str) else None,
        thumbnails=ex.extract_thumbnails_from_renderer(header),
        description=ex.join_runs(navigate(header, ["description"])),
        album_count=album_count,
        radio_id=navigate_str(
            header, ["startRadioButton", "buttonRenderer", "navigationEndpoint", "watchEndpoint", "playlistId"]
        ),
        shuffle_id=navigate_str(
            header, ["playButton", "buttonRenderer", "navigationEndpoint", "watchEndpoint", "playlistId"]
        ),
    )


def parse_artist_details(response: Any, fallback_id: str | None = None) -> Artist | None:
    """Artist page header.

    The id comes from the page tracking params, else ``fallback_id`` (the id
    the page was requested with). Returns None without an id and a name.
    ``album_count`` is the number of readable albums shown on the page.
    """
    cards = _discography_cards(response)
    albums = _collect(cards, parse_album_card, "artist_albums") if cards else []
    return _parse_artist_header(response, fallback_id, len(albums) or None)


def parse_artist_albums(response: Any, fallback_id: str | None = None) -> list[Album]:
    """Discography cards from the carousels on an artist page.

    Cards on an artist page do not name the artist, so the page's artist is
    attached to every album that lists none.
    """
    cards = _discography_cards(response)
    if cards is None:
        _unrecognized("artist_albums")
        return []

    albums = _collect(cards, parse_album_card, "artist_albums")
    artist = _parse_artist_header(response, fallback_id, len(albums) or None)
    if artist is None:
        return albums
    return [album if album.artists else album.model_copy(update={"artists": [artist.as_ref]}) for album in albums]


# Album pages


def _album_header(response: Any) -> dict[str, Any] | None:
    header = navigate_dict(response, ["header", "musicDetailHeaderRenderer"])
    if header is not None:
        return header
    return navigate_dict(response, _TWO_COLUMN_HEADER)


def _album_playlist_id(header: dict[str, Any], response: Any) -> str | None:
    for item in navigate_dicts(header, ["menu", "menuRenderer", "items"]):
        playlist_id = navigate_str(
            item, ["menuServiceItemRenderer", "serviceEndpoint", "queueAddEndpoint", "queueTarget", "playlistId"]
        )
        if playlist_id:
            return playlist_id
    found = navigate(response, ["microformat", "microformatDataRenderer", "urlCanonical"])
    if isinstance(found, str) and "list=" in found:
        return found.split("list=", 1)[1].split("&", 1)[0] or None
    return None


def parse_album_details(response: Any, fallback_id: str | None = None) -> Album | None:
    """Album page header: title, linked artists, type, year, counts, playlist id."""
    header = _album_header(response)
    if header is None:
        _unrecognized("album_details")
        return None

    title = ex.first_run_text(navigate(header, ["title"]))
    browse_id = ex.extract_page_browse_id(response) or fallback_id
    if not title or not browse_id:
        return None

    artists, _ = ex.parse_linked_runs(
        navigate_dicts(header, ["subtitle", "runs"]) + navigate_dicts(header, ["straplineTextOne", "runs"])
    )
    year = None
    album_type = AlbumType.ALBUM
    for run in navigate_dicts(header, ["subtitle", "runs"]):
        text = navigate_str(run, ["text"])
        if not text or ex.run_browse_id(run):
            continue
        run_type = AlbumType.from_text(text)
        if run_type is not AlbumType.UNKNOWN:
            album_type = run_type
        elif ex.parse_year(text):
            year = text.strip()

    track_count = None
    duration = None
    secondary = first_present(header, ["secondSubtitle"], ["secondarySubtitle"])
    for run in navigate_dicts(secondary, ["runs"]):
        text = navigate_str(run, ["text"]) or ""
        lowered = text.lower()
        if "song" in lowered or "track" in lowered:
            track_count = ex.parse_count(text)
        elif "min" in lowered or "hour" in lowered:
            duration = text

    return Album(
        id=browse_id,
        title=title,
        type=album_type,
        artists=artists,
        year=year,
        track_count=track_count,
        duration=duration,
        thumbnails=ex.extract_thumbnails_from_renderer(header),
        is_explicit=ex.extract_is_explicit(header, "subtitleBadge"),
        playlist_id=_album_playlist_id(header, response),
    )


def parse_album_tracks(response: Any, album: AlbumRef | None = None) -> list[Track]:
    """Tracks of an album page, numbered by position within their shelf."""
    sections = _sections(response)
    if sections is None:
        _unrecognized("album_tracks")
        return []

    tracks: list[Track] = []
    for section in sections:
        items = navigate_dicts(section, ["musicShelfRenderer", "contents"])
        numbered = list(enumerate(items, start=1))

        def parse(entry: tuple[int, dict[str, Any]]) -> Track | None:
            number, item = entry
            renderer = _list_item(item)
            return parse_track_item(renderer, track_number=number, album=album) if renderer is not None else None

        tracks.extend(_collect(numbered, parse, "album_tracks"))
    return tracks


def parse_album_page(response: Any, fallback_id: str | None = None) -> AlbumDetail | None:
    """Album header plus tracks. Tracks listing no artist inherit the album's."""
    album = parse_album_details(response, fallback_id)
    if album is None:
        return None

    tracks = parse_album_tracks(response, album.as_ref)
    if album.artists:
        tracks = [
            track if track.artists else track.model_copy(update={"artists": list(album.artists)}) for track in tracks
        ]
    track_count = album.track_count or len(tracks) or None
    return AlbumDetail(album=album.model_copy(update={"track_count": track_count}), tracks=tracks)
