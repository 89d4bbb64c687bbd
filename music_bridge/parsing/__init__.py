"""Response navigation and parsing for catalog API payloads."""

from music_bridge.parsing.navigator import MISSING, first_present, is_missing, navigate
from music_bridge.parsing.response_parser import (
    parse_album_page,
    parse_artist_albums,
    parse_artist_details,
    parse_history,
    parse_library_albums,
    parse_library_artists,
    parse_library_playlists,
    parse_playlist_tracks,
    parse_search_results,
    parse_search_suggestions,
)

__all__ = [
    "MISSING",
    "first_present",
    "is_missing",
    "navigate",
    "parse_album_page",
    "parse_artist_albums",
    "parse_artist_details",
    "parse_history",
    "parse_library_albums",
    "parse_library_artists",
    "parse_library_playlists",
    "parse_playlist_tracks",
    "parse_search_results",
    "parse_search_suggestions",
]
