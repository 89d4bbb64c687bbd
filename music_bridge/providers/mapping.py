"""Conversion of YouTube Music records to provider-neutral catalog items.

Browse ids become item ids and video ids become track ids. Links back to
music.youtube.com and the ids needed for playback go into ``external_urls``.
"""

from collections.abc import Sequence

from music_bridge.models.catalog import Album, AlbumType, Artist, ArtistRef, Playlist, SearchResult, Track
from music_bridge.models.items import TICKS_PER_SECOND, CatalogItem, ItemKind, NameIdPair

PROVIDER_ID = "youtube-music"
SITE_URL = "https://music.youtube.com"
EXPLICIT_TAG = "Explicit"


def _name_id_pairs(refs: list[ArtistRef]) -> list[NameIdPair]:
    return [NameIdPair(id=ref.id, name=ref.name) for ref in refs]


def _year(text: str | None) -> int | None:
    return int(text) if text and text.isascii() and text.isdecimal() else None


def artist_to_item(artist: Artist) -> CatalogItem:
    return CatalogItem(
        id=artist.id,
        name=artist.name,
        kind=ItemKind.MUSIC_ARTIST,
        provider_id=PROVIDER_ID,
        overview=artist.description,
        taglines=[artist.subscriber_count] if artist.subscriber_count else [],
        child_count=artist.album_count,
        image_url=artist.thumbnail_url,
        external_urls={"youtube_music": f"{SITE_URL}/channel/{artist.id}"},
    )


def album_to_item(album: Album) -> CatalogItem:
    external_urls = {"youtube_music": f"{SITE_URL}/browse/{album.id}"}
    if album.playlist_id:
        external_urls["playlistId"] = album.playlist_id
    if album.audio_playlist_id:
        external_urls["audioPlaylistId"] = album.audio_playlist_id

    return CatalogItem(
        id=album.id,
        name=album.title,
        kind=ItemKind.MUSIC_ALBUM,
        provider_id=PROVIDER_ID,
        taglines=[album.duration] if album.duration else [],
        genres=[album.type.value] if album.type is not AlbumType.UNKNOWN else [],
        tags=[EXPLICIT_TAG] if album.is_explicit else [],
        production_year=_year(album.year),
        album_artist=album.artist_name,
        album_artists=_name_id_pairs(album.artists),
        child_count=album.track_count,
        image_url=album.thumbnail_url,
        external_urls=external_urls,
    )


def track_to_item(track: Track) -> CatalogItem:
    external_urls = {
        "videoId": track.video_id,
        "youtube_music": f"{SITE_URL}/watch?v={track.video_id}",
    }
    if track.set_video_id:
        external_urls["setVideoId"] = track.set_video_id

    return CatalogItem(
        id=track.video_id,
        name=track.title,
        kind=ItemKind.AUDIO,
        provider_id=PROVIDER_ID,
        tags=[EXPLICIT_TAG] if track.is_explicit else [],
        artists=[ref.name for ref in track.artists],
        artist_items=_name_id_pairs(track.artists),
        album=track.album.name if track.album else None,
        album_id=track.album.id if track.album else None,
        index_number=track.track_number,
        run_time_ticks=track.duration_seconds * TICKS_PER_SECOND if track.duration_seconds is not None else None,
        image_url=track.thumbnail_url,
        external_urls=external_urls,
    )


def playlist_to_item(playlist: Playlist) -> CatalogItem:
    return CatalogItem(
        id=playlist.id,
        name=playlist.title,
        kind=ItemKind.PLAYLIST,
        provider_id=PROVIDER_ID,
        overview=playlist.description,
        taglines=[playlist.duration] if playlist.duration else [],
        production_year=_year(playlist.year),
        album_artist=playlist.author.name if playlist.author else None,
        album_artists=_name_id_pairs([playlist.author]) if playlist.author else [],
        child_count=playlist.track_count,
        image_url=playlist.thumbnail_url,
        external_urls={"youtube_music": f"{SITE_URL}/playlist?list={playlist.id}"},
    )


def to_item(record: SearchResult | Playlist) -> CatalogItem:
    """Map any catalog record to a catalog item."""
    if isinstance(record, Artist):
        return artist_to_item(record)
    if isinstance(record, Album):
        return album_to_item(record)
    if isinstance(record, Track):
        return track_to_item(record)
    return playlist_to_item(record)


def to_items(records: Sequence[SearchResult | Playlist]) -> list[CatalogItem]:
    return [to_item(record) for record in records]
