"""Unit tests for YouTube Music response parsing."""

import pytest

from music_bridge.models import Album, AlbumRef, AlbumType, Artist, Track
from music_bridge.parsing import (
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


def song_item(ytm, video_id, title, artist="Band", artist_id="UCband", duration="3:45", **kwargs):
    return ytm.list_item(
        title,
        subtitle=[ytm.run(artist, browse_id=artist_id), ytm.run(" • "), ytm.run(duration)],
        video_id=video_id,
        watch_endpoint=True,
        **kwargs,
    )


@pytest.mark.parametrize(
    "parse",
    [
        parse_search_results,
        parse_library_artists,
        parse_library_albums,
        parse_library_playlists,
        parse_playlist_tracks,
        parse_history,
        parse_artist_albums,
    ],
)
@pytest.mark.parametrize("response", [{}, {"contents": {"somethingNew": {}}}, {"contents": []}, None, "text"])
def test_unknown_shapes_give_empty_lists(parse, response):
    assert parse(response) == []


@pytest.mark.parametrize("parse", [parse_artist_details, parse_album_page])
@pytest.mark.parametrize("response", [{}, {"header": {"somethingNew": {}}}, None])
def test_unknown_detail_pages_give_none(parse, response):
    assert parse(response, "id") is None


class TestSearch:
    """Tests for search result parsing."""

    def test_mixed_results_in_order(self, ytm):
        response = ytm.search_page(
            [
                ytm.shelf(
                    [
                        ytm.list_item(
                            "Band",
                            subtitle=[ytm.run("Artist"), ytm.run(" • "), ytm.run("1.2M subscribers")],
                            browse_id="UCband",
                            thumbnails=ytm.thumbs((60, 60), (120, 120)),
                        ),
                        ytm.list_item(
                            "Record",
                            subtitle=[ytm.run("Album"), ytm.run(" • "), ytm.run("Band"), ytm.run(" • "), ytm.run("2021")],
                            browse_id="MPREb_rec",
                            explicit=True,
                        ),
                        song_item(ytm, "v1", "Tune"),
                    ]
                )
            ]
        )

        results = parse_search_results(response)

        assert [type(result) for result in results] == [Artist, Album, Track]
        artist, album, track = results
        assert artist.id == "UCband"
        assert artist.thumbnail_url.endswith("w120-h120")
        assert album.type is AlbumType.ALBUM
        assert album.year == "2021"
        assert album.artist_name == "Band"
        assert album.is_explicit
        assert track.video_id == "v1"
        assert track.duration_seconds == 225
        assert track.artists[0].id == "UCband"

    def test_unreadable_and_unknown_items_skipped(self, ytm):
        response = ytm.search_page(
            [
                ytm.shelf(
                    [
                        {"musicResponsiveListItemRenderer": {}},
                        {"somethingElse": {}},
                        "not an object",
                        ytm.list_item("Deep Purple", subtitle=[ytm.run("Sleepy")]),
                        song_item(ytm, "v2", "Kept"),
                    ]
                ),
                {"itemSectionRenderer": {}},
            ]
        )

        results = parse_search_results(response)

        assert [result.title for result in results] == ["Kept"]

    def test_non_ascii_year_leaves_album_without_year(self, ytm):
        response = ytm.search_page(
            [
                ytm.shelf(
                    [
                        ytm.list_item(
                            "Odd",
                            subtitle=[ytm.run("Album"), ytm.run(" • "), ytm.run("¹²³⁴")],
                            browse_id="MPREb_odd",
                        ),
                        song_item(ytm, "v3", "After"),
                    ]
                )
            ]
        )

        album, track = parse_search_results(response)

        assert album.id == "MPREb_odd"
        assert album.year is None
        assert track.video_id == "v3"

    def test_filtered_layout(self, ytm):
        response = {"contents": {"sectionListRenderer": {"contents": [ytm.shelf([song_item(ytm, "v1", "Tune")])]}}}
        assert [result.video_id for result in parse_search_results(response)] == ["v1"]

    def test_suggestions(self):
        response = {
            "contents": [
                {
                    "searchSuggestionsSectionRenderer": {
                        "contents": [
                            {"searchSuggestionRenderer": {"suggestion": {"runs": [{"text": "daft"}, {"text": " punk"}]}}},
                            {"historySuggestionRenderer": {}},
                        ]
                    }
                }
            ]
        }
        assert parse_search_suggestions(response) == ["daft punk"]


class TestLibrary:
    """Tests for library listing parsing."""

    def test_artists_from_shelf(self, ytm):
        response = ytm.single_column(
            [ytm.shelf([ytm.list_item("Band", subtitle=[ytm.run("12 songs")], browse_id="UCband"), {"x": 1}])]
        )

        artists = parse_library_artists(response)

        assert [(artist.id, artist.name) for artist in artists] == [("UCband", "Band")]

    def test_albums_from_grid(self, ytm):
        card = ytm.two_row_item(
            "Record",
            "MPREb_rec",
            subtitle=[ytm.run("EP"), ytm.run(" • "), ytm.run("Band", browse_id="UCband"), ytm.run(" • "), ytm.run("2019")],
            thumbnails=ytm.thumbs((226, 226), (544, 544)),
        )
        response = ytm.single_column([{"gridRenderer": {"items": [card]}}])

        albums = parse_library_albums(response)

        assert len(albums) == 1
        album = albums[0]
        assert album.type is AlbumType.EP
        assert album.year == "2019"
        assert [(a.id, a.name) for a in album.artists] == [("UCband", "Band")]
        assert album.thumbnail_url.endswith("w544-h544")

    def test_playlists(self, ytm):
        card = ytm.two_row_item(
            "Road Trip",
            "VLPL123",
            subtitle=[ytm.run("Someone", browse_id="UCsomeone"), ytm.run(" • "), ytm.run("1,204 songs")],
        )
        response = ytm.single_column([{"gridRenderer": {"items": [card]}}])

        playlists = parse_library_playlists(response)

        assert len(playlists) == 1
        assert playlists[0].track_count == 1204
        assert playlists[0].author.name == "Someone"

    def test_playlist_tracks(self, ytm):
        greyed = song_item(ytm, "v2", "Gone")
        greyed["musicResponsiveListItemRenderer"]["musicItemRendererDisplayPolicy"] = (
            "MUSIC_ITEM_RENDERER_DISPLAY_POLICY_GREY_OUT"
        )
        response = ytm.single_column(
            [{"musicPlaylistShelfRenderer": {"contents": [song_item(ytm, "v1", "Tune", set_video_id="s1"), greyed]}}]
        )

        tracks = parse_playlist_tracks(response)

        assert [track.video_id for track in tracks] == ["v1", "v2"]
        assert tracks[0].set_video_id == "s1"
        assert tracks[0].is_available
        assert not tracks[1].is_available

    def test_history_spans_shelves(self, ytm):
        response = ytm.single_column(
            [ytm.shelf([song_item(ytm, "v1", "Today")]), ytm.shelf([song_item(ytm, "v2", "Yesterday")])]
        )
        assert [track.title for track in parse_history(response)] == ["Today", "Yesterday"]


def artist_page(ytm, carousel_items):
    return ytm.single_column(
        [{"musicCarouselShelfRenderer": {"contents": carousel_items}}],
        header={
            "musicImmersiveHeaderRenderer": {
                "title": {"runs": [{"text": "Band"}]},
                "description": {"runs": [{"text": "A band."}]},
                "thumbnail": {"musicThumbnailRenderer": {"thumbnail": ytm.thumbs((540, 540))}},
                "subscriptionButton": {
                    "subscribeButtonRenderer": {"subscriberCountText": {"runs": [{"text": "1.2M"}]}}
                },
                "startRadioButton": {
                    "buttonRenderer": {"navigationEndpoint": {"watchEndpoint": {"playlistId": "RDband"}}}
                },
            }
        },
        responseContext=ytm.tracking_params("UCband"),
    )


class TestArtistPage:
    """Tests for artist page parsing."""

    def test_details(self, ytm):
        artist = parse_artist_details(artist_page(ytm, []), fallback_id="UCrequested")

        assert artist.id == "UCband"
        assert artist.name == "Band"
        assert artist.subscriber_count == "1.2M"
        assert artist.description == "A band."
        assert artist.radio_id == "RDband"
        assert artist.thumbnail_url is not None
        assert artist.album_count is None

    def test_fallback_id_without_tracking_params(self, ytm):
        response = artist_page(ytm, [])
        del response["responseContext"]

        assert parse_artist_details(response, fallback_id="UCrequested").id == "UCrequested"
        assert parse_artist_details(response) is None

    def test_visual_header(self):
        response = {"header": {"musicVisualHeaderRenderer": {"title": {"runs": [{"text": "Band"}]}}}}
        assert parse_artist_details(response, "UCband") == Artist(id="UCband", name="Band")

    def test_albums_inherit_page_artist(self, ytm):
        items = [
            ytm.two_row_item("First", "MPREb_1", subtitle=[ytm.run("Album"), ytm.run(" • "), ytm.run("2010")]),
            ytm.two_row_item("Video", "VLvideo"),
            ytm.two_row_item(
                "Collab", "MPREb_2", subtitle=[ytm.run("Other", browse_id="UCother"), ytm.run(" • "), ytm.run("2012")]
            ),
        ]

        albums = parse_artist_albums(artist_page(ytm, items), fallback_id="UCband")

        assert [album.id for album in albums] == ["MPREb_1", "MPREb_2"]
        assert albums[0].artists[0].id == "UCband"
        assert albums[1].artists[0].id == "UCother"

    def test_album_count_from_readable_discography(self, ytm):
        items = [
            ytm.two_row_item("First", "MPREb_1"),
            {"musicTwoRowItemRenderer": {"navigationEndpoint": {"browseEndpoint": {"browseId": "MPREb_broken"}}}},
            ytm.two_row_item("Second", "MPREb_2"),
        ]

        artist = parse_artist_details(artist_page(ytm, items))

        assert artist.album_count == 2


def album_page(ytm, tracks, **header_extra):
    header = {
        "title": {"runs": [{"text": "Record"}]},
        "subtitle": {
            "runs": [
                {"text": "Album"},
                {"text": " • "},
                ytm.run("Band", browse_id="UCband"),
                {"text": " • "},
                {"text": "2021"},
            ]
        },
        "secondSubtitle": {"runs": [{"text": "2 songs"}, {"text": " • "}, {"text": "7 minutes"}]},
        "thumbnail": {"croppedSquareThumbnailRenderer": {"thumbnail": ytm.thumbs((544, 544))}},
        **header_extra,
    }
    return ytm.single_column(
        [ytm.shelf(tracks)],
        header={"musicDetailHeaderRenderer": header},
        microformat={"microformatDataRenderer": {"urlCanonical": "https://music.youtube.com/playlist?list=OLAK5uy_x"}},
    )


class TestAlbumPage:
    """Tests for album page parsing."""

    def test_header_and_tracks(self, ytm):
        tracks = [
            ytm.list_item("One", video_id="v1", duration="3:00"),
            ytm.list_item("Two", video_id="v2", duration="4:00", explicit=True),
        ]

        detail = parse_album_page(album_page(ytm, tracks), fallback_id="MPREb_rec")

        album = detail.album
        assert album.id == "MPREb_rec"
        assert album.title == "Record"
        assert album.type is AlbumType.ALBUM
        assert album.year == "2021"
        assert album.track_count == 2
        assert album.duration == "7 minutes"
        assert album.playlist_id == "OLAK5uy_x"
        assert [(a.id, a.name) for a in album.artists] == [("UCband", "Band")]

        assert [track.track_number for track in detail.tracks] == [1, 2]
        assert detail.tracks[1].is_explicit
        assert all(track.album == AlbumRef(id="MPREb_rec", name="Record") for track in detail.tracks)
        assert all(track.artist_name == "Band" for track in detail.tracks)

    def test_single_type_and_derived_track_count(self, ytm):
        response = album_page(ytm, [ytm.list_item("Only", video_id="v1")])
        header = response["header"]["musicDetailHeaderRenderer"]
        header["subtitle"]["runs"][0] = {"text": "Single"}
        del header["secondSubtitle"]

        album = parse_album_page(response, "MPREb_1").album

        assert album.type is AlbumType.SINGLE
        assert album.track_count == 1

    def test_unreadable_tracks_keep_numbering(self, ytm):
        tracks = [
            ytm.list_item("One", video_id="v1"),
            {"musicResponsiveListItemRenderer": {}},
            ytm.list_item("Three", video_id="v3"),
        ]

        detail = parse_album_page(album_page(ytm, tracks), "MPREb_rec")

        assert [(track.title, track.track_number) for track in detail.tracks] == [("One", 1), ("Three", 3)]
