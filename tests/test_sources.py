"""Unit tests for provider payload parsing."""

from __future__ import annotations

import pytest
from conftest import load_payload

from music_unify.models import ArtistSummary, SearchKind, TrackSummary
from music_unify.sources import (
    parse_lastfm_artist,
    parse_lastfm_track,
    parse_spotify_artist,
    parse_spotify_search,
    parse_spotify_top_tracks,
    parse_spotify_track,
    parse_youtube_resource,
    parse_youtube_search,
)


class TestSpotify:
    def test_track(self, spotify_track):
        assert spotify_track.id == "70LcF31zb1H0PyJoS1Sx1r"
        assert spotify_track.name == "Creep"
        assert spotify_track.duration_ms == 238640
        assert spotify_track.first_artist.name == "Radiohead"
        assert spotify_track.album is not None
        assert spotify_track.album.cover_url.endswith("df55e326ed144ab4f5cecf95")
        assert spotify_track.url == "https://open.spotify.com/track/70LcF31zb1H0PyJoS1Sx1r"

    def test_track_without_artists(self):
        track = parse_spotify_track({"id": "x", "name": "Untitled"})
        assert track is not None
        assert track.first_artist.name is None
        assert track.album is None
        assert track.url is None

    def test_wrong_leaf_type_degrades_to_none(self):
        track = parse_spotify_track({"name": "Creep", "duration_ms": "long", "album": "Pablo"})
        assert track is not None
        assert track.name == "Creep"
        assert track.duration_ms is None
        assert track.album is None

    def test_non_mapping_payload(self):
        assert parse_spotify_track(None) is None
        assert parse_spotify_track(["not", "a", "track"]) is None

    def test_artist(self, spotify_artist):
        assert spotify_artist.name == "Radiohead"
        assert spotify_artist.follower_count == 9876543
        assert spotify_artist.genres == ["alternative rock", "art rock", "melancholia"]
        assert spotify_artist.image_url is not None

    def test_artist_missing_blocks(self):
        artist = parse_spotify_artist({"name": "Radiohead", "images": None, "followers": None})
        assert artist is not None
        assert artist.image_url is None
        assert artist.follower_count is None
        assert artist.genres == []

    def test_top_tracks(self, spotify_top_tracks):
        assert [t.name for t in spotify_top_tracks] == ["Creep", "No Surprises"]

    def test_top_tracks_bare_list_and_garbage(self):
        assert len(parse_spotify_top_tracks([{"id": "a"}, "junk", {"id": "b"}])) == 2
        assert parse_spotify_top_tracks(None) == []
        assert parse_spotify_top_tracks({"tracks": None}) == []

    def test_malformed_artist_keeps_siblings(self):
        track = parse_spotify_track({"name": "Creep", "artists": [5, {"id": "a", "name": "Radiohead"}]})
        assert track is not None
        assert [a.name for a in track.artists] == ["Radiohead"]
        assert track.first_artist.name == "Radiohead"

    def test_malformed_genre_keeps_siblings(self):
        artist = parse_spotify_artist({"name": "Radiohead", "genres": ["rock", 5, None, "art rock"]})
        assert artist is not None
        assert artist.genres == ["rock", "art rock"]


class TestSpotifySearch:
    def test_tracks(self):
        rows = parse_spotify_search(load_payload("spotify_search_tracks"), SearchKind.TRACK)

        # The id-less item is skipped
        assert [row.id for row in rows] == ["70LcF31zb1H0PyJoS1Sx1r", "6KnHvVCvQcWOaV2TuRuCcm"]
        assert rows[0] == TrackSummary(
            id="70LcF31zb1H0PyJoS1Sx1r",
            name="Creep",
            artist="Radiohead",
            album="Pablo Honey",
            release_date="1993-02-22",
            image="https://i.scdn.co/image/ab67616d0000b273df55e326ed144ab4f5cecf95",
            url="https://open.spotify.com/track/70LcF31zb1H0PyJoS1Sx1r",
        )
        assert rows[1].artist == "TLC"
        assert rows[1].image is None

    def test_artists(self):
        rows = parse_spotify_search(load_payload("spotify_search_artists"), SearchKind.ARTIST)

        assert [row.name for row in rows] == ["Radiohead", "Radiohead Tribute Band"]
        assert rows[0].genres == ["alternative rock", "art rock"]
        assert rows[0].followers == 9876543
        assert rows[0].url == "https://open.spotify.com/artist/4Z8W4fKeB5YxbusRsdQVPb"
        assert rows[1] == ArtistSummary(
            id="1BxYVcWHfS4VZNXVfB0Jkg",
            name="Radiohead Tribute Band",
            genres=[],
            followers=1234,
            image=None,
            url="https://open.spotify.com/artist/1BxYVcWHfS4VZNXVfB0Jkg",
        )

    def test_to_dict_keys(self):
        rows = parse_spotify_search(load_payload("spotify_search_tracks"), SearchKind.TRACK)
        assert list(rows[0].to_dict()) == [
            "id",
            "name",
            "artist",
            "album",
            "release_date",
            "image",
            "url",
        ]

    def test_other_kind_missing(self):
        # A track search holds no artists page
        assert parse_spotify_search(load_payload("spotify_search_tracks"), SearchKind.ARTIST) == []

    @pytest.mark.parametrize(
        "payload",
        [None, [], "junk", {"tracks": None}, {"tracks": {"items": "junk"}}, {"tracks": {}}],
    )
    def test_garbage(self, payload):
        assert parse_spotify_search(payload, SearchKind.TRACK) == []

    def test_malformed_item_keeps_siblings(self):
        payload = {"tracks": {"items": [7, {"id": "a", "name": "Creep", "album": "Pablo"}]}}

        rows = parse_spotify_search(payload, SearchKind.TRACK)

        assert rows == [TrackSummary(id="a", name="Creep")]


class TestLastfm:
    def test_track_envelope(self, lastfm_track):
        assert lastfm_track.name == "Creep"
        assert lastfm_track.duration == 238000
        assert lastfm_track.listeners == 1895134
        assert lastfm_track.artist is not None
        assert lastfm_track.artist.url == "https://www.last.fm/music/Radiohead"
        assert lastfm_track.album is not None
        assert lastfm_track.album.cover_url.endswith("34s/pablohoney.png")
        assert lastfm_track.tag_names == ["alternative", "rock", "90s"]

    def test_unwrapped_track(self):
        track = parse_lastfm_track({"name": "Creep", "listeners": "10"})
        assert track is not None
        assert track.listeners == 10

    def test_error_envelope(self):
        payload = {"error": 6, "message": "Track not found", "links": []}
        assert parse_lastfm_track(payload) is None
        assert parse_lastfm_artist(payload) is None

    def test_single_tag_collapsed_to_object(self):
        track = parse_lastfm_track({"track": {"toptags": {"tag": {"name": "rock"}}}})
        assert track is not None
        assert track.tag_names == ["rock"]

    def test_empty_tag_string(self):
        track = parse_lastfm_track({"track": {"toptags": {"tag": ""}}})
        assert track is not None
        assert track.tag_names == []

    def test_artist(self, lastfm_artist):
        assert lastfm_artist.ontour == "0"
        assert lastfm_artist.stats is not None
        assert lastfm_artist.stats.playcount == 987654321
        assert [a.name for a in lastfm_artist.similar_artists] == ["Thom Yorke", "Atoms for Peace"]
        assert lastfm_artist.tag_names == ["alternative", "rock"]
        assert lastfm_artist.bio is not None
        assert lastfm_artist.bio.content.startswith("Radiohead are")

    def test_artist_without_similar(self):
        artist = parse_lastfm_artist({"artist": {"name": "Solo", "similar": {"artist": []}}})
        assert artist is not None
        assert artist.similar_artists == []


class TestYoutube:
    def test_video_detail(self, youtube_video):
        assert youtube_video.id == "XFkzRNyygfk"
        assert youtube_video.info.channel_title == "Radiohead"
        assert youtube_video.info.thumbnail_url == "https://i.ytimg.com/vi/XFkzRNyygfk/hqdefault.jpg"
        assert youtube_video.stats.view_count == 1234567890
        assert youtube_video.content_details is not None
        assert youtube_video.content_details.duration == "PT3M59S"

    def test_channel_detail(self, youtube_channel):
        assert youtube_channel.id == "UCq19-LqvG35A-30oyAiPiqA"
        assert youtube_channel.stats.subscriber_count == 4560000
        assert youtube_channel.stats.like_count is None
        assert youtube_channel.content_details is None

    def test_empty_items(self):
        assert parse_youtube_resource({"items": []}) is None

    def test_missing_blocks(self):
        resource = parse_youtube_resource({"items": [{"id": "abc"}]})
        assert resource is not None
        assert resource.info.title is None
        assert resource.info.thumbnail_url is None
        assert resource.stats.view_count is None

    def test_thumbnail_requires_high(self):
        resource = parse_youtube_resource(
            {"id": "abc", "snippet": {"thumbnails": {"default": {"url": "small.jpg"}}}}
        )
        assert resource is not None
        assert resource.info.thumbnail_url is None

    def test_search_items(self):
        items = parse_youtube_search(load_payload("youtube_video_search"))
        assert len(items) == 4
        assert items[2].id is not None
        assert items[2].id.kind == "youtube#channel"
