"""Unit tests for field-level unification."""

from __future__ import annotations

import pytest

from music_unify.models import FieldValue, Source, TopTrack
from music_unify.sources import (
    LastfmTrack,
    SpotifyTrack,
    YoutubeResource,
    parse_lastfm_artist,
    parse_lastfm_track,
    parse_spotify_track,
    parse_youtube_resource,
)
from music_unify.unify import (
    ARTIST_PRECEDENCE,
    TRACK_PRECEDENCE,
    FieldCategory,
    first_present,
    is_present,
    pick,
    unify_artist,
    unify_track,
)


class TestPrecedence:
    def test_first_present_skips_missing(self):
        result = first_present([(None, Source.SPOTIFY), ("", Source.LASTFM), ("x", Source.YOUTUBE)])
        assert result == FieldValue("x", Source.YOUTUBE)

    def test_nothing_present(self):
        result = first_present([(None, Source.SPOTIFY), ([], Source.LASTFM)])
        assert result.is_absent
        assert result.source == Source.NONE

    def test_falsy_scalars_are_present(self):
        assert is_present(0)
        assert is_present(False)
        assert not is_present([])
        assert not is_present("")

    def test_pick_follows_table_order(self):
        values = {Source.YOUTUBE: "yt", Source.LASTFM: "lfm"}
        assert pick(TRACK_PRECEDENCE, FieldCategory.NAME, values) == FieldValue(
            "lfm", Source.LASTFM
        )

    def test_pick_ignores_sources_outside_table(self):
        # Album never comes from YouTube
        values = {Source.YOUTUBE: "Some Upload"}
        assert pick(TRACK_PRECEDENCE, FieldCategory.ALBUM, values).is_absent

    def test_custom_table(self):
        table = {FieldCategory.NAME: (Source.YOUTUBE, Source.SPOTIFY)}
        values = {Source.SPOTIFY: "Creep", Source.YOUTUBE: "Radiohead - Creep"}
        assert pick(table, FieldCategory.NAME, values).source == Source.YOUTUBE

    def test_artist_genres_order(self):
        assert ARTIST_PRECEDENCE[FieldCategory.GENRES] == (Source.SPOTIFY, Source.LASTFM)


class TestUnifyTrack:
    def test_full_track(self, spotify_track, lastfm_track, youtube_video):
        track = unify_track(spotify_track, lastfm_track, youtube_video)

        assert track.id == FieldValue("70LcF31zb1H0PyJoS1Sx1r", Source.SPOTIFY)
        assert track.title == FieldValue("Creep", Source.SPOTIFY)
        assert track.artist.name == FieldValue("Radiohead", Source.SPOTIFY)
        assert track.artist.lastfm_url.value == "https://www.last.fm/music/Radiohead"
        assert track.album.name == FieldValue("Pablo Honey", Source.SPOTIFY)
        assert track.album.release_date.value == "1993-02-22"
        assert track.album.youtube_thumbnail_url.source == Source.YOUTUBE
        assert track.duration == FieldValue("03:58", Source.SPOTIFY)
        assert track.popularity.spotify == FieldValue(84, Source.SPOTIFY)
        assert track.popularity.lastfm_listeners == FieldValue("1,895,134", Source.LASTFM)
        assert track.popularity.lastfm_playcount.value == "16,573,218"
        assert track.popularity.youtube_views == FieldValue("1,234,567,890", Source.YOUTUBE)
        assert track.popularity.youtube_likes.value == "8,765,432"
        assert track.popularity.youtube_comments.value == "345,678"
        assert track.urls.youtube_video == FieldValue(
            "https://www.youtube.com/watch?v=XFkzRNyygfk", Source.YOUTUBE
        )
        assert track.genres == FieldValue(["alternative", "rock", "90s"], Source.LASTFM)
        assert track.description == FieldValue(
            "Creep is the debut single by the English rock band Radiohead.", Source.LASTFM
        )

    def test_primary_title_wins_over_secondary(self):
        spotify = parse_spotify_track({"name": "Song A"})
        lastfm = parse_lastfm_track({"name": "song a (live)"})

        track = unify_track(spotify, lastfm, None)

        assert track.title == FieldValue("Song A", Source.SPOTIFY)

    def test_falls_back_when_primary_field_missing(self):
        spotify = parse_spotify_track({"id": "x"})
        lastfm = parse_lastfm_track({"name": "Creep", "duration": "0"})
        youtube = parse_youtube_resource(
            {"id": "v", "snippet": {"title": "Creep (video)"}, "contentDetails": {"duration": "PT4M"}}
        )

        track = unify_track(spotify, lastfm, youtube)

        assert track.title == FieldValue("Creep", Source.LASTFM)
        # Last.fm reports "0" for an unknown duration
        assert track.duration == FieldValue("04:00", Source.YOUTUBE)

    def test_zero_durations_fall_back_to_youtube(self):
        spotify = parse_spotify_track({"id": "x", "name": "Creep", "duration_ms": 0})
        lastfm = parse_lastfm_track({"name": "Creep", "duration": "0"})
        youtube = parse_youtube_resource(
            {"id": "v", "contentDetails": {"duration": "PT3M58S"}}
        )

        track = unify_track(spotify, lastfm, youtube)

        assert track.duration == FieldValue("03:58", Source.YOUTUBE)

    def test_zero_length_video_duration_is_kept(self):
        spotify = parse_spotify_track({"id": "x", "name": "Creep"})
        youtube = parse_youtube_resource({"id": "v", "contentDetails": {"duration": "P0D"}})

        track = unify_track(spotify, None, youtube)

        # Live streams report P0D
        assert track.duration == FieldValue("00:00", Source.YOUTUBE)

    def test_missing_secondary_leaves_its_fields_absent(self, spotify_track, youtube_video):
        track = unify_track(spotify_track, None, youtube_video)

        assert track.urls.lastfm_track.is_absent
        assert track.artist.lastfm_url.is_absent
        assert track.album.lastfm_cover_url.is_absent
        assert track.popularity.lastfm_listeners.is_absent
        assert track.popularity.lastfm_playcount.is_absent
        assert track.genres.is_absent
        # Description falls through to YouTube
        assert track.description.source == Source.YOUTUBE
        assert track.title.source == Source.SPOTIFY

    def test_all_sources_missing(self):
        record = unify_track(None, None, None).to_dict()

        def leaves(node):
            if set(node) == {"value", "source"}:
                yield node
            else:
                for child in node.values():
                    yield from leaves(child)

        assert all(leaf == {"value": None, "source": "N/A"} for leaf in leaves(record))

    def test_empty_models_equal_missing(self):
        assert unify_track(SpotifyTrack(), LastfmTrack(), YoutubeResource()) == unify_track(
            None, None, None
        )

    def test_missing_nested_album(self):
        spotify = parse_spotify_track({"name": "Creep", "album": None})
        track = unify_track(spotify, None, None)
        assert track.album.name.is_absent
        assert track.album.spotify_cover_url.is_absent
        assert track.album.release_date.is_absent

    def test_empty_images_list(self):
        spotify = parse_spotify_track({"name": "Creep", "album": {"name": "PH", "images": []}})
        track = unify_track(spotify, None, None)
        assert track.album.spotify_cover_url.is_absent

    def test_description_without_anchor_kept(self):
        lastfm = parse_lastfm_track({"wiki": {"content": "  Short text.  "}})
        track = unify_track(None, lastfm, None)
        assert track.description.value == "  Short text.  "

    def test_serialized_shape(self, spotify_track, lastfm_track, youtube_video):
        data = unify_track(spotify_track, lastfm_track, youtube_video).to_dict()

        assert set(data) == {
            "id",
            "title",
            "artist",
            "album",
            "duration",
            "popularity",
            "urls",
            "genres",
            "description",
        }
        assert set(data["artist"]) == {"id", "name", "spotifyUrl", "lastFmUrl"}
        assert set(data["popularity"]) == {
            "spotify",
            "lastFmListeners",
            "lastFmPlayCount",
            "youtubeViews",
            "youtubeLikes",
            "youtubeComments",
        }
        assert data["urls"]["spotifyTrack"] == {
            "value": "https://open.spotify.com/track/70LcF31zb1H0PyJoS1Sx1r",
            "source": "Spotify",
        }
        assert data["popularity"]["lastFmListeners"]["source"] == "Last.fm"


class TestUnifyArtist:
    def test_full_artist(self, spotify_artist, lastfm_artist, youtube_channel, spotify_top_tracks):
        artist = unify_artist(spotify_artist, lastfm_artist, youtube_channel, spotify_top_tracks)

        assert artist.name == FieldValue("Radiohead", Source.SPOTIFY)
        assert artist.genres.source == Source.SPOTIFY
        assert artist.popularity == FieldValue(79, Source.SPOTIFY)
        assert artist.statistics.spotify_followers.value == "9,876,543"
        assert artist.statistics.lastfm_listeners.value == "6,543,210"
        assert artist.statistics.lastfm_playcount.value == "987,654,321"
        assert artist.statistics.youtube_subscribers == FieldValue("4,560,000", Source.YOUTUBE)
        assert artist.statistics.youtube_view_count.value == "2,345,678,901"
        assert artist.description == FieldValue(
            "Radiohead are an English rock band formed in Abingdon in 1985.", Source.LASTFM
        )
        assert artist.external_links.youtube == FieldValue(
            "https://www.youtube.com/channel/UCq19-LqvG35A-30oyAiPiqA", Source.YOUTUBE
        )
        assert artist.on_tour == FieldValue(False, Source.LASTFM)
        assert [a.name for a in artist.similar_artists.value] == ["Thom Yorke", "Atoms for Peace"]
        assert artist.top_tracks.source == Source.SPOTIFY
        assert artist.top_tracks.value[1] == TopTrack(
            id="10nyNJ6zNy2YVYLrcwLccB",
            name="No Surprises",
            album="OK Computer",
            url="https://open.spotify.com/track/10nyNJ6zNy2YVYLrcwLccB",
            popularity=80,
            preview_url="https://p.scdn.co/mp3-preview/nosurprises",
        )

    def test_genres_fall_back_to_tags(self):
        lastfm = parse_lastfm_artist({"artist": {"tags": {"tag": [{"name": "shoegaze"}]}}})
        artist = unify_artist(None, lastfm, None)
        assert artist.genres == FieldValue(["shoegaze"], Source.LASTFM)

    def test_on_tour(self):
        assert unify_artist(None, parse_lastfm_artist({"ontour": "1"}), None).on_tour.value is True
        assert unify_artist(None, None, None).on_tour.is_absent

    def test_description_falls_back_to_channel(self, youtube_channel):
        artist = unify_artist(None, None, youtube_channel)
        assert artist.description == FieldValue(
            "The official YouTube channel of Radiohead.", Source.YOUTUBE
        )
        assert artist.name == FieldValue("Radiohead", Source.YOUTUBE)

    def test_empty_collections_absent(self, spotify_artist):
        artist = unify_artist(spotify_artist, None, None, [])
        assert artist.similar_artists.is_absent
        assert artist.top_tracks.is_absent
        assert artist.images.lastfm.is_absent
        assert artist.images.youtube.is_absent

    @pytest.mark.parametrize("key", ["similar_artists", "top_tracks"])
    def test_list_fields_serialize_to_dicts(
        self, key, spotify_artist, lastfm_artist, spotify_top_tracks
    ):
        data = unify_artist(spotify_artist, lastfm_artist, None, spotify_top_tracks).to_dict()
        assert all(isinstance(item, dict) for item in data[key]["value"])

    def test_serialized_keys(self, spotify_artist):
        data = unify_artist(spotify_artist, None, None).to_dict()
        assert set(data["statistics"]) == {
            "spotify_followers",
            "lastfm_listeners",
            "lastfm_playcount",
            "youtube_subscribers",
            "youtube_view_count",
        }
        assert set(data["images"]) == {"spotify", "lastfm", "youtube"}
        assert set(data["external_links"]) == {"spotify", "lastfm", "youtube"}
        assert data["on_tour"] == {"value": None, "source": "N/A"}
