"""
Field-level merge of per-source records into one unified record.

Each field category has a fixed source-precedence order. For every field the
first source in that order holding a present, non-empty value wins and is
recorded as the field's provenance; when no source has a value the field is
absent (``None`` / ``Source.NONE``). A missing source record, or any missing
nested object inside one, degrades to absent fields and never raises.

Counts are rendered as thousands-grouped strings, durations as ``MM:SS`` and
rich-text descriptions lose their trailing "read more" anchor.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Any

from music_unify.models import (
    ArtistImages,
    ArtistLinks,
    ArtistStatistics,
    FieldValue,
    SimilarArtist,
    Source,
    TopTrack,
    TrackAlbum,
    TrackArtist,
    TrackPopularity,
    TrackUrls,
    UnifiedArtist,
    UnifiedTrack,
)
from music_unify.normalize import format_count, format_duration, normalize_description
from music_unify.sources import (
    LastfmArtist,
    LastfmTrack,
    SpotifyArtist,
    SpotifyTrack,
    YoutubeResource,
)

logger = logging.getLogger(__name__)

YOUTUBE_VIDEO_URL = "https://www.youtube.com/watch?v={id}"
YOUTUBE_CHANNEL_URL = "https://www.youtube.com/channel/{id}"


class FieldCategory(StrEnum):
    """Field categories sharing one precedence order."""

    NAME = "name"
    ARTIST_NAME = "artist_name"
    ALBUM = "album"
    DURATION = "duration"
    GENRES = "genres"
    DESCRIPTION = "description"


PrecedenceTable = Mapping[FieldCategory, tuple[Source, ...]]

TRACK_PRECEDENCE: PrecedenceTable = {
    FieldCategory.NAME: (Source.SPOTIFY, Source.LASTFM, Source.YOUTUBE),
    FieldCategory.ARTIST_NAME: (Source.SPOTIFY, Source.LASTFM, Source.YOUTUBE),
    FieldCategory.ALBUM: (Source.SPOTIFY, Source.LASTFM),
    FieldCategory.DURATION: (Source.SPOTIFY, Source.LASTFM, Source.YOUTUBE),
    FieldCategory.GENRES: (Source.LASTFM,),
    FieldCategory.DESCRIPTION: (Source.LASTFM, Source.YOUTUBE),
}

ARTIST_PRECEDENCE: PrecedenceTable = {
    FieldCategory.NAME: (Source.SPOTIFY, Source.LASTFM, Source.YOUTUBE),
    FieldCategory.GENRES: (Source.SPOTIFY, Source.LASTFM),
    FieldCategory.DESCRIPTION: (Source.LASTFM, Source.YOUTUBE),
}


def is_present(value: Any) -> bool:
    """None, empty strings and empty collections count as missing."""
    if value is None:
        return False
    if isinstance(value, str | list | tuple | dict | set):
        return len(value) > 0
    return True


def first_present(candidates: Iterable[tuple[Any, Source]]) -> FieldValue[Any]:
    """Return the first (value, source) pair whose value is present."""
    for value, source in candidates:
        if is_present(value):
            return FieldValue(value, source)
    return FieldValue.absent()


def from_source(value: Any, source: Source) -> FieldValue[Any]:
    """Wrap a single-source value, absent when missing."""
    return first_present([(value, source)])


def pick(
    table: PrecedenceTable, category: FieldCategory, values: Mapping[Source, Any]
) -> FieldValue[Any]:
    """
    Resolve one field through a precedence table.

    Args:
        table: Precedence table (track or artist)
        category: Field category to look up
        values: Candidate value per source; missing sources may be omitted

    Returns:
        FieldValue from the first source in order with a present value
    """
    order = table.get(category, ())
    result = first_present((values.get(source), source) for source in order)
    logger.debug(f"{category.value}: resolved from {result.source.value}")
    return result


def _count(value: int | None, source: Source) -> FieldValue[str]:
    return from_source(format_count(value), source)


def _positive(value: int | None) -> int | None:
    return value if value is not None and value > 0 else None


def _url(template: str, resource_id: str | None) -> str | None:
    return template.format(id=resource_id) if resource_id else None


# =============================================================================
# Track
# =============================================================================


def unify_track(
    primary: SpotifyTrack | None,
    secondary: LastfmTrack | None,
    tertiary: YoutubeResource | None,
    table: PrecedenceTable = TRACK_PRECEDENCE,
) -> UnifiedTrack:
    """
    Build a unified track record.

    Args:
        primary: Spotify track detail for the already-identified track
        secondary: Last.fm track info, or None when unavailable
        tertiary: YouTube video detail for the matched video, or None

    Returns:
        UnifiedTrack with every leaf present
    """
    spotify = primary or SpotifyTrack()
    lastfm = secondary or LastfmTrack()
    youtube = tertiary or YoutubeResource()

    spotify_artist = spotify.first_artist
    spotify_album = spotify.album
    lastfm_artist = lastfm.artist
    lastfm_album = lastfm.album
    snippet = youtube.info
    stats = youtube.stats

    logger.debug(
        f"Unifying track: spotify={primary is not None}, lastfm={secondary is not None}, "
        f"youtube={tertiary is not None}"
    )

    artist = TrackArtist(
        id=from_source(spotify_artist.id, Source.SPOTIFY),
        name=pick(
            table,
            FieldCategory.ARTIST_NAME,
            {
                Source.SPOTIFY: spotify_artist.name,
                Source.LASTFM: lastfm_artist.name if lastfm_artist else None,
                Source.YOUTUBE: snippet.channel_title,
            },
        ),
        spotify_url=from_source(spotify_artist.url, Source.SPOTIFY),
        lastfm_url=from_source(lastfm_artist.url if lastfm_artist else None, Source.LASTFM),
    )

    album = TrackAlbum(
        name=pick(
            table,
            FieldCategory.ALBUM,
            {
                Source.SPOTIFY: spotify_album.name if spotify_album else None,
                Source.LASTFM: lastfm_album.title if lastfm_album else None,
            },
        ),
        spotify_cover_url=from_source(
            spotify_album.cover_url if spotify_album else None, Source.SPOTIFY
        ),
        lastfm_cover_url=from_source(
            lastfm_album.cover_url if lastfm_album else None, Source.LASTFM
        ),
        youtube_thumbnail_url=from_source(snippet.thumbnail_url, Source.YOUTUBE),
        release_date=from_source(
            spotify_album.release_date if spotify_album else None, Source.SPOTIFY
        ),
    )

    duration = pick(
        table,
        FieldCategory.DURATION,
        {
            Source.SPOTIFY: format_duration(_positive(spotify.duration_ms)),
            Source.LASTFM: format_duration(_positive(lastfm.duration)),
            Source.YOUTUBE: format_duration(
                youtube.content_details.duration if youtube.content_details else None
            ),
        },
    )

    popularity = TrackPopularity(
        spotify=from_source(spotify.popularity, Source.SPOTIFY),
        lastfm_listeners=_count(lastfm.listeners, Source.LASTFM),
        lastfm_playcount=_count(lastfm.playcount, Source.LASTFM),
        youtube_views=_count(stats.view_count, Source.YOUTUBE),
        youtube_likes=_count(stats.like_count, Source.YOUTUBE),
        youtube_comments=_count(stats.comment_count, Source.YOUTUBE),
    )

    urls = TrackUrls(
        spotify_track=from_source(spotify.url, Source.SPOTIFY),
        lastfm_track=from_source(lastfm.url, Source.LASTFM),
        youtube_video=from_source(_url(YOUTUBE_VIDEO_URL, youtube.id), Source.YOUTUBE),
    )

    return UnifiedTrack(
        id=from_source(spotify.id, Source.SPOTIFY),
        title=pick(
            table,
            FieldCategory.NAME,
            {
                Source.SPOTIFY: spotify.name,
                Source.LASTFM: lastfm.name,
                Source.YOUTUBE: snippet.title,
            },
        ),
        artist=artist,
        album=album,
        duration=duration,
        popularity=popularity,
        urls=urls,
        genres=pick(table, FieldCategory.GENRES, {Source.LASTFM: lastfm.tag_names}),
        description=pick(
            table,
            FieldCategory.DESCRIPTION,
            {
                Source.LASTFM: normalize_description(lastfm.wiki.content if lastfm.wiki else None),
                Source.YOUTUBE: snippet.description,
            },
        ),
    )


# =============================================================================
# Artist
# =============================================================================


def _top_track(track: SpotifyTrack) -> TopTrack:
    return TopTrack(
        id=track.id,
        name=track.name,
        album=track.album.name if track.album else None,
        url=track.url,
        popularity=track.popularity,
        preview_url=track.preview_url,
    )


def unify_artist(
    primary: SpotifyArtist | None,
    secondary: LastfmArtist | None,
    tertiary: YoutubeResource | None,
    extra: Sequence[SpotifyTrack] | None = None,
    table: PrecedenceTable = ARTIST_PRECEDENCE,
) -> UnifiedArtist:
    """
    Build a unified artist record.

    Args:
        primary: Spotify artist detail for the already-identified artist
        secondary: Last.fm artist info, or None when unavailable
        tertiary: YouTube channel detail for the matched channel, or None
        extra: The artist's top tracks from Spotify

    Returns:
        UnifiedArtist with every leaf present
    """
    spotify = primary or SpotifyArtist()
    lastfm = secondary or LastfmArtist()
    youtube = tertiary or YoutubeResource()
    snippet = youtube.info
    stats = youtube.stats
    lastfm_stats = lastfm.stats

    logger.debug(
        f"Unifying artist: spotify={primary is not None}, lastfm={secondary is not None}, "
        f"youtube={tertiary is not None}, top_tracks={len(extra or [])}"
    )

    images = ArtistImages(
        spotify=from_source(spotify.image_url, Source.SPOTIFY),
        lastfm=from_source(lastfm.image_url, Source.LASTFM),
        youtube=from_source(snippet.thumbnail_url, Source.YOUTUBE),
    )

    statistics = ArtistStatistics(
        spotify_followers=_count(spotify.follower_count, Source.SPOTIFY),
        lastfm_listeners=_count(lastfm_stats.listeners if lastfm_stats else None, Source.LASTFM),
        lastfm_playcount=_count(lastfm_stats.playcount if lastfm_stats else None, Source.LASTFM),
        youtube_subscribers=_count(stats.subscriber_count, Source.YOUTUBE),
        youtube_view_count=_count(stats.view_count, Source.YOUTUBE),
    )

    external_links = ArtistLinks(
        spotify=from_source(spotify.url, Source.SPOTIFY),
        lastfm=from_source(lastfm.url, Source.LASTFM),
        youtube=from_source(_url(YOUTUBE_CHANNEL_URL, youtube.id), Source.YOUTUBE),
    )

    similar = [SimilarArtist(name=a.name, url=a.url) for a in lastfm.similar_artists if a.name]

    return UnifiedArtist(
        id=from_source(spotify.id, Source.SPOTIFY),
        name=pick(
            table,
            FieldCategory.NAME,
            {
                Source.SPOTIFY: spotify.name,
                Source.LASTFM: lastfm.name,
                Source.YOUTUBE: snippet.title,
            },
        ),
        images=images,
        genres=pick(
            table,
            FieldCategory.GENRES,
            {Source.SPOTIFY: list(spotify.genres), Source.LASTFM: lastfm.tag_names},
        ),
        popularity=from_source(spotify.popularity, Source.SPOTIFY),
        statistics=statistics,
        description=pick(
            table,
            FieldCategory.DESCRIPTION,
            {
                Source.LASTFM: normalize_description(lastfm.bio.content if lastfm.bio else None),
                Source.YOUTUBE: snippet.description,
            },
        ),
        similar_artists=from_source(similar, Source.LASTFM),
        external_links=external_links,
        on_tour=from_source(
            lastfm.ontour == "1" if lastfm.ontour is not None else None, Source.LASTFM
        ),
        top_tracks=from_source([_top_track(t) for t in extra or []], Source.SPOTIFY),
    )
