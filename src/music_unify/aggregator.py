"""
Resolution pipeline over injected providers.

The aggregator runs the control flow around the matcher and unifier:

    1. Fetch the primary (Spotify) record by ID and derive canonical names
    2. Fetch the secondary (Last.fm) record by name
    3. Search the tertiary source (YouTube), build candidates, pick the best
    4. Fetch detail for the selected candidate
    5. Unify everything into one record

Providers only move JSON; transport, credentials and rate limits are theirs.
Their exceptions propagate unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from music_unify.errors import MissingPrimaryDataError, NoCandidatesError, NoMatchError
from music_unify.matcher import (
    Candidate,
    CandidateKind,
    candidates_from_search,
    select_best_channel,
    select_best_video,
)
from music_unify.models import Source, UnifiedArtist, UnifiedTrack
from music_unify.sources import (
    YoutubeResource,
    parse_lastfm_artist,
    parse_lastfm_track,
    parse_spotify_artist,
    parse_spotify_top_tracks,
    parse_spotify_track,
    parse_youtube_resource,
)
from music_unify.unify import unify_artist, unify_track

logger = logging.getLogger(__name__)


class CatalogProvider(Protocol):
    """Primary catalog (Spotify Web API)."""

    def get_track(self, track_id: str) -> Any: ...

    def get_artist(self, artist_id: str) -> Any: ...

    def get_top_tracks(self, artist_id: str) -> Any: ...


class StatsProvider(Protocol):
    """Scrobbling statistics (Last.fm)."""

    def get_track_info(self, artist: str, title: str) -> Any: ...

    def get_artist_info(self, artist: str) -> Any: ...


class VideoProvider(Protocol):
    """Video hosting search (YouTube Data API)."""

    def search_videos(self, query: str) -> Any: ...

    def search_channels(self, query: str) -> Any: ...

    def get_video(self, video_id: str) -> Any: ...

    def get_channel(self, channel_id: str) -> Any: ...


@dataclass
class TrackResolution:
    """Outcome of a track resolution, with the matched candidate for audit."""

    record: UnifiedTrack
    video: Candidate | None = None


@dataclass
class ArtistResolution:
    """Outcome of an artist resolution, with the matched candidate for audit."""

    record: UnifiedArtist
    channel: Candidate | None = None


class Aggregator:
    """
    Resolve tracks and artists across the three sources.

    Args:
        catalog: Primary catalog provider
        stats: Statistics provider, or None to skip the secondary source
        videos: Video provider, or None to skip the tertiary source
        strict: Raise NoCandidatesError when the video search comes back empty
            instead of continuing without tertiary data
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        stats: StatsProvider | None = None,
        videos: VideoProvider | None = None,
        strict: bool = False,
    ):
        self.catalog = catalog
        self.stats = stats
        self.videos = videos
        self.strict = strict

    def resolve_track(self, track_id: str) -> TrackResolution:
        """Resolve a Spotify track ID into a unified track record."""
        logger.info(f"Resolving track {track_id}")
        spotify = parse_spotify_track(self.catalog.get_track(track_id))
        if spotify is None:
            raise MissingPrimaryDataError(f"No primary track data for {track_id}")

        title = spotify.name
        artist_name = spotify.first_artist.name
        if not title or not artist_name:
            raise MissingPrimaryDataError(
                f"Invalid primary track {track_id}: missing artist name or track name"
            )

        lastfm = None
        if self.stats is not None:
            lastfm = parse_lastfm_track(self.stats.get_track_info(artist_name, title))
            if lastfm is None:
                logger.warning(f"No {Source.LASTFM} data for {artist_name} - {title}")

        video: Candidate | None = None
        youtube: YoutubeResource | None = None
        if self.videos is not None:
            query = f"{artist_name} {title}"
            candidates = candidates_from_search(
                self.videos.search_videos(query), CandidateKind.VIDEO
            )
            if self._require(candidates, query):
                video = select_best_video(title, artist_name, candidates)
                if video is None:
                    raise NoMatchError(str(Source.YOUTUBE))
                logger.info(f"Matched video {video.id}: {video.title!r}")
                youtube = parse_youtube_resource(self.videos.get_video(video.id))

        return TrackResolution(record=unify_track(spotify, lastfm, youtube), video=video)

    def resolve_artist(self, artist_id: str) -> ArtistResolution:
        """Resolve a Spotify artist ID into a unified artist record."""
        logger.info(f"Resolving artist {artist_id}")
        spotify = parse_spotify_artist(self.catalog.get_artist(artist_id))
        if spotify is None or not spotify.name:
            raise MissingPrimaryDataError(f"Invalid primary artist {artist_id}: missing name")

        artist_name = spotify.name
        top_tracks = parse_spotify_top_tracks(self.catalog.get_top_tracks(artist_id))

        lastfm = None
        if self.stats is not None:
            lastfm = parse_lastfm_artist(self.stats.get_artist_info(artist_name))
            if lastfm is None:
                logger.warning(f"No {Source.LASTFM} data for {artist_name}")

        channel: Candidate | None = None
        youtube: YoutubeResource | None = None
        if self.videos is not None:
            candidates = candidates_from_search(
                self.videos.search_channels(artist_name), CandidateKind.CHANNEL
            )
            if self._require(candidates, artist_name):
                channel = select_best_channel(artist_name, candidates)
                if channel is None:
                    raise NoMatchError(str(Source.YOUTUBE))
                logger.info(f"Matched channel {channel.id}: {channel.title!r}")
                youtube = parse_youtube_resource(self.videos.get_channel(channel.id))

        return ArtistResolution(
            record=unify_artist(spotify, lastfm, youtube, top_tracks), channel=channel
        )

    def _require(self, candidates: list[Candidate], query: str) -> bool:
        """Report an empty candidate list; raise in strict mode."""
        if candidates:
            return True
        if self.strict:
            raise NoCandidatesError(str(Source.YOUTUBE), query)
        logger.warning(f"No {Source.YOUTUBE} candidates for {query!r}; continuing without it")
        return False
