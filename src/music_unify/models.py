"""
Unified record types.

Every leaf of a unified record is a ``FieldValue`` carrying the chosen value
and the source it came from. Absent leaves are still present, with
``value=None`` and ``source=Source.NONE``, so the serialized shape never
depends on which upstream data was missing.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, is_dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Source(StrEnum):
    """Provenance of a unified field."""

    SPOTIFY = "Spotify"
    LASTFM = "Last.fm"
    YOUTUBE = "YouTube"
    NONE = "N/A"

    # Role aliases
    PRIMARY = "Spotify"
    SECONDARY = "Last.fm"
    TERTIARY = "YouTube"


@dataclass(frozen=True)
class FieldValue(Generic[T]):
    """A (value, provenance) pair."""

    value: T | None = None
    source: Source = Source.NONE

    @classmethod
    def absent(cls) -> FieldValue[Any]:
        return cls(None, Source.NONE)

    @property
    def is_absent(self) -> bool:
        return self.value is None

    def to_dict(self) -> dict[str, Any]:
        value: Any = self.value
        if isinstance(value, list):
            value = [asdict(item) if is_dataclass(item) else item for item in value]
        return {"value": value, "source": str(self.source)}


def _absent() -> FieldValue[Any]:
    return FieldValue.absent()


# =============================================================================
# Track
# =============================================================================


@dataclass
class TrackArtist:
    id: FieldValue[str] = field(default_factory=_absent)
    name: FieldValue[str] = field(default_factory=_absent)
    spotify_url: FieldValue[str] = field(default_factory=_absent)
    lastfm_url: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.to_dict(),
            "name": self.name.to_dict(),
            "spotifyUrl": self.spotify_url.to_dict(),
            "lastFmUrl": self.lastfm_url.to_dict(),
        }


@dataclass
class TrackAlbum:
    """Album info. Cover art is offered per source; the consumer picks one."""

    name: FieldValue[str] = field(default_factory=_absent)
    spotify_cover_url: FieldValue[str] = field(default_factory=_absent)
    lastfm_cover_url: FieldValue[str] = field(default_factory=_absent)
    youtube_thumbnail_url: FieldValue[str] = field(default_factory=_absent)
    release_date: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name.to_dict(),
            "spotifyCoverUrl": self.spotify_cover_url.to_dict(),
            "lastFmCoverUrl": self.lastfm_cover_url.to_dict(),
            "youtubeThumbnailUrl": self.youtube_thumbnail_url.to_dict(),
            "releaseDate": self.release_date.to_dict(),
        }


@dataclass
class TrackPopularity:
    """Popularity metrics. Counts are thousands-grouped strings."""

    spotify: FieldValue[int] = field(default_factory=_absent)
    lastfm_listeners: FieldValue[str] = field(default_factory=_absent)
    lastfm_playcount: FieldValue[str] = field(default_factory=_absent)
    youtube_views: FieldValue[str] = field(default_factory=_absent)
    youtube_likes: FieldValue[str] = field(default_factory=_absent)
    youtube_comments: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotify": self.spotify.to_dict(),
            "lastFmListeners": self.lastfm_listeners.to_dict(),
            "lastFmPlayCount": self.lastfm_playcount.to_dict(),
            "youtubeViews": self.youtube_views.to_dict(),
            "youtubeLikes": self.youtube_likes.to_dict(),
            "youtubeComments": self.youtube_comments.to_dict(),
        }


@dataclass
class TrackUrls:
    spotify_track: FieldValue[str] = field(default_factory=_absent)
    lastfm_track: FieldValue[str] = field(default_factory=_absent)
    youtube_video: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotifyTrack": self.spotify_track.to_dict(),
            "lastFmTrack": self.lastfm_track.to_dict(),
            "youtubeVideo": self.youtube_video.to_dict(),
        }


@dataclass
class UnifiedTrack:
    """Unified track record."""

    id: FieldValue[str] = field(default_factory=_absent)
    title: FieldValue[str] = field(default_factory=_absent)
    artist: TrackArtist = field(default_factory=TrackArtist)
    album: TrackAlbum = field(default_factory=TrackAlbum)
    duration: FieldValue[str] = field(default_factory=_absent)
    popularity: TrackPopularity = field(default_factory=TrackPopularity)
    urls: TrackUrls = field(default_factory=TrackUrls)
    genres: FieldValue[list[str]] = field(default_factory=_absent)
    description: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.to_dict(),
            "title": self.title.to_dict(),
            "artist": self.artist.to_dict(),
            "album": self.album.to_dict(),
            "duration": self.duration.to_dict(),
            "popularity": self.popularity.to_dict(),
            "urls": self.urls.to_dict(),
            "genres": self.genres.to_dict(),
            "description": self.description.to_dict(),
        }


# =============================================================================
# Artist
# =============================================================================


@dataclass
class ArtistImages:
    spotify: FieldValue[str] = field(default_factory=_absent)
    lastfm: FieldValue[str] = field(default_factory=_absent)
    youtube: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotify": self.spotify.to_dict(),
            "lastfm": self.lastfm.to_dict(),
            "youtube": self.youtube.to_dict(),
        }


@dataclass
class ArtistStatistics:
    spotify_followers: FieldValue[str] = field(default_factory=_absent)
    lastfm_listeners: FieldValue[str] = field(default_factory=_absent)
    lastfm_playcount: FieldValue[str] = field(default_factory=_absent)
    youtube_subscribers: FieldValue[str] = field(default_factory=_absent)
    youtube_view_count: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotify_followers": self.spotify_followers.to_dict(),
            "lastfm_listeners": self.lastfm_listeners.to_dict(),
            "lastfm_playcount": self.lastfm_playcount.to_dict(),
            "youtube_subscribers": self.youtube_subscribers.to_dict(),
            "youtube_view_count": self.youtube_view_count.to_dict(),
        }


@dataclass
class ArtistLinks:
    spotify: FieldValue[str] = field(default_factory=_absent)
    lastfm: FieldValue[str] = field(default_factory=_absent)
    youtube: FieldValue[str] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotify": self.spotify.to_dict(),
            "lastfm": self.lastfm.to_dict(),
            "youtube": self.youtube.to_dict(),
        }


@dataclass(frozen=True)
class SimilarArtist:
    name: str
    url: str | None = None


@dataclass(frozen=True)
class TopTrack:
    id: str | None
    name: str | None
    album: str | None = None
    url: str | None = None
    popularity: int | None = None
    preview_url: str | None = None


@dataclass
class UnifiedArtist:
    """Unified artist record."""

    id: FieldValue[str] = field(default_factory=_absent)
    name: FieldValue[str] = field(default_factory=_absent)
    images: ArtistImages = field(default_factory=ArtistImages)
    genres: FieldValue[list[str]] = field(default_factory=_absent)
    popularity: FieldValue[int] = field(default_factory=_absent)
    statistics: ArtistStatistics = field(default_factory=ArtistStatistics)
    description: FieldValue[str] = field(default_factory=_absent)
    similar_artists: FieldValue[list[SimilarArtist]] = field(default_factory=_absent)
    external_links: ArtistLinks = field(default_factory=ArtistLinks)
    on_tour: FieldValue[bool] = field(default_factory=_absent)
    top_tracks: FieldValue[list[TopTrack]] = field(default_factory=_absent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.to_dict(),
            "name": self.name.to_dict(),
            "images": self.images.to_dict(),
            "genres": self.genres.to_dict(),
            "popularity": self.popularity.to_dict(),
            "statistics": self.statistics.to_dict(),
            "description": self.description.to_dict(),
            "similar_artists": self.similar_artists.to_dict(),
            "external_links": self.external_links.to_dict(),
            "on_tour": self.on_tour.to_dict(),
            "top_tracks": self.top_tracks.to_dict(),
        }


# =============================================================================
# Search
# =============================================================================


class SearchKind(StrEnum):
    """Entity types accepted by the primary catalog's search endpoint."""

    TRACK = "track"
    ARTIST = "artist"


@dataclass(frozen=True)
class TrackSummary:
    """One row of a track search, enough to pick the track to resolve."""

    id: str
    name: str | None = None
    artist: str | None = None
    album: str | None = None
    release_date: str | None = None
    image: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ArtistSummary:
    """One row of an artist search."""

    id: str
    name: str | None = None
    genres: list[str] = field(default_factory=list)
    followers: int | None = None
    image: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
