"""
Boundary models for provider payloads.

Raw provider JSON is shaped into pydantic models before the matcher or
unifier sees it. Every field is optional and unknown keys are ignored. Leaf
values of the wrong type validate to None (or an empty list) instead of
rejecting the whole record, so a single malformed field never costs the
rest of the payload.

Covers:
- Spotify Web API: track, artist, top tracks, search
- Last.fm: track.getInfo, artist.getInfo
- YouTube Data API v3: search results, video and channel detail
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated, Any, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)

from music_unify.models import ArtistSummary, SearchKind, TrackSummary

logger = logging.getLogger(__name__)


def _none_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


def _empty_on_error(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return []


def _as_list(value: Any) -> Any:
    """Last.fm collapses single-item collections into a bare object."""
    if value is None or value == "":
        return []
    if isinstance(value, Mapping):
        return [value]
    return value


def _drop_missing(items: list[Any]) -> list[Any]:
    return [item for item in items if item is not None]


T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

Opt = Annotated[T | None, WrapValidator(_none_on_error)]
# Items validate one at a time; a malformed item is dropped, its siblings kept
OptList = Annotated[
    list[Opt[T]],
    BeforeValidator(_as_list),
    AfterValidator(_drop_missing),
    WrapValidator(_empty_on_error),
]

OptStr = Opt[str]
OptInt = Opt[int]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


# =============================================================================
# Spotify
# =============================================================================


class SpotifyImage(_Record):
    url: OptStr = None
    width: OptInt = None
    height: OptInt = None


class SpotifyExternalUrls(_Record):
    spotify: OptStr = None


class SpotifyFollowers(_Record):
    total: OptInt = None


class SpotifyArtistRef(_Record):
    id: OptStr = None
    name: OptStr = None
    external_urls: Opt[SpotifyExternalUrls] = None

    @property
    def url(self) -> str | None:
        return self.external_urls.spotify if self.external_urls else None


SpotifyImages = OptList[SpotifyImage]


def _first_image_url(images: list[SpotifyImage]) -> str | None:
    return images[0].url if images else None


class SpotifyAlbum(_Record):
    id: OptStr = None
    name: OptStr = None
    release_date: OptStr = None
    images: SpotifyImages = Field(default_factory=list)

    @property
    def cover_url(self) -> str | None:
        return _first_image_url(self.images)


class SpotifyTrack(_Record):
    """Spotify track detail (``GET /v1/tracks/{id}``)."""

    id: OptStr = None
    name: OptStr = None
    duration_ms: OptInt = None
    popularity: OptInt = None
    preview_url: OptStr = None
    artists: OptList[SpotifyArtistRef] = Field(default_factory=list)
    album: Opt[SpotifyAlbum] = None
    external_urls: Opt[SpotifyExternalUrls] = None

    @property
    def first_artist(self) -> SpotifyArtistRef:
        return self.artists[0] if self.artists else SpotifyArtistRef()

    @property
    def url(self) -> str | None:
        return self.external_urls.spotify if self.external_urls else None


class SpotifyArtist(_Record):
    """Spotify artist detail (``GET /v1/artists/{id}``)."""

    id: OptStr = None
    name: OptStr = None
    popularity: OptInt = None
    genres: OptList[str] = Field(default_factory=list)
    images: SpotifyImages = Field(default_factory=list)
    followers: Opt[SpotifyFollowers] = None
    external_urls: Opt[SpotifyExternalUrls] = None

    @property
    def image_url(self) -> str | None:
        return _first_image_url(self.images)

    @property
    def follower_count(self) -> int | None:
        return self.followers.total if self.followers else None

    @property
    def url(self) -> str | None:
        return self.external_urls.spotify if self.external_urls else None


# =============================================================================
# Spotify search
# =============================================================================


class SpotifyTrackPage(_Record):
    items: OptList[SpotifyTrack] = Field(default_factory=list)


class SpotifyArtistPage(_Record):
    items: OptList[SpotifyArtist] = Field(default_factory=list)


class SpotifySearchResults(_Record):
    """Spotify search response (``GET /v1/search``), one paging object per type."""

    tracks: Opt[SpotifyTrackPage] = None
    artists: Opt[SpotifyArtistPage] = None


# =============================================================================
# Last.fm
# =============================================================================


class LastfmImage(_Record):
    url: OptStr = Field(default=None, alias="#text")
    size: OptStr = None


LastfmImages = OptList[LastfmImage]


def _first_lastfm_image(images: list[LastfmImage]) -> str | None:
    return images[0].url if images else None


class LastfmTag(_Record):
    name: OptStr = None
    url: OptStr = None


class LastfmTags(_Record):
    tag: OptList[LastfmTag] = Field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.tag if t.name]


class LastfmWiki(_Record):
    content: OptStr = None
    summary: OptStr = None


class LastfmArtistRef(_Record):
    name: OptStr = None
    url: OptStr = None
    mbid: OptStr = None


class LastfmAlbum(_Record):
    title: OptStr = None
    artist: OptStr = None
    url: OptStr = None
    image: LastfmImages = Field(default_factory=list)

    @property
    def cover_url(self) -> str | None:
        return _first_lastfm_image(self.image)


class LastfmTrack(_Record):
    """Last.fm ``track.getInfo`` payload (inside the ``track`` envelope)."""

    name: OptStr = None
    url: OptStr = None
    duration: OptInt = None  # milliseconds, "0" when unknown
    listeners: OptInt = None
    playcount: OptInt = None
    artist: Opt[LastfmArtistRef] = None
    album: Opt[LastfmAlbum] = None
    toptags: Opt[LastfmTags] = None
    wiki: Opt[LastfmWiki] = None

    @property
    def tag_names(self) -> list[str]:
        return self.toptags.names if self.toptags else []


class LastfmStats(_Record):
    listeners: OptInt = None
    playcount: OptInt = None


class LastfmSimilar(_Record):
    artist: OptList[LastfmArtistRef] = Field(default_factory=list)


class LastfmArtist(_Record):
    """Last.fm ``artist.getInfo`` payload (inside the ``artist`` envelope)."""

    name: OptStr = None
    url: OptStr = None
    mbid: OptStr = None
    ontour: OptStr = None
    image: LastfmImages = Field(default_factory=list)
    stats: Opt[LastfmStats] = None
    similar: Opt[LastfmSimilar] = None
    tags: Opt[LastfmTags] = None
    bio: Opt[LastfmWiki] = None

    @property
    def image_url(self) -> str | None:
        return _first_lastfm_image(self.image)

    @property
    def tag_names(self) -> list[str]:
        return self.tags.names if self.tags else []

    @property
    def similar_artists(self) -> list[LastfmArtistRef]:
        return [a for a in self.similar.artist if a.name] if self.similar else []


# =============================================================================
# YouTube
# =============================================================================


class YoutubeThumbnail(_Record):
    url: OptStr = None


class YoutubeThumbnails(_Record):
    default: Opt[YoutubeThumbnail] = None
    medium: Opt[YoutubeThumbnail] = None
    high: Opt[YoutubeThumbnail] = None


class YoutubeSnippet(_Record):
    title: OptStr = None
    description: OptStr = None
    channel_id: OptStr = Field(default=None, alias="channelId")
    channel_title: OptStr = Field(default=None, alias="channelTitle")
    published_at: OptStr = Field(default=None, alias="publishedAt")
    thumbnails: Opt[YoutubeThumbnails] = None

    @property
    def thumbnail_url(self) -> str | None:
        if self.thumbnails and self.thumbnails.high:
            return self.thumbnails.high.url
        return None


class YoutubeStatistics(_Record):
    view_count: OptInt = Field(default=None, alias="viewCount")
    like_count: OptInt = Field(default=None, alias="likeCount")
    comment_count: OptInt = Field(default=None, alias="commentCount")
    subscriber_count: OptInt = Field(default=None, alias="subscriberCount")
    video_count: OptInt = Field(default=None, alias="videoCount")


class YoutubeContentDetails(_Record):
    duration: OptStr = None


class YoutubeResourceId(_Record):
    kind: OptStr = None
    video_id: OptStr = Field(default=None, alias="videoId")
    channel_id: OptStr = Field(default=None, alias="channelId")


class YoutubeSearchItem(_Record):
    """One ``search.list`` result; ``id`` is a resource id object."""

    id: Opt[YoutubeResourceId] = None
    snippet: Opt[YoutubeSnippet] = None


class YoutubeResource(_Record):
    """One ``videos.list`` or ``channels.list`` item; ``id`` is a plain string."""

    id: OptStr = None
    snippet: Opt[YoutubeSnippet] = None
    statistics: Opt[YoutubeStatistics] = None
    content_details: Opt[YoutubeContentDetails] = Field(default=None, alias="contentDetails")

    @property
    def stats(self) -> YoutubeStatistics:
        return self.statistics or YoutubeStatistics()

    @property
    def info(self) -> YoutubeSnippet:
        return self.snippet or YoutubeSnippet()


# =============================================================================
# Parsing
# =============================================================================


def _validate(model: type[M], payload: Any, label: str) -> M | None:
    if not isinstance(payload, Mapping):
        if payload is not None:
            logger.warning(f"Ignoring {label} payload of type {type(payload).__name__}")
        return None
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed {label} payload: {e.error_count()} errors")
        return None


def _unwrap(payload: Any, key: str, label: str) -> Any:
    """Unwrap a Last.fm envelope; error envelopes become None."""
    if not isinstance(payload, Mapping):
        return payload
    if "error" in payload:
        logger.info(f"{label} returned error {payload.get('error')}: {payload.get('message')}")
        return None
    return payload.get(key, payload)


def _first_item(payload: Any) -> Any:
    """Take the first entry of a YouTube ``items`` list, if the payload has one."""
    if isinstance(payload, Mapping) and "items" in payload:
        items = payload.get("items")
        if isinstance(items, list) and items:
            return items[0]
        return None
    return payload


def parse_spotify_track(payload: Any) -> SpotifyTrack | None:
    return _validate(SpotifyTrack, payload, "Spotify track")


def parse_spotify_artist(payload: Any) -> SpotifyArtist | None:
    return _validate(SpotifyArtist, payload, "Spotify artist")


def parse_spotify_top_tracks(payload: Any) -> list[SpotifyTrack]:
    """Parse a top-tracks response (``{"tracks": [...]}``) or a bare list."""
    if isinstance(payload, Mapping):
        payload = payload.get("tracks")
    if not isinstance(payload, list):
        return []
    tracks = (parse_spotify_track(item) for item in payload)
    return [t for t in tracks if t is not None]


def parse_spotify_search(
    payload: Any, kind: SearchKind
) -> list[TrackSummary] | list[ArtistSummary]:
    """
    Shape a Spotify search response into summary rows.

    Rows without an id are skipped since they cannot be resolved further.

    Args:
        payload: Raw search response
        kind: Which paging object to read

    Returns:
        Summary rows in the order Spotify ranked them
    """
    results = _validate(SpotifySearchResults, payload, "Spotify search")
    if results is None:
        return []

    if kind == SearchKind.TRACK:
        tracks = results.tracks.items if results.tracks else []
        return [
            TrackSummary(
                id=t.id,
                name=t.name,
                artist=t.first_artist.name,
                album=t.album.name if t.album else None,
                release_date=t.album.release_date if t.album else None,
                image=t.album.cover_url if t.album else None,
                url=t.url,
            )
            for t in tracks
            if t.id
        ]

    artists = results.artists.items if results.artists else []
    return [
        ArtistSummary(
            id=a.id,
            name=a.name,
            genres=list(a.genres),
            followers=a.follower_count,
            image=a.image_url,
            url=a.url,
        )
        for a in artists
        if a.id
    ]


def parse_lastfm_track(payload: Any) -> LastfmTrack | None:
    return _validate(LastfmTrack, _unwrap(payload, "track", "Last.fm"), "Last.fm track")


def parse_lastfm_artist(payload: Any) -> LastfmArtist | None:
    return _validate(LastfmArtist, _unwrap(payload, "artist", "Last.fm"), "Last.fm artist")


def parse_youtube_resource(payload: Any) -> YoutubeResource | None:
    """Parse a video or channel detail response (first item of ``items``)."""
    return _validate(YoutubeResource, _first_item(payload), "YouTube resource")


def parse_youtube_search(payload: Any) -> list[YoutubeSearchItem]:
    """Parse the ``items`` of a ``search.list`` response."""
    if isinstance(payload, Mapping):
        payload = payload.get("items")
    if not isinstance(payload, list):
        return []
    items = (_validate(YoutubeSearchItem, item, "YouTube search item") for item in payload)
    return [item for item in items if item is not None]
