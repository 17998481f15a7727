"""
File-backed providers.

Each adapter serves provider payloads saved as JSON files, one file per
lookup, so the aggregator can run offline over captured API responses.
Lookups ignore the requested id or name: the file is the answer. A lookup
with no file configured returns None, the same as a provider with no data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from music_unify.errors import PayloadError
from music_unify.sources import parse_youtube_resource

logger = logging.getLogger(__name__)


def load_payload(path: Path | None) -> Any:
    """Read a JSON payload file; None when no path was given."""
    if path is None:
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise PayloadError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON in {path}: {e}") from e


@dataclass
class FileCatalog:
    """Spotify track, artist and top-tracks payloads."""

    track: Path | None = None
    artist: Path | None = None
    top_tracks: Path | None = None

    def get_track(self, track_id: str) -> Any:
        return load_payload(self.track)

    def get_artist(self, artist_id: str) -> Any:
        return load_payload(self.artist)

    def get_top_tracks(self, artist_id: str) -> Any:
        return load_payload(self.top_tracks)


@dataclass
class FileStats:
    """Last.fm ``track.getInfo`` / ``artist.getInfo`` payloads."""

    track: Path | None = None
    artist: Path | None = None

    def get_track_info(self, artist: str, title: str) -> Any:
        return load_payload(self.track)

    def get_artist_info(self, artist: str) -> Any:
        return load_payload(self.artist)


@dataclass
class FileVideos:
    """
    YouTube search and detail payloads.

    The same search file serves video and channel searches; the aggregator
    keeps only candidates of the kind it asked for.
    """

    search: Path | None = None
    detail: Path | None = None

    def search_videos(self, query: str) -> Any:
        return load_payload(self.search)

    def search_channels(self, query: str) -> Any:
        return load_payload(self.search)

    def get_video(self, video_id: str) -> Any:
        return self._detail(video_id)

    def get_channel(self, channel_id: str) -> Any:
        return self._detail(channel_id)

    def _detail(self, resource_id: str) -> Any:
        payload = load_payload(self.detail)
        resource = parse_youtube_resource(payload)
        if resource is not None and resource.id != resource_id:
            logger.warning(
                f"Detail payload {self.detail} is for {resource.id}, "
                f"but the best match is {resource_id}"
            )
        return payload
