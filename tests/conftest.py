"""Pytest configuration and shared fixtures for music-unify tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from music_unify.matcher import Candidate, CandidateKind
from music_unify.sources import (
    parse_lastfm_artist,
    parse_lastfm_track,
    parse_spotify_artist,
    parse_spotify_top_tracks,
    parse_spotify_track,
    parse_youtube_resource,
)

# =============================================================================
# Fixture Paths
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PAYLOADS_DIR = FIXTURES_DIR / "payloads"


def payload_path(name: str) -> Path:
    """Path to a saved provider payload."""
    path = PAYLOADS_DIR / f"{name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Fixture not found: {path}")
    return path


def load_payload(name: str) -> Any:
    """Load a saved provider payload as decoded JSON."""
    return json.loads(payload_path(name).read_text(encoding="utf-8"))


def video(title: str, channel: str = "", video_id: str | None = None) -> Candidate:
    """Build a video candidate for matcher tests."""
    return Candidate(id=video_id or title, title=title, channel=channel, kind=CandidateKind.VIDEO)


def channel(title: str, channel_id: str | None = None) -> Candidate:
    """Build a channel candidate for matcher tests."""
    return Candidate(id=channel_id or title, title=title, channel=title, kind=CandidateKind.CHANNEL)


# =============================================================================
# Parsed Payload Fixtures
# =============================================================================


@pytest.fixture
def spotify_track():
    return parse_spotify_track(load_payload("spotify_track"))


@pytest.fixture
def lastfm_track():
    return parse_lastfm_track(load_payload("lastfm_track"))


@pytest.fixture
def youtube_video():
    return parse_youtube_resource(load_payload("youtube_video"))


@pytest.fixture
def spotify_artist():
    return parse_spotify_artist(load_payload("spotify_artist"))


@pytest.fixture
def spotify_top_tracks():
    return parse_spotify_top_tracks(load_payload("spotify_top_tracks"))


@pytest.fixture
def lastfm_artist():
    return parse_lastfm_artist(load_payload("lastfm_artist"))


@pytest.fixture
def youtube_channel():
    return parse_youtube_resource(load_payload("youtube_channel"))


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """The CLI installs a RichHandler on the root logger; drop it after each test."""
    import logging

    from rich.logging import RichHandler

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    root.setLevel(level)
