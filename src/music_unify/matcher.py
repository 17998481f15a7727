"""
Candidate selection for sources without a shared identifier.

Given a target name taken from the primary record and a list of search
results from another source, pick the single best candidate:

Videos (track resolution):
    Phase 1 (override): the first candidate whose title carries a promotional
    marker ("official", "oficial", "music", "version") together with "video"
    wins outright, regardless of where it sits in the list.
    Phase 2 (score): otherwise every candidate is scored by the mean of title
    similarity (target artist removed from the candidate title) and channel
    similarity, and the highest score wins. Ties keep the first seen.

Channels (artist resolution):
    Score by name similarity alone; no override.

Low scores are never rejected: a non-empty list always yields a candidate.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from music_unify.normalize import normalize_text, similarity
from music_unify.sources import YoutubeSearchItem, parse_youtube_search

logger = logging.getLogger(__name__)

PROMOTIONAL_MARKERS = ("official", "oficial", "music", "version")
VIDEO_MARKER = "video"


class CandidateKind(StrEnum):
    """YouTube resource kinds returned by ``search.list``."""

    VIDEO = "youtube#video"
    CHANNEL = "youtube#channel"


@dataclass(frozen=True)
class Candidate:
    """One search result, not yet confirmed as the right entity."""

    id: str
    title: str
    channel: str = ""
    kind: CandidateKind = CandidateKind.VIDEO
    item: YoutubeSearchItem | None = field(default=None, compare=False, repr=False)


def candidates_from_search(payload: Any, kind: CandidateKind) -> list[Candidate]:
    """
    Build candidates from a YouTube ``search.list`` response.

    Keeps only items of the requested kind that carry an identifier, in
    provider order.

    Args:
        payload: Raw search response (or its ``items`` list)
        kind: Resource kind to keep

    Returns:
        Candidates in the order the provider returned them
    """
    candidates: list[Candidate] = []
    for item in parse_youtube_search(payload):
        if item.id is None or item.id.kind != kind:
            continue
        resource_id = item.id.video_id if kind == CandidateKind.VIDEO else item.id.channel_id
        if not resource_id:
            continue
        snippet = item.snippet
        candidates.append(
            Candidate(
                id=resource_id,
                title=(snippet.title if snippet else None) or "",
                channel=(snippet.channel_title if snippet else None) or "",
                kind=kind,
                item=item,
            )
        )
    logger.debug(f"Built {len(candidates)} {kind.value} candidates from search payload")
    return candidates


def is_promotional_video(normalized_title: str) -> bool:
    """True if a normalized title reads like an official/music video upload."""
    return VIDEO_MARKER in normalized_title and any(
        marker in normalized_title for marker in PROMOTIONAL_MARKERS
    )


def score_video(normalized_title: str, normalized_artist: str, candidate: Candidate) -> float:
    """Mean of title and channel similarity for one video candidate."""
    candidate_title = normalize_text(candidate.title)
    candidate_channel = normalize_text(candidate.channel)

    title_without_artist = candidate_title.replace(normalized_artist, "", 1).strip()

    title_sim = similarity(normalized_title, title_without_artist)
    artist_sim = similarity(normalized_artist, candidate_channel)
    return (title_sim + artist_sim) / 2


def select_best_video(
    target_title: str, target_artist: str, candidates: Sequence[Candidate]
) -> Candidate | None:
    """
    Select the video that best matches a track.

    Args:
        target_title: Track title from the primary source
        target_artist: Artist name from the primary source
        candidates: Video candidates in provider order

    Returns:
        The selected candidate, or None when the list is empty
    """
    if not candidates:
        return None

    for index, candidate in enumerate(candidates):
        if is_promotional_video(normalize_text(candidate.title)):
            logger.debug(f"Override: candidate {index} ({candidate.title!r}) is an official video")
            return candidate

    normalized_title = normalize_text(target_title)
    normalized_artist = normalize_text(target_artist)

    best = max(candidates, key=lambda c: score_video(normalized_title, normalized_artist, c))
    logger.debug(
        f"Best video for {target_artist!r} - {target_title!r}: {best.title!r} "
        f"(score={score_video(normalized_title, normalized_artist, best):.3f})"
    )
    return best


def select_best_channel(target_artist: str, candidates: Sequence[Candidate]) -> Candidate | None:
    """
    Select the channel whose name best matches an artist.

    Args:
        target_artist: Artist name from the primary source
        candidates: Channel candidates in provider order

    Returns:
        The highest-scoring candidate (first seen on ties), or None when empty
    """
    if not candidates:
        return None

    normalized_artist = normalize_text(target_artist)
    best = max(candidates, key=lambda c: similarity(normalized_artist, normalize_text(c.title)))
    logger.debug(f"Best channel for {target_artist!r}: {best.title!r}")
    return best
