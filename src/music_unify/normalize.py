"""
Text normalization, similarity scoring and value formatting.

Everything here is pure and total: malformed input degrades to an empty
string or ``None`` rather than raising.
"""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

_STRIP_PATTERN = re.compile(r"[^a-z0-9\s]")

# P0D, or PT#H#M#S with at least one component after T. Hours fold into minutes.
_DURATION_TOKEN = re.compile(
    r"^P(?=.)(?:0D)?(?:T(?=\d)(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$", re.IGNORECASE
)

ANCHOR_MARKER = "<a"


def normalize_text(text: str | None) -> str:
    """
    Normalize a title or name for comparison.

    Lowercases, drops every character that is not an ASCII letter, digit or
    whitespace, then trims. Idempotent.
    """
    if not text:
        return ""
    return _STRIP_PATTERN.sub("", text.lower()).strip()


def similarity(a: str, b: str) -> float:
    """
    Similarity of two already-normalized strings in [0, 1].

    Computed as ``1 - levenshtein(a, b) / max(len(a), len(b))``. Two empty
    strings are identical (1.0); an empty string against a non-empty one
    scores 0.0.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / longest


def normalize_description(text: str | None) -> str | None:
    """Strip the trailing "read more" anchor and everything after it."""
    if text:
        anchor_index = text.rfind(ANCHOR_MARKER)
        if anchor_index != -1:
            return text[:anchor_index].strip()
    return text


def format_duration(duration: int | str | None) -> str | None:
    """
    Format a duration as ``MM:SS``.

    Accepts milliseconds (int or digit string) or an ISO-8601 duration token
    such as ``PT4M57S``. Minutes are never rolled over into hours.

    Returns:
        The formatted duration, or None when the input is missing or unparseable
    """
    if duration is None or isinstance(duration, bool):
        return None

    if isinstance(duration, str) and duration.strip().isdigit():
        duration = int(duration.strip())

    if isinstance(duration, int):
        if duration < 0:
            return None
        total_seconds = duration // 1000
        return _mm_ss(total_seconds // 60, total_seconds % 60)

    if not isinstance(duration, str):
        return None

    match = _DURATION_TOKEN.match(duration.strip())
    if not match:
        return None
    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return _mm_ss(hours * 60 + minutes, seconds)


def _mm_ss(minutes: int, seconds: int) -> str:
    return f"{minutes:02d}:{seconds:02d}"


def format_count(count: int | None) -> str | None:
    """Group a count into thousands with a comma separator."""
    if count is None or isinstance(count, bool):
        return None
    return f"{count:,}"
