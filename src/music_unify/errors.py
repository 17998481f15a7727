"""Exception hierarchy for music-unify.

The matcher and unifier never raise for data-shape reasons; these exceptions
are raised by the aggregation layer and the CLI when a resolution cannot
continue.
"""

from __future__ import annotations


class UnifyError(Exception):
    """Base class for all music-unify errors."""


class NoCandidatesError(UnifyError):
    """A source search returned no usable candidates."""

    def __init__(self, source: str, query: str | None = None):
        self.source = source
        self.query = query
        detail = f" for query {query!r}" if query else ""
        super().__init__(f"No {source} candidates found{detail}")


class NoMatchError(UnifyError):
    """Candidates existed but none was selected."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"Best matching {source} candidate not found")


class MissingPrimaryDataError(UnifyError):
    """The primary record lacks the identity needed to query other sources."""


class PayloadError(UnifyError):
    """A provider payload could not be read or decoded."""
