__all__ = (
    "run",
    "Config",
    "Aggregator",
    "ArtistResolution",
    "TrackResolution",
    # Matching
    "Candidate",
    "CandidateKind",
    "candidates_from_search",
    "select_best_channel",
    "select_best_video",
    # Unification
    "ARTIST_PRECEDENCE",
    "TRACK_PRECEDENCE",
    "FieldCategory",
    "FieldValue",
    "Source",
    "UnifiedArtist",
    "UnifiedTrack",
    "unify_artist",
    "unify_track",
    # Search
    "ArtistSummary",
    "SearchKind",
    "TrackSummary",
    "parse_spotify_search",
    # Normalization
    "format_count",
    "format_duration",
    "normalize_description",
    "normalize_text",
    "similarity",
    # Errors
    "MissingPrimaryDataError",
    "NoCandidatesError",
    "NoMatchError",
    "PayloadError",
    "UnifyError",
)

from music_unify.aggregator import Aggregator, ArtistResolution, TrackResolution
from music_unify.cli import run
from music_unify.config import Config
from music_unify.errors import (
    MissingPrimaryDataError,
    NoCandidatesError,
    NoMatchError,
    PayloadError,
    UnifyError,
)
from music_unify.matcher import (
    Candidate,
    CandidateKind,
    candidates_from_search,
    select_best_channel,
    select_best_video,
)
from music_unify.models import (
    ArtistSummary,
    FieldValue,
    SearchKind,
    Source,
    TrackSummary,
    UnifiedArtist,
    UnifiedTrack,
)
from music_unify.normalize import (
    format_count,
    format_duration,
    normalize_description,
    normalize_text,
    similarity,
)
from music_unify.sources import parse_spotify_search
from music_unify.unify import (
    ARTIST_PRECEDENCE,
    TRACK_PRECEDENCE,
    FieldCategory,
    unify_artist,
    unify_track,
)
