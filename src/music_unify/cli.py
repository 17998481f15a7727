"""CLI for music-unify using Typer and Rich.

Runs the aggregator over provider payloads saved as JSON files (as returned
by the Spotify, Last.fm and YouTube APIs) and prints the unified record.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from music_unify.aggregator import Aggregator
from music_unify.config import Config, OutputFormat
from music_unify.console import (
    print as cprint,
)
from music_unify.console import (
    print_error,
    print_json,
    set_console,
)
from music_unify.errors import (
    MissingPrimaryDataError,
    NoCandidatesError,
    NoMatchError,
    PayloadError,
)
from music_unify.matcher import (
    Candidate,
    CandidateKind,
    candidates_from_search,
    select_best_channel,
    select_best_video,
)
from music_unify.models import ArtistSummary, SearchKind, Source, TrackSummary
from music_unify.payload_files import FileCatalog, FileStats, FileVideos, load_payload
from music_unify.safe_logging import configure_rich_logging
from music_unify.sources import parse_spotify_search

logger = logging.getLogger(__name__)


class ExitCode:
    """Standard exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    NO_RESULTS = 2


app = typer.Typer(
    name="music-unify",
    help="Match and unify track/artist metadata from Spotify, Last.fm and YouTube",
    no_args_is_help=True,
    add_completion=False,
)


class AppState:
    """Global application state passed between commands."""

    config: Config
    output_format: OutputFormat
    verbose: int


state = AppState()

# Long URLs crowd the search table; JSON output keeps them
SUMMARY_HIDDEN = ("image", "url")


@app.callback()
def main(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Path to configuration TOML file", exists=True),
    ] = None,
    output: Annotated[
        OutputFormat | None,
        typer.Option("--output", "-o", help="Output format"),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--lenient", help="Fail when a candidate search is empty"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase verbosity"),
    ] = 0,
) -> None:
    """music-unify: cross-source track and artist metadata unification."""
    # Precedence: CLI > Env > Config File > Defaults
    cfg = Config.load(config_path)
    if output is not None:
        cfg.output.format = output
    if strict is not None:
        cfg.resolution.strict = strict

    if verbose >= 2:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = getattr(logging, cfg.logging.level.upper(), logging.WARNING)

    configure_rich_logging(level=log_level, format_string=cfg.logging.format)
    set_console(Console())

    if config_path:
        logger.info(f"Loaded config from {config_path}")
    logger.debug(f"Logging configured: level={logging.getLevelName(log_level)}")

    state.config = cfg
    state.output_format = cfg.output.format
    state.verbose = verbose


# ====================================================================
# HELPERS
# ====================================================================


def _aggregator(
    catalog: FileCatalog, stats: FileStats | None, search: Path | None, detail: Path | None
) -> Aggregator:
    """Build an aggregator over payload files; sources without files are skipped."""
    videos = None
    if search is not None:
        videos = FileVideos(search=search, detail=detail)
    elif detail is not None:
        logger.warning(
            f"Ignoring {detail}: a {Source.YOUTUBE} search payload is needed to match it"
        )
    return Aggregator(catalog, stats, videos, strict=state.config.resolution.strict)


def _flatten(record: dict[str, Any], prefix: str = "") -> Iterator[tuple[str, Any, str]]:
    """Yield (path, value, source) for every leaf of a serialized record."""
    for key, node in record.items():
        path = f"{prefix}{key}"
        if isinstance(node, dict) and set(node) == {"value", "source"}:
            yield path, node["value"], node["source"]
        elif isinstance(node, dict):
            yield from _flatten(node, prefix=f"{path}.")


def _display(value: Any) -> Text:
    if value is None:
        return Text("-", style="dim")
    if isinstance(value, list):
        names = [item.get("name", "") if isinstance(item, dict) else str(item) for item in value]
        return Text(", ".join(n for n in names if n))
    text = str(value)
    return Text(text if len(text) <= 120 else f"{text[:117]}...")


def _dump(data: Any) -> None:
    print_json(json.dumps(data, indent=state.config.output.json_indent or None))


def _emit(record: dict[str, Any], title: str, match: Candidate | None = None) -> None:
    if state.output_format == OutputFormat.JSON:
        _dump(record)
        return

    table = Table(title=escape(title))
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Source", style="magenta")
    for path, value, source in _flatten(record):
        table.add_row(path, _display(value), source)
    cprint(table)
    if match is not None:
        cprint(f"Matched {Source.YOUTUBE} candidate: {escape(match.id)} ({escape(match.title)})")


def _emit_candidate(candidate: Candidate) -> None:
    if state.output_format == OutputFormat.JSON:
        _dump({"id": candidate.id, "title": candidate.title, "channel": candidate.channel})
    else:
        cprint(
            f"[bold]{escape(candidate.id)}[/bold]  {escape(candidate.title)}  "
            f"[dim]{escape(candidate.channel)}[/dim]"
        )


def _emit_summaries(rows: Sequence[TrackSummary | ArtistSummary], kind: SearchKind) -> None:
    if state.output_format == OutputFormat.JSON:
        _dump([row.to_dict() for row in rows])
        return

    table = Table(title=f"{Source.SPOTIFY} {kind.value} search")
    columns = [name for name in rows[0].to_dict() if name not in SUMMARY_HIDDEN]
    for name in columns:
        table.add_column(name, style="cyan" if name == "id" else "", no_wrap=name == "id")
    for row in rows:
        data = row.to_dict()
        table.add_row(*(_display(data[name]) for name in columns))
    cprint(table)


# ====================================================================
# COMMANDS
# ====================================================================


@app.command()
def search(
    search_file: Annotated[
        Path, typer.Argument(help="Spotify search payload", exists=True, dir_okay=False)
    ],
    kind: Annotated[
        SearchKind, typer.Option("--type", "-t", help="Entity type to list")
    ] = SearchKind.TRACK,
) -> None:
    """List tracks or artists from a saved Spotify search payload."""
    try:
        rows = parse_spotify_search(load_payload(search_file), kind)
    except PayloadError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.ERROR) from e

    if not rows:
        print_error(f"No {Source.SPOTIFY} {kind.value} results in {search_file}")
        raise typer.Exit(ExitCode.NO_RESULTS)
    _emit_summaries(rows, kind)


@app.command()
def track(
    spotify: Annotated[
        Path, typer.Option(help="Spotify track payload (JSON)", exists=True, dir_okay=False)
    ],
    lastfm: Annotated[
        Path | None,
        typer.Option(help="Last.fm track.getInfo payload", exists=True, dir_okay=False),
    ] = None,
    youtube_search: Annotated[
        Path | None,
        typer.Option(help="YouTube video search payload", exists=True, dir_okay=False),
    ] = None,
    youtube_video: Annotated[
        Path | None,
        typer.Option(help="YouTube video detail payload", exists=True, dir_okay=False),
    ] = None,
) -> None:
    """Unify a track from saved provider payloads."""
    aggregator = _aggregator(
        FileCatalog(track=spotify),
        FileStats(track=lastfm) if lastfm else None,
        youtube_search,
        youtube_video,
    )
    try:
        result = aggregator.resolve_track(str(spotify))
    except NoCandidatesError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.NO_RESULTS) from e
    except (PayloadError, MissingPrimaryDataError, NoMatchError) as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.ERROR) from e

    record = result.record
    _emit(
        record.to_dict(),
        title=f"{record.artist.name.value} - {record.title.value}",
        match=result.video,
    )


@app.command()
def artist(
    spotify: Annotated[
        Path, typer.Option(help="Spotify artist payload (JSON)", exists=True, dir_okay=False)
    ],
    top_tracks: Annotated[
        Path | None,
        typer.Option(help="Spotify top-tracks payload", exists=True, dir_okay=False),
    ] = None,
    lastfm: Annotated[
        Path | None,
        typer.Option(help="Last.fm artist.getInfo payload", exists=True, dir_okay=False),
    ] = None,
    youtube_search: Annotated[
        Path | None,
        typer.Option(help="YouTube channel search payload", exists=True, dir_okay=False),
    ] = None,
    youtube_channel: Annotated[
        Path | None,
        typer.Option(help="YouTube channel detail payload", exists=True, dir_okay=False),
    ] = None,
) -> None:
    """Unify an artist from saved provider payloads."""
    aggregator = _aggregator(
        FileCatalog(artist=spotify, top_tracks=top_tracks),
        FileStats(artist=lastfm) if lastfm else None,
        youtube_search,
        youtube_channel,
    )
    try:
        result = aggregator.resolve_artist(str(spotify))
    except NoCandidatesError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.NO_RESULTS) from e
    except (PayloadError, MissingPrimaryDataError, NoMatchError) as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.ERROR) from e

    record = result.record
    _emit(record.to_dict(), title=str(record.name.value), match=result.channel)


@app.command("match-video")
def match_video(
    title: Annotated[str, typer.Argument(help="Track title")],
    artist_name: Annotated[str, typer.Argument(metavar="ARTIST", help="Artist name")],
    search_file: Annotated[
        Path, typer.Argument(help="YouTube video search payload", exists=True, dir_okay=False)
    ],
) -> None:
    """Pick the best video for a track from a saved search payload."""
    try:
        candidates = candidates_from_search(load_payload(search_file), CandidateKind.VIDEO)
    except PayloadError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.ERROR) from e

    best = select_best_video(title, artist_name, candidates)
    if best is None:
        print_error(str(NoCandidatesError(str(Source.YOUTUBE), f"{artist_name} {title}")))
        raise typer.Exit(ExitCode.NO_RESULTS)
    _emit_candidate(best)


@app.command("match-channel")
def match_channel(
    artist_name: Annotated[str, typer.Argument(metavar="ARTIST", help="Artist name")],
    search_file: Annotated[
        Path, typer.Argument(help="YouTube channel search payload", exists=True, dir_okay=False)
    ],
) -> None:
    """Pick the best channel for an artist from a saved search payload."""
    try:
        candidates = candidates_from_search(load_payload(search_file), CandidateKind.CHANNEL)
    except PayloadError as e:
        print_error(str(e))
        raise typer.Exit(ExitCode.ERROR) from e

    best = select_best_channel(artist_name, candidates)
    if best is None:
        print_error(str(NoCandidatesError(str(Source.YOUTUBE), artist_name)))
        raise typer.Exit(ExitCode.NO_RESULTS)
    _emit_candidate(best)


def run() -> None:
    """Console-script entry point."""
    app()
