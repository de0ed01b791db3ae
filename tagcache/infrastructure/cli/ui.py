"""UI helpers for the cache CLI.

Keeps presentation (rich tables, error messages) out of the command bodies.
"""

from collections.abc import Callable
import functools
from typing import ParamSpec, TypeVar

from rich.console import Console
from rich.table import Table
import typer

from tagcache.config import get_logger
from tagcache.domain.entities import CachedFingerprintLookup, CachedRecording

console = Console()
logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def command_error_handler(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Logs the failure with context, prints a short message and exits with
    code 1. `typer.Exit` and `typer.Abort` pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except typer.Exit:
                raise

            except typer.Abort:
                logger.info(f"Operation {operation} aborted by user")
                raise

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def render_counts(title: str, counts: dict[str, int]) -> Table:
    """Two-column table of per-table row counts."""
    table = Table(title=title)
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right", style="bold")
    for name, count in counts.items():
        table.add_row(name, str(count))
    return table


def render_fingerprint(lookup: CachedFingerprintLookup) -> Table:
    """Candidate table for a cached fingerprint, best score first."""
    table = Table(title=f"Fingerprint ({lookup.duration}s) cached {lookup.cached_at:%Y-%m-%d %H:%M}")
    table.add_column("Recording ID", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right")
    for candidate in sorted(lookup.candidates, key=lambda c: c.score, reverse=True):
        table.add_row(candidate.recording_id, f"{candidate.score:.2f}")
    return table


def render_recording(recording: CachedRecording) -> Table:
    """Field/value table summarizing a cached recording."""
    table = Table(title=f"Recording {recording.recording_id}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Title", recording.title)
    table.add_row("Artist", recording.display_artist)
    table.add_row("Album", recording.album_title or "-")
    table.add_row("Release date", recording.release_date or "-")
    table.add_row("Disambiguation", recording.disambiguation or "-")
    table.add_row("ISRCs", ", ".join(recording.isrcs) or "-")
    if recording.rating is not None and recording.rating.value is not None:
        table.add_row(
            "Rating", f"{recording.rating.value} ({recording.rating.votes_count} votes)"
        )
    table.add_row("Releases", str(len(recording.releases)))
    table.add_row("Cached at", f"{recording.cached_at:%Y-%m-%d %H:%M}")
    return table
