"""tagcache CLI - inspect and maintain the local lookup cache."""

import asyncio
from importlib.metadata import version
from pathlib import Path
from typing import Annotated

from rich.console import Console
import typer

from tagcache.config import get_logger, log_startup_info, settings, setup_loguru_logger
from tagcache.infrastructure.cli.ui import (
    command_error_handler,
    render_counts,
    render_fingerprint,
    render_recording,
)
from tagcache.infrastructure.persistence.database.db_connection import CacheStore
from tagcache.infrastructure.persistence.repositories import (
    FingerprintCache,
    RecordingCache,
)

VERSION = version("tagcache")

console = Console()
logger = get_logger(__name__)

app = typer.Typer(
    help=f"tagcache v{VERSION} - local AcoustID / MusicBrainz lookup cache",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)


def _base_path(ctx: typer.Context) -> Path | None:
    return (ctx.obj or {}).get("path")


@app.callback()
def init_cli(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Directory holding the cache file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize tagcache CLI."""
    ctx.ensure_object(dict)
    ctx.obj["path"] = path
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)
    log_startup_info()


@app.command(name="version")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold bright_blue]tagcache[/bold bright_blue] [dim]v{VERSION}[/dim]")


@app.command()
@command_error_handler
def info(ctx: typer.Context) -> None:
    """Show cache location, TTL and row counts."""

    async def _run() -> tuple[Path, dict[str, int]]:
        async with await CacheStore.open(_base_path(ctx)) as store:
            return store.db_path, await store.row_counts()

    db_path, counts = asyncio.run(_run())
    console.print(f"[bold]Database:[/bold] {db_path}")
    ttl = settings.cache.ttl_days
    console.print(f"[bold]TTL:[/bold] {f'{ttl} days' if ttl > 0 else 'disabled'}")
    console.print(render_counts("Cached rows", counts))


@app.command()
@command_error_handler
def purge(ctx: typer.Context) -> None:
    """Delete expired rows now."""

    async def _run() -> dict[str, int]:
        async with await CacheStore.open(_base_path(ctx), sweep_on_open=False) as store:
            return await store.policy.sweep(store)

    deleted = asyncio.run(_run())
    if not deleted:
        console.print("[yellow]Nothing to purge (expiry disabled or no expired rows)[/yellow]")
        return
    console.print(render_counts("Purged rows", deleted))


@app.command()
@command_error_handler
def clear(
    ctx: typer.Context,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")
    ] = False,
) -> None:
    """Delete every cached row."""
    if not yes:
        typer.confirm("Delete all cached lookups?", abort=True)

    async def _run() -> dict[str, int]:
        async with await CacheStore.open(_base_path(ctx)) as store:
            return await store.clear()

    console.print(render_counts("Deleted rows", asyncio.run(_run())))


@app.command(name="show-fingerprint")
@command_error_handler
def show_fingerprint(
    ctx: typer.Context,
    fingerprint: Annotated[str, typer.Argument(help="Fingerprint string")],
    duration: Annotated[int, typer.Argument(help="Duration in seconds")],
) -> None:
    """Print the cached candidates for a fingerprint."""

    async def _run():
        async with await CacheStore.open(_base_path(ctx)) as store:
            return await FingerprintCache(store).get(fingerprint, duration)

    lookup = asyncio.run(_run())
    if lookup is None:
        console.print("[yellow]miss[/yellow]")
        raise typer.Exit(code=1)
    console.print(render_fingerprint(lookup))


@app.command(name="show-recording")
@command_error_handler
def show_recording(
    ctx: typer.Context,
    recording_id: Annotated[str, typer.Argument(help="Recording ID (UUID)")],
) -> None:
    """Print the cached metadata for a recording."""

    async def _run():
        async with await CacheStore.open(_base_path(ctx)) as store:
            return await RecordingCache(store).get(recording_id)

    recording = asyncio.run(_run())
    if recording is None:
        console.print("[yellow]miss[/yellow]")
        raise typer.Exit(code=1)
    console.print(render_recording(recording))


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
