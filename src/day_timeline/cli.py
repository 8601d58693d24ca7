"""Command-line interface for the day timeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import TimelineSettings
from .engine import TimelineEngine
from .models import MalformedSnapshot
from .paths import get_snapshot_path
from .snapshot import format_snapshot, read_snapshot_file

app = typer.Typer(help="Hour-by-hour activity timeline for the current day.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _restore_engine(snapshot_path: Optional[Path]) -> TimelineEngine:
    engine = TimelineEngine()
    try:
        snapshot = read_snapshot_file(snapshot_path or get_snapshot_path())
        if snapshot is not None:
            engine.initialize(snapshot)
    except MalformedSnapshot as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return engine


@app.command()
def summary(
    snapshot_path: Optional[Path] = typer.Option(
        None,
        "--snapshot",
        path_type=Path,
        help="Timeline snapshot to read. Defaults to the application data directory.",
    ),
) -> None:
    """Print the tracked hours and per-activity totals for today."""
    from .reporting import SummaryPrinter

    engine = _restore_engine(snapshot_path)
    SummaryPrinter(engine).print_daily_summary()


@app.command()
def reconcile(
    snapshot_path: Optional[Path] = typer.Option(
        None,
        "--snapshot",
        path_type=Path,
        help="Timeline snapshot to read. Defaults to the application data directory.",
    ),
) -> None:
    """Print the snapshot after crediting idle time and applying day resets."""
    engine = _restore_engine(snapshot_path)
    typer.echo(format_snapshot(engine.to_snapshot()))


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    snapshot_path: Optional[Path] = typer.Option(
        None,
        "--snapshot",
        path_type=Path,
        help="Timeline snapshot to restore on startup.",
    ),
    tick_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.1,
        help="Clock tick interval in seconds.",
    ),
    open_browser: bool = typer.Option(
        False,
        "--open-browser/--no-open-browser",
        help="Open the interactive API docs in your default browser.",
    ),
) -> None:
    """Serve the timeline API with a live clock ticker."""
    from .server_runner import run_dashboard

    settings = TimelineSettings.from_intervals(tick_seconds=tick_seconds, host=host, port=port)
    try:
        run_dashboard(
            snapshot_path=snapshot_path or get_snapshot_path(),
            settings=settings,
            open_browser=open_browser,
        )
    except MalformedSnapshot as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
