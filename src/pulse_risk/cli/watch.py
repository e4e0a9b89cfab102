"""``pulse-risk watch``: re-scan and re-print whenever sources change."""

import threading
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import PulseError
from ..logging_config import setup_logging
from ..models import ScanResult
from ..watcher import watch as start_watching
from . import app
from ._common import console, fail, render_result, resolve_config


@app.command()
def watch(
    path: Optional[Path] = typer.Argument(
        None,
        help="Project root to watch (default: from config, else the current directory)",
        show_default=False,
    ),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    top: Optional[int] = typer.Option(
        20,
        "--top",
        "-n",
        help="Show only the N riskiest files",
        min=1,
    ),
    workers: Optional[int] = typer.Option(None, "-w", "--workers", help="Parallel workers", min=1),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
) -> None:
    """
    Scan a project, then re-scan after every burst of source changes.

    Runs until interrupted with Ctrl+C.
    """
    setup_logging(verbose=verbose, quiet=quiet)
    settings = resolve_config(path, config, workers)

    def show(result: ScanResult) -> None:
        render_result(result, settings, top=top)
        console.print("[dim]Watching for changes. Press Ctrl+C to stop[/dim]")

    try:
        watcher = start_watching(settings.project_root, settings, on_result=show)
    except PulseError as e:
        fail(e)

    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        console.print("\n[dim]Stopped.[/dim]")
