"""``pulse-risk scan``: one full scan, printed as a risk table."""

from pathlib import Path
from typing import Optional

import typer

from ..analysis import Scanner
from ..exceptions import PulseError
from ..logging_config import setup_logging
from . import app
from ._common import console, fail, render_result, resolve_config, write_json


@app.command()
def scan(
    path: Optional[Path] = typer.Argument(
        None,
        help="Project root to scan (default: from config, else the current directory)",
        show_default=False,
    ),
    config: Optional[Path] = typer.Option(None, "-c", "--config", help="Config file"),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        help="Show only the N riskiest files",
        min=1,
    ),
    json_file: Optional[Path] = typer.Option(
        None,
        "--json",
        help="Also write the full result as JSON to this file",
    ),
    workers: Optional[int] = typer.Option(None, "-w", "--workers", help="Parallel workers", min=1),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only log errors"),
) -> None:
    """
    Scan a project once and rank its files by risk.

    [bold cyan]Examples:[/bold cyan]

      pulse-risk scan

      pulse-risk scan ./web --top 20

      pulse-risk scan --json risk.json
    """
    setup_logging(verbose=verbose, quiet=quiet)
    settings = resolve_config(path, config, workers)

    try:
        with console.status(f"[cyan]Scanning {settings.project_root}..."):
            result = Scanner(settings).scan()
    except PulseError as e:
        fail(e)

    render_result(result, settings, top=top)
    if json_file is not None:
        write_json(result, json_file)
