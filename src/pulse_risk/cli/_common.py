"""Shared CLI helpers."""

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import PulseConfig, load_config
from ..exceptions import ConfigNotFoundError, PulseError
from ..models import ScanResult

console = Console()

_LEVEL_STYLES = {
    "alert": "bold red",
    "warning": "yellow",
    "ok": "green",
}


def resolve_config(
    path: Optional[Path] = None,
    config: Optional[Path] = None,
    workers: Optional[int] = None,
) -> PulseConfig:
    """Build configuration from CLI options.

    Without a PATH argument the project root comes from the config file, or
    the current directory when no config file exists. Configuration errors
    end the command with exit code 1.
    """
    project_root = str(path.resolve()) if path is not None else None
    try:
        try:
            return load_config(config_file=config, project_root=project_root, workers=workers)
        except ConfigNotFoundError:
            if config is not None:
                raise
            return load_config(project_root=str(Path.cwd()), workers=workers)
    except PulseError as e:
        fail(e)


def fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _relative(path: str, root: str) -> str:
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return path


def render_result(result: ScanResult, config: PulseConfig, top: Optional[int] = None) -> None:
    """Print a scan as a table, highest risk first."""
    rows = result.files if top is None else result.files[:top]

    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("File", overflow="fold")
    table.add_column("Risk", justify="right")
    table.add_column("Cx", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Churn", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Params", justify="right")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")

    for r in rows:
        style = _LEVEL_STYLES[config.thresholds.level(r.global_score)]
        table.add_row(
            _relative(r.file_path, result.project_root),
            f"[{style}]{r.global_score:.1f}[/{style}]",
            f"{r.complexity_score:.0f}",
            f"{r.function_size_score:.0f}",
            f"{r.churn_score:.0f}",
            f"{r.depth_score:.0f}",
            f"{r.param_score:.0f}",
            str(r.fan_in),
            str(r.fan_out),
        )

    console.print()
    console.print(
        f"[bold cyan]RISK[/bold cyan] -- {len(result.files)} files, "
        f"{len(result.edges)} connections"
    )
    console.print(table)

    alerts = sum(1 for r in result.files if config.thresholds.level(r.global_score) == "alert")
    warnings = sum(1 for r in result.files if config.thresholds.level(r.global_score) == "warning")
    summary = f"[bold red]{alerts}[/bold red] alert(s), [yellow]{warnings}[/yellow] warning(s)"
    if top is not None and len(result.files) > top:
        summary += f" [dim](showing top {top} of {len(result.files)})[/dim]"
    console.print(summary)

    if result.failures:
        console.print(f"[dim]{len(result.failures)} file(s) skipped:[/dim]")
        for failure in result.failures:
            console.print(f"  [dim]{_relative(failure.file_path, result.project_root)}: {failure.reason}[/dim]")


def write_json(result: ScanResult, destination: Path) -> None:
    destination.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")
    console.print(f"[dim]Wrote {destination}[/dim]")
