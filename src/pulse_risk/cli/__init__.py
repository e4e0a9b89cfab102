"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="pulse-risk",
    help="Pulse Risk - per-file risk scores for TypeScript, JavaScript and Python projects",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"pulse-risk {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Score every source file by complexity, size, nesting, parameters and churn."""


# Import subcommands to register them
from .scan import scan as _scan  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
