"""CLI entry point, registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="drillmap",
    help="drillmap - drill-down treemaps over grouped records",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]drillmap[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Drill-down treemaps over grouped records."""


# Import subcommands to register them
from .show import show as _show  # noqa: F401, E402
from .summary import summary as _summary  # noqa: F401, E402
from .browse import browse as _browse  # noqa: F401, E402
