"""Browse CLI command: interactive treemap."""

from pathlib import Path
from typing import List, Optional

import typer

from ..exceptions import DrillmapError
from ..logging_config import setup_logging
from . import app
from ._common import console, read_records, read_translations, resolve_config, with_layout


@app.command()
def browse(
    data: Path = typer.Argument(..., help="JSON array of records"),
    group: List[str] = typer.Option(
        ..., "--group", "-g", help="Field to group by, once per level (outermost first)"
    ),
    weight: Optional[str] = typer.Option(
        None, "--weight", "-w", help="Numeric field to sum (default: count records)"
    ),
    min_share: Optional[float] = typer.Option(
        None,
        "--min-share",
        help="Hide groups below this share of the focus (0-1)",
        min=0.0,
        max=0.99,
    ),
    flat: bool = typer.Option(False, "--flat", help="Do not tile the next level inside groups"),
    translations: Optional[Path] = typer.Option(
        None, "--translations", "-t", help="JSON object mapping keys to display labels"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """
    Browse the treemap interactively.

    Click a group to drill in, [bold]Esc[/bold]/[bold]b[/bold] to go back,
    [bold]r[/bold] for the root, [bold]q[/bold] to quit.

    [bold cyan]Examples:[/bold cyan]

      drillmap browse items.json -g country -g item_set_title -w word_count
    """
    from .tui import run_tui

    logger = setup_logging(verbose=verbose)

    try:
        settings = with_layout(resolve_config(config), min_share, flat)
        records = read_records(data)
        run_tui(
            records,
            group,
            weight,
            settings,
            translator=read_translations(translations),
            console=console,
        )
    except DrillmapError as e:
        code = f" [{e.code.value}]" if e.code else ""
        logger.error(f"{e.__class__.__name__}{code}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
