"""Show CLI command: print one treemap frame to the terminal."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .. import api
from ..diagnostics import Diagnostics
from ..exceptions import DrillmapError
from ..logging_config import log_diagnostics_summary, setup_logging
from ..render import CellMeasurer, RenderCoordinator, TerminalSurface, terminal_config
from . import app
from ._common import (
    console,
    format_value,
    read_records,
    read_translations,
    resolve_config,
    with_layout,
)


def drill(coordinator: RenderCoordinator, keys: List[str]) -> List[str]:
    """Follow ``keys`` down from the root; returns the keys that had no match."""
    missing = []
    for key in keys:
        focus = coordinator.navigator.focus
        child = next((c for c in focus.children if c.key == key), None)
        if child is None or not coordinator.navigator.zoom_in(child):
            missing.append(key)
            break
    return missing


def legend_table(coordinator: RenderCoordinator) -> Table:
    weighted = coordinator.hierarchy.weighted
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("", width=2)
    navigator = coordinator.navigator
    table.add_column("Group" if navigator.at_root else escape(navigator.focus.key))
    table.add_column("Total" if weighted else "Count", justify="right")
    if weighted:
        table.add_column("Items", justify="right")
    table.add_column("Share", justify="right")

    focus_total = coordinator.navigator.focus.aggregate
    for entry in coordinator.legend():
        share = entry.value / focus_total * 100 if focus_total > 0 else 0.0
        row = [f"[{entry.color}]██[/]", escape(entry.label), format_value(entry.value)]
        if weighted:
            row.append(f"{entry.item_count:,}")
        row.append(f"{share:.1f}%")
        table.add_row(*row)
    return table


@app.command()
def show(
    data: Path = typer.Argument(..., help="JSON array of records"),
    group: List[str] = typer.Option(
        ..., "--group", "-g", help="Field to group by, once per level (outermost first)"
    ),
    weight: Optional[str] = typer.Option(
        None, "--weight", "-w", help="Numeric field to sum (default: count records)"
    ),
    path: List[str] = typer.Option(
        [], "--path", "-p", help="Group key to drill into, once per level"
    ),
    width: Optional[int] = typer.Option(None, "--width", help="Treemap width in cells", min=1),
    height: int = typer.Option(20, "--height", help="Treemap height in rows", min=1),
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
    Print the treemap for one drill-down level.

    [bold cyan]Examples:[/bold cyan]

      drillmap show items.json -g country -g item_set_title -w word_count

      drillmap show items.json -g country -g type -p Togo
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = with_layout(resolve_config(config), min_share, flat)
        settings = terminal_config(settings, width or console.width, height)
        records = read_records(data)
        surface = TerminalSurface()
        diagnostics = Diagnostics()
        coordinator = api.visualize(
            records,
            group,
            weight,
            config=settings,
            surface=surface,
            measurer=CellMeasurer(),
            translator=read_translations(translations),
            diagnostics=diagnostics,
        )

        missing = drill(coordinator, path)
        if missing:
            console.print(
                f"[yellow]No group named[/yellow] {escape(repr(missing[0]))} "
                "[yellow]at this level[/yellow]"
            )
            raise typer.Exit(1)

        scene = coordinator.render()
        console.print(" › ".join(f"[bold]{escape(c.label)}[/bold]" for c in scene.breadcrumb))
        console.print(surface)
        if not scene.is_empty:
            console.print()
            console.print(legend_table(coordinator))

        log_diagnostics_summary(diagnostics, logger)

    except typer.Exit:
        raise

    except DrillmapError as e:
        code = f" [{e.code.value}]" if e.code else ""
        logger.error(f"{e.__class__.__name__}{code}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
