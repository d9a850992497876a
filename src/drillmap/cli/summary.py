"""Summary CLI command: print the grouping tree."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.tree import Tree

from .. import api
from ..diagnostics import Diagnostics
from ..exceptions import DrillmapError
from ..hierarchy import Hierarchy, HierarchyNode
from ..logging_config import log_diagnostics_summary, setup_logging
from ..render import ColorScheme
from . import app
from ._common import console, format_value, node_to_dict, read_records, resolve_config


def build_tree(hierarchy: Hierarchy, max_depth: Optional[int] = None) -> Tree:
    colors = ColorScheme(keys=[c.key for c in hierarchy.root.children])

    def label(node: HierarchyNode) -> str:
        parent = hierarchy.parent(node)
        share = ""
        if parent is not None and parent.aggregate > 0:
            share = f" [dim]{node.aggregate / parent.aggregate * 100:.1f}%[/dim]"
        swatch = "" if parent is None else f"[{colors.color_for(node)}]■[/] "
        items = f" [dim]({node.item_count:,} items)[/dim]" if hierarchy.weighted else ""
        value = format_value(node.aggregate)
        return f"{swatch}[bold]{escape(node.key)}[/bold] {value}{items}{share}"

    def add(branch: Tree, node: HierarchyNode) -> None:
        if max_depth is not None and node.depth >= max_depth:
            return
        for child in node.children:
            add(branch.add(label(child)), child)

    tree = Tree(label(hierarchy.root))
    add(tree, hierarchy.root)
    return tree


@app.command()
def summary(
    data: Path = typer.Argument(..., help="JSON array of records"),
    group: List[str] = typer.Option(
        ..., "--group", "-g", help="Field to group by, once per level (outermost first)"
    ),
    weight: Optional[str] = typer.Option(
        None, "--weight", "-w", help="Numeric field to sum (default: count records)"
    ),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Levels to show", min=1),
    json_output: bool = typer.Option(
        False, "--json", help="Output in machine-readable JSON format"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """
    Show aggregates and shares for every group.

    [bold cyan]Examples:[/bold cyan]

      drillmap summary items.json -g country -g type

      drillmap summary items.json -g language --json
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config)
        records = read_records(data)
        diagnostics = Diagnostics()
        hierarchy = api.build_hierarchy(
            records, group, weight, config=settings, diagnostics=diagnostics
        )

        if json_output:
            payload = node_to_dict(hierarchy.root, hierarchy)
            payload["diagnostics"] = [issue.to_json() for issue in diagnostics.records]
            console.print_json(json.dumps(payload))
            return

        console.print(build_tree(hierarchy, depth))
        log_diagnostics_summary(diagnostics, logger)

    except DrillmapError as e:
        code = f" [{e.code.value}]" if e.code else ""
        logger.error(f"{e.__class__.__name__}{code}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
