"""drillmap TUI - interactive drill-down treemap.

Layout:
┌─────────────────────────────────────────────────────────────────────┐
│ DRILLMAP · 1,204 items · 3 levels · Total 8,120,400                 │
│ All > Togo                                                          │
├──────────────────────────────────────────────────┬──────────────────┤
│                                                  │ LEGEND           │
│   (treemap: click a group to drill in)           │ ██ A      66.7%  │
│                                                  │ ██ B      33.3%  │
│                                                  ├──────────────────┤
│                                                  │ (hover tooltip)  │
├──────────────────────────────────────────────────┴──────────────────┤
│ esc Back  r Home  q Quit                                            │
└─────────────────────────────────────────────────────────────────────┘

Terminal resizes arrive in bursts; the treemap view queues each size with
the coordinator and only lays out once the burst has been quiet for the
configured debounce window.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Sequence

from rich.markup import escape
from rich.table import Table
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.message import Message
from textual.timer import Timer
from textual.widgets import Footer, Static

from ..render import CellMeasurer, RenderCoordinator, TerminalSurface, terminal_config
from ..sync import TooltipData
from ._common import format_value

if TYPE_CHECKING:
    from rich.console import Console

    from ..config import VisualizationConfig
    from ..translation import Translator


# ══════════════════════════════════════════════════════════════════════════════
# Panels
# ══════════════════════════════════════════════════════════════════════════════


def tooltip_table(data: TooltipData) -> Table:
    table = Table.grid(padding=(0, 1))
    table.add_column(style="dim")
    table.add_column(justify="right")
    table.add_row(f"[{data.color}]██[/]", f"[bold]{escape(data.label)}[/bold]")
    for label, value in data.rows():
        table.add_row(label, value)
    return table


def legend_table(coordinator: RenderCoordinator) -> Table:
    table = Table.grid(padding=(0, 1))
    table.add_column(width=2)
    table.add_column()
    table.add_column(justify="right")
    for entry in coordinator.legend():
        table.add_row(f"[{entry.color}]██[/]", escape(entry.label), format_value(entry.value))
    return table


# ══════════════════════════════════════════════════════════════════════════════
# Treemap View
# ══════════════════════════════════════════════════════════════════════════════


class TreemapView(Static):
    """Draws the coordinator's scene and turns mouse input into navigation."""

    class Navigated(Message):
        """The focus changed after a click."""

    class Hovered(Message):
        def __init__(self, data: Optional[TooltipData]) -> None:
            super().__init__()
            self.data = data

    def __init__(self, coordinator: RenderCoordinator, surface: TerminalSurface) -> None:
        super().__init__(id="treemap")
        self.coordinator = coordinator
        self.surface = surface
        self._resize_timer: Optional[Timer] = None
        self._sized = False

    def redraw(self) -> None:
        self.coordinator.render()
        self.update(self.surface.to_text())

    def on_resize(self, event: events.Resize) -> None:
        width, height = event.size.width, event.size.height
        if not self._sized:
            # First size: lay out immediately
            self._sized = True
            self.coordinator.resize(width, height)
            self.redraw()
            return

        generation = self.coordinator.notify_resize(width, height)
        if self._resize_timer is not None:
            self._resize_timer.stop()
        self._resize_timer = self.set_timer(
            self.coordinator.config.resize_debounce_seconds,
            lambda: self._apply_resize(generation),
        )

    def _apply_resize(self, generation: int) -> None:
        self._resize_timer = None
        if self.coordinator.flush_resize(generation):
            self.redraw()

    def on_click(self, event: events.Click) -> None:
        if self.coordinator.click_at(event.x, event.y):
            self.post_message(self.Navigated())

    def on_mouse_move(self, event: events.MouseMove) -> None:
        self.post_message(self.Hovered(self.coordinator.hover_at(event.x, event.y)))

    def on_leave(self, event: events.Leave) -> None:
        self.coordinator.tooltips.clear()
        self.post_message(self.Hovered(None))


# ══════════════════════════════════════════════════════════════════════════════
# Main Application
# ══════════════════════════════════════════════════════════════════════════════


class TreemapApp(App):
    """Interactive drill-down treemap."""

    TITLE = "drillmap"

    CSS = """
    Screen {
        background: $surface;
    }

    #header-bar {
        dock: top;
        height: 2;
        padding: 0 1;
        background: $primary-background;
    }

    #body {
        width: 100%;
        height: 1fr;
    }

    #treemap {
        width: 1fr;
        height: 100%;
    }

    #sidebar {
        width: 34;
        height: 100%;
        padding: 0 1;
        border-left: solid $primary;
    }

    #legend {
        height: auto;
    }

    #tooltip {
        height: auto;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "back", "Back", priority=True),
        Binding("b", "back", "Back", show=False),
        Binding("r", "home", "Home"),
    ]

    def __init__(self, coordinator: RenderCoordinator, surface: TerminalSurface) -> None:
        super().__init__()
        self.coordinator = coordinator
        self.surface = surface

    def compose(self) -> ComposeResult:
        hierarchy = self.coordinator.hierarchy
        root = hierarchy.root
        with Container(id="header-bar"):
            yield Static(
                f"[bold cyan]DRILLMAP[/bold cyan] · {root.item_count:,} items · "
                f"{hierarchy.levels} levels · Total {format_value(root.aggregate)}",
                id="header-title",
            )
            yield Static("", id="breadcrumb")

        with Horizontal(id="body"):
            yield TreemapView(self.coordinator, self.surface)
            with Vertical(id="sidebar"):
                yield Static("", id="legend")
                yield Static("", id="tooltip")

        yield Footer()

    def on_mount(self) -> None:
        self._update_panels()
        self.notify("Click a group to drill in · Esc to go back", title="drillmap", timeout=4)

    def _update_panels(self) -> None:
        crumbs = self.coordinator.navigator.breadcrumb(self.coordinator.translator)
        self.query_one("#breadcrumb", Static).update(
            " > ".join(f"[bold]{escape(c.label)}[/bold]" for c in crumbs)
        )
        legend = self.query_one("#legend", Static)
        legend.update(legend_table(self.coordinator))

    def _refresh(self) -> None:
        self.query_one(TreemapView).redraw()
        self._update_panels()

    def on_treemap_view_navigated(self, message: TreemapView.Navigated) -> None:
        self._refresh()

    def on_treemap_view_hovered(self, message: TreemapView.Hovered) -> None:
        tooltip = self.query_one("#tooltip", Static)
        tooltip.update(tooltip_table(message.data) if message.data is not None else "")

    def action_back(self) -> None:
        if self.coordinator.back():
            self._refresh()

    def action_home(self) -> None:
        if not self.coordinator.navigator.at_root:
            self.coordinator.home()
            self._refresh()


# ══════════════════════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════════════════════


def build_app(
    records: Sequence[Any],
    group_by: Sequence[str],
    weight: Optional[str],
    settings: VisualizationConfig,
    translator: Optional[Translator] = None,
) -> TreemapApp:
    from .. import api

    surface = TerminalSurface()
    coordinator = api.visualize(
        records,
        group_by,
        weight,
        config=terminal_config(settings),
        surface=surface,
        measurer=CellMeasurer(),
        translator=translator,
    )
    return TreemapApp(coordinator, surface)


def run_tui(
    records: Sequence[Any],
    group_by: Sequence[str],
    weight: Optional[str],
    settings: VisualizationConfig,
    translator: Optional[Translator] = None,
    console: Optional[Console] = None,
) -> None:
    """Build the tree and launch the TUI."""
    import sys

    from rich.console import Console

    console = console or Console()

    if not sys.stdin.isatty():
        console.print("[red]TUI requires interactive terminal. Use 'drillmap show'.[/]")
        raise SystemExit(1)

    app = build_app(records, group_by, weight, settings, translator)
    try:
        app.run()
    except KeyboardInterrupt:
        console.print("\n[dim]Exited.[/]")
