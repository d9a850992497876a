"""Character-grid surface rendered with rich.

One layout unit is one terminal cell. Cells are painted in scene order, so
nested cells overwrite their group's background and the group keeps its
label band on top.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from rich.cells import cell_len
from rich.console import Console, ConsoleOptions, RenderResult
from rich.text import Text

from ..config import LabelConfig, LayoutConfig, VisualizationConfig
from .colors import readable_text_color
from .scene import Scene

BACKGROUND = "#1e1e1e"


def terminal_config(
    base: VisualizationConfig, width: Optional[int] = None, height: Optional[int] = None
) -> VisualizationConfig:
    """Scale the pixel-oriented spacing of ``base`` down to terminal cells."""
    return replace(
        base,
        width=float(width if width is not None else 80),
        height=float(height if height is not None else 24),
        layout=LayoutConfig(
            margin=0.0,
            padding_outer=1.0,
            padding_top=1.0,
            padding_inner=0.0,
            show_nested=base.layout.show_nested,
            min_share=base.layout.min_share,
        ),
        labels=LabelConfig(
            group_min_width=4.0,
            group_min_height=1.0,
            leaf_min_width=3.0,
            leaf_min_height=1.0,
            inset=0.0,
            font_size=1.0,
            ellipsis="…",
        ),
    )


def _snap(value: float, limit: int) -> int:
    return min(limit, max(0, int(round(value))))


def _write(row: list[tuple[str, str]], start: int, end: int, text: str, style: str) -> None:
    """Write ``text`` into ``row[start:end]``, clipped by terminal cell width.

    A double-width character takes two slots; the second holds an empty
    string so every row keeps the same rendered width.
    """
    x = start
    for char in text:
        width = cell_len(char)
        if width == 0:
            if x > start:
                prev, _ = row[x - 1]
                row[x - 1] = (prev + char, style)
            continue
        if x + width > end:
            break
        row[x] = (char, style)
        for pad in range(x + 1, x + width):
            row[pad] = ("", style)
        x += width


class TerminalSurface:
    """Rasterises the last drawn scene; ``console.print(surface)`` shows it."""

    def __init__(self, background: str = BACKGROUND) -> None:
        self.background = background
        self.scene: Optional[Scene] = None
        self._grid: list[list[tuple[str, str]]] = []

    def draw(self, scene: Scene) -> None:
        self.scene = scene
        cols, rows = int(scene.width), int(scene.height)
        blank = (" ", f"on {self.background}")
        grid = [[blank] * cols for _ in range(rows)]

        for cell in scene.cells:
            x0, x1 = _snap(cell.rect.x0, cols), _snap(cell.rect.x1, cols)
            y0, y1 = _snap(cell.rect.y0, rows), _snap(cell.rect.y1, rows)
            if x1 <= x0 or y1 <= y0:
                continue
            fill = f"on {cell.fill}"
            for y in range(y0, y1):
                grid[y][x0:x1] = [(" ", fill)] * (x1 - x0)
            if cell.label:
                style = f"{'bold ' if cell.is_group else ''}{readable_text_color(cell.fill)} {fill}"
                _write(grid[y0], x0, x1, cell.label, style)

        if scene.message and rows and cols:
            start = max(0, (cols - cell_len(scene.message)) // 2)
            _write(grid[rows // 2], start, cols, scene.message, f"bold white on {self.background}")

        self._grid = grid

    def to_text(self) -> Text:
        text = Text()
        for n, row in enumerate(self._grid):
            if n:
                text.append("\n")
            for char, style in row:
                text.append(char, style)
        return text

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield self.to_text()

    def plain(self) -> str:
        """Grid characters without styles (labels only)."""
        return "\n".join("".join(char for char, _ in row) for row in self._grid)
