"""Drawable output of one render pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..layout.models import LayoutRect
from ..navigation.controller import Crumb


@dataclass(frozen=True)
class Cell:
    """A rectangle to draw.

    ``zoom_target_id`` is the node a click on this cell drills into: the
    cell itself for groups at the focus level, the enclosing group for
    nested cells, None for leaves at the focus level.
    """

    node_id: int
    key: str
    label: Optional[str]
    rect: LayoutRect
    fill: str
    depth: int
    is_group: bool
    zoom_target_id: Optional[int] = None


@dataclass
class Scene:
    width: float
    height: float
    focus_id: int
    cells: list[Cell] = field(default_factory=list)
    breadcrumb: list[Crumb] = field(default_factory=list)
    can_go_back: bool = False
    message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.cells

    def cell(self, node_id: int) -> Optional[Cell]:
        return next((c for c in self.cells if c.node_id == node_id), None)

    def hit_test(self, x: float, y: float) -> Optional[Cell]:
        """Deepest cell under the point; nested cells are drawn last."""
        for cell in reversed(self.cells):
            if cell.rect.contains(x, y):
                return cell
        return None

    def top_level(self) -> list[Cell]:
        return [c for c in self.cells if c.depth == 1]
