"""Rectangles produced by a layout pass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutRect:
    """Axis-aligned rectangle for one node, in surface coordinates.

    Rects are recomputed on every focus change and resize and carry no
    identity beyond ``node_id``.
    """

    node_id: int
    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return max(0.0, self.x1 - self.x0)

    @property
    def height(self) -> float:
        return max(0.0, self.y1 - self.y0)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def inset(
        self,
        left: float,
        top: float | None = None,
        right: float | None = None,
        bottom: float | None = None,
    ) -> LayoutRect:
        """Shrink by the given amounts; collapses to the centre line instead of inverting."""
        top = left if top is None else top
        right = left if right is None else right
        bottom = top if bottom is None else bottom

        x0, x1 = self.x0 + left, self.x1 - right
        if x1 < x0:
            x0 = x1 = min(max((self.x0 + self.x1) / 2, self.x0), self.x1)
        y0, y1 = self.y0 + top, self.y1 - bottom
        if y1 < y0:
            y0 = y1 = min(max((self.y0 + self.y1) / 2, self.y0), self.y1)
        return LayoutRect(self.node_id, x0, y0, x1, y1)
