"""Squarified treemap tiling.

Children are laid out in the order given (the aggregator already sorted
them). Rows are built along the shorter side of the remaining rectangle and
grown while the worst aspect ratio in the row does not get worse; then the
row is flushed as a strip and the remaining rectangle shrinks by its
thickness.

Reference: Bruls, Huizing, van Wijk, "Squarified Treemaps" (2000).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Optional

import numpy as np

from ..diagnostics import Diagnostics, NullDiagnostics
from ..exceptions import ErrorCode
from ..hierarchy.models import HierarchyNode
from .models import LayoutRect

logger = logging.getLogger(__name__)


def worst_ratio(row: Sequence[float], side: float) -> float:
    """Worst width/height ratio of a row of areas laid along ``side``."""
    total = sum(row)
    if total <= 0 or side <= 0:
        return math.inf
    side_sq = side * side
    total_sq = total * total
    return max(max(side_sq * r / total_sq, total_sq / (side_sq * r)) for r in row)


def layout(
    children: Sequence[HierarchyNode],
    width: float,
    height: float,
    padding: float = 0.0,
    *,
    x: float = 0.0,
    y: float = 0.0,
    diagnostics: Optional[Diagnostics] = None,
) -> dict[int, LayoutRect]:
    """Tile ``children`` into a ``width`` x ``height`` rectangle at (``x``, ``y``).

    Args:
        children: Sibling nodes, already in display order. Never re-sorted.
        width, height: Size of the area to fill.
        padding: Gap between neighbouring cells; each cell is inset by
            ``padding / 2`` per side after areas are computed.
        x, y: Offset of the area, used for nested levels.
        diagnostics: Sink for degraded layouts.

    Returns:
        ``node_id -> LayoutRect``. Empty for non-positive dimensions.
    """
    diagnostics = diagnostics or NullDiagnostics()

    if not (_positive(width) and _positive(height)):
        diagnostics.report(
            ErrorCode.DM200, "Non-positive layout dimensions", width=width, height=height
        )
        return {}
    if not children:
        return {}

    values = np.array([c.aggregate for c in children], dtype=float)
    values = np.where(np.isfinite(values) & (values > 0), values, 0.0)
    total = float(values.sum())

    if total <= 0:
        diagnostics.report(ErrorCode.DM201, "Level total is zero", nodes=len(children))
        corner = (x + width, y + height)
        return {
            c.node_id: LayoutRect(c.node_id, corner[0], corner[1], corner[0], corner[1])
            for c in children
        }

    areas = values * (width * height / total)
    boxes = _squarify(areas.tolist(), x, y, width, height)

    result: dict[int, LayoutRect] = {}
    half = max(0.0, padding) / 2
    for child, box in zip(children, boxes):
        rect = LayoutRect(child.node_id, *box)
        if half:
            rect = rect.inset(half)
        result[child.node_id] = rect
    return result


def _positive(value: float) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


def _squarify(
    areas: list[float], x: float, y: float, w: float, h: float
) -> list[tuple[float, float, float, float]]:
    """Place each area; zero areas get a degenerate box at the far corner."""
    boxes: list[Optional[tuple[float, float, float, float]]] = [None] * len(areas)
    positive = [i for i, a in enumerate(areas) if a > 0]

    row: list[int] = []
    pos = 0
    while pos < len(positive):
        index = positive[pos]
        side = min(w, h)
        candidate = row + [index]
        if not row or worst_ratio([areas[i] for i in candidate], side) <= worst_ratio(
            [areas[i] for i in row], side
        ):
            row = candidate
            pos += 1
            continue
        x, y, w, h = _flush(row, areas, boxes, x, y, w, h, last=False)
        row = []
    if row:
        _flush(row, areas, boxes, x, y, w, h, last=True)

    corner_x, corner_y = x + w, y + h
    return [
        box if box is not None else (corner_x, corner_y, corner_x, corner_y) for box in boxes
    ]


def _flush(
    row: list[int],
    areas: list[float],
    boxes: list,
    x: float,
    y: float,
    w: float,
    h: float,
    last: bool,
) -> tuple[float, float, float, float]:
    """Lay ``row`` as a strip along the shorter side; return the remaining rect."""
    row_total = sum(areas[i] for i in row)

    if w >= h:
        # Vertical strip on the left, cells stacked top to bottom
        thickness = w if last else (min(w, row_total / h) if h > 0 else 0.0)
        cursor = y
        for n, i in enumerate(row):
            if n == len(row) - 1:
                end = y + h
            else:
                end = cursor + (areas[i] / thickness if thickness > 0 else 0.0)
            boxes[i] = (x, cursor, x + thickness, end)
            cursor = end
        return x + thickness, y, max(0.0, w - thickness), h

    # Horizontal strip on top, cells left to right
    thickness = h if last else (min(h, row_total / w) if w > 0 else 0.0)
    cursor = x
    for n, i in enumerate(row):
        if n == len(row) - 1:
            end = x + w
        else:
            end = cursor + (areas[i] / thickness if thickness > 0 else 0.0)
        boxes[i] = (cursor, y, end, y + thickness)
        cursor = end
    return x, y + thickness, w, max(0.0, h - thickness)
