"""Hover tooltips.

The synchronizer only remembers which node is hovered. Percentages are
computed from the node table on demand, so navigation never has to update
tooltip state and a rebuilt tree just needs ``rebind``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..hierarchy.models import Hierarchy, HierarchyNode
from ..translation import Translator, identity

if TYPE_CHECKING:
    from ..render.colors import ColorScheme

DEFAULT_OFFSET = 10.0


@dataclass(frozen=True)
class TooltipData:
    node_id: int
    key: str
    label: str
    color: str
    aggregate: float
    item_count: int
    percent_of_parent: float
    percent_of_root: float
    weighted: bool = False

    def rows(self, value_label: Optional[str] = None) -> list[tuple[str, str]]:
        """Label/value pairs for a two-column tooltip grid."""
        if value_label is None:
            value_label = "Total" if self.weighted else "Count"
        rows = [(value_label, _format_number(self.aggregate))]
        if self.weighted:
            rows.append(("Items", f"{self.item_count:,}"))
        rows.append(("Share of parent", f"{self.percent_of_parent:.1f}%"))
        rows.append(("Share of total", f"{self.percent_of_root:.1f}%"))
        return rows


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100.0


class TooltipSynchronizer:
    def __init__(
        self,
        hierarchy: Hierarchy,
        colors: ColorScheme,
        translator: Optional[Translator] = None,
    ) -> None:
        self.hierarchy = hierarchy
        self.colors = colors
        self.translator = translator or identity
        self._hovered: Optional[int] = None

    @property
    def hovered(self) -> Optional[int]:
        return self._hovered

    def hover(self, node_id: int) -> Optional[TooltipData]:
        """Track ``node_id``; unknown ids clear the tooltip."""
        if node_id not in self.hierarchy:
            self.clear()
            return None
        self._hovered = node_id
        return self.current()

    def clear(self) -> None:
        self._hovered = None

    def current(self) -> Optional[TooltipData]:
        if self._hovered is None:
            return None
        node = self.hierarchy.get(self._hovered)
        if node is None:
            return None
        return self.describe(node)

    def describe(self, node: HierarchyNode) -> TooltipData:
        parent = self.hierarchy.parent(node)
        of_parent = 100.0 if parent is None else percent(node.aggregate, parent.aggregate)
        of_root = 100.0 if parent is None else percent(node.aggregate, self.hierarchy.root_total)
        return TooltipData(
            node_id=node.node_id,
            key=node.key,
            label=self.translator(node.key),
            color=self.colors.color_for(node),
            aggregate=node.aggregate,
            item_count=node.item_count,
            percent_of_parent=of_parent,
            percent_of_root=of_root,
            weighted=self.hierarchy.weighted,
        )

    def rebind(self, hierarchy: Hierarchy) -> None:
        self.hierarchy = hierarchy
        self.clear()


def place_tooltip(
    x: float,
    y: float,
    width: float,
    height: float,
    bounds_width: float,
    bounds_height: float,
    offset: float = DEFAULT_OFFSET,
) -> tuple[float, float]:
    """Top-left corner for a tooltip near the pointer at (``x``, ``y``).

    The tooltip sits below and right of the pointer and flips to the other
    side on either axis where it would leave the surface.
    """
    left = x + offset
    top = y + offset
    if left + width > bounds_width:
        left = x - width - offset
    if top + height > bounds_height:
        top = y - height - offset
    return max(0.0, left), max(0.0, top)
