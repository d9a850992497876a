"""Legend entries for the current focus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..hierarchy.models import Hierarchy, HierarchyNode
from ..translation import Translator, identity

if TYPE_CHECKING:
    from ..render.colors import ColorScheme

OTHERS_KEY = "Others"
OTHERS_COLOR = "#999999"


@dataclass(frozen=True)
class LegendEntry:
    key: str
    label: str
    color: str
    value: float
    item_count: int
    node_id: Optional[int] = None

    @property
    def is_others(self) -> bool:
        return self.node_id is None


def legend_entries(
    node: HierarchyNode,
    hierarchy: Hierarchy,
    colors: ColorScheme,
    translator: Optional[Translator] = None,
    max_items: int = 10,
    others_label: str = OTHERS_KEY,
) -> list[LegendEntry]:
    """One entry per child of ``node`` in sibling order.

    A leaf focus lists itself. Children past ``max_items`` are folded into a
    single grey entry carrying their summed value and item count
    (``max_items=0`` disables folding).
    """
    translate = translator or identity
    members = list(node.children) if node.children else [node]
    entries = [
        LegendEntry(
            key=child.key,
            label=translate(child.key),
            color=colors.color_for(child),
            value=child.aggregate,
            item_count=child.item_count,
            node_id=child.node_id,
        )
        for child in members
        if child.node_id in hierarchy
    ]

    if max_items <= 0 or len(entries) <= max_items:
        return entries

    rest = entries[max_items:]
    others = LegendEntry(
        key=OTHERS_KEY,
        label=others_label,
        color=OTHERS_COLOR,
        value=sum(e.value for e in rest),
        item_count=sum(e.item_count for e in rest),
    )
    return entries[:max_items] + [others]
