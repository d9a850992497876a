"""Grouping tree produced by the aggregator.

Nodes form a hierarchy:

    root (all records)
        ├── first grouping level (e.g. country)
        │       └── second grouping level (e.g. item set)
        └── ...

Children are held by value in sibling order. The link back to the parent
is a ``parent_id`` resolved through the owning :class:`Hierarchy`, so a node
never holds a reference to its parent object.

Node ids are never reused, even across rebuilds, so an id captured from a
discarded tree cannot name a node of its replacement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional


@dataclass(frozen=True, eq=False)
class HierarchyNode:
    """One group in the tree.

    Attributes:
        node_id:    identifier, unique across every tree built in the process
        key:        grouping value (or the sentinel for missing values)
        aggregate:  summed weight (or record count in count mode)
        item_count: number of records in the group
        children:   sub-groups sorted by aggregate desc, key asc
        parent_id:  identifier of the parent, None for the root
        depth:      0 for the root
        path:       keys from the first level down to this node
    """

    node_id: int
    key: str
    aggregate: float
    item_count: int
    children: tuple[HierarchyNode, ...] = ()
    parent_id: Optional[int] = None
    depth: int = 0
    path: tuple[str, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def group_key(self) -> tuple[str, ...]:
        """Key of the sibling group this node belongs to (its parent's path)."""
        return self.path[:-1]

    def __repr__(self) -> str:
        return (
            f"HierarchyNode(id={self.node_id}, key={self.key!r}, "
            f"aggregate={self.aggregate}, items={self.item_count}, "
            f"children={len(self.children)})"
        )


def sibling_order(node: HierarchyNode) -> tuple[float, str]:
    """Sort key: aggregate descending, then key ascending."""
    return (-node.aggregate, node.key)


@dataclass(frozen=True, eq=False)
class Hierarchy:
    """Immutable tree plus its node table.

    ``root_total`` is captured once when the tree is built; tooltips divide
    by it on every hover instead of re-walking the tree.
    """

    root: HierarchyNode
    nodes: Mapping[int, HierarchyNode]
    levels: int
    weighted: bool = False
    root_total: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root_total", self.root.aggregate)

    def get(self, node_id: int) -> Optional[HierarchyNode]:
        return self.nodes.get(node_id)

    def __getitem__(self, node_id: int) -> HierarchyNode:
        return self.nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def owns(self, node: HierarchyNode) -> bool:
        """True when ``node`` is this tree's own object, not one from a discarded tree."""
        return self.nodes.get(node.node_id) is node

    def parent(self, node: HierarchyNode) -> Optional[HierarchyNode]:
        if node.parent_id is None:
            return None
        return self.nodes.get(node.parent_id)

    def ancestors(self, node: HierarchyNode) -> list[HierarchyNode]:
        """Ancestors from the parent up to the root."""
        result = []
        current = self.parent(node)
        while current is not None:
            result.append(current)
            current = self.parent(current)
        return result

    def path_to(self, node: HierarchyNode) -> list[HierarchyNode]:
        """Nodes from the root down to ``node`` inclusive."""
        return list(reversed(self.ancestors(node))) + [node]

    def walk(self) -> Iterator[HierarchyNode]:
        """Depth-first, pre-order, in sibling order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> list[HierarchyNode]:
        return [n for n in self.walk() if n.is_leaf]

    def find(self, *keys: str) -> Optional[HierarchyNode]:
        """Follow grouping keys from the root, e.g. ``find("Togo", "A")``."""
        node = self.root
        for key in keys:
            node = next((c for c in node.children if c.key == key), None)
            if node is None:
                return None
        return node

    @property
    def is_empty(self) -> bool:
        return self.root.item_count == 0
