"""Drill-down state over one hierarchy.

The focus stack holds node ids from the root to the current focus. It is
never empty and always starts with the root. Invalid requests (double
clicks, stale handlers from a rebuilt tree, zooming into a leaf) are
ignored and reported to the diagnostics sink instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..diagnostics import Diagnostics, NullDiagnostics
from ..exceptions import ErrorCode
from ..hierarchy.models import Hierarchy, HierarchyNode
from ..translation import Translator, identity

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[int, ...]], None]


@dataclass(frozen=True)
class Crumb:
    """One breadcrumb entry, root first."""

    node_id: int
    label: str
    depth: int


class NavigationController:
    """Tracks the current focus and the path of ancestors leading to it."""

    def __init__(
        self,
        hierarchy: Hierarchy,
        diagnostics: Optional[Diagnostics] = None,
        root_name: str = "All",
    ) -> None:
        self.hierarchy = hierarchy
        self.diagnostics = diagnostics or NullDiagnostics()
        self.root_name = root_name
        self._stack: list[int] = [hierarchy.root.node_id]
        self._listeners: list[Listener] = []

    # ── State ─────────────────────────────────────────────────────────

    @property
    def stack(self) -> tuple[int, ...]:
        return tuple(self._stack)

    @property
    def focus(self) -> HierarchyNode:
        return self.hierarchy[self._stack[-1]]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    @property
    def at_root(self) -> bool:
        return len(self._stack) == 1

    # ── Observers ─────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(stack)`` after every effective transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def _notify(self) -> None:
        stack = self.stack
        for listener in list(self._listeners):
            listener(stack)

    # ── Transitions ───────────────────────────────────────────────────

    def zoom_in(self, node: HierarchyNode) -> bool:
        """Push ``node`` if it is a child of the focus that has children."""
        if not self.hierarchy.owns(node):
            self.diagnostics.report(
                ErrorCode.DM302, "Zoom target is not part of the current tree", node=node.node_id
            )
            return False

        focus_id = self._stack[-1]
        if node.node_id == focus_id:
            return False
        if node.parent_id != focus_id:
            self.diagnostics.report(
                ErrorCode.DM300,
                "Zoom target is not a child of the focus",
                node=node.node_id,
                focus=focus_id,
            )
            return False
        if node.is_leaf:
            self.diagnostics.report(
                ErrorCode.DM301, "Zoom target has no children", node=node.node_id
            )
            return False

        self._stack.append(node.node_id)
        logger.debug("Zoomed into %s (depth %d)", node.key, self.depth)
        self._notify()
        return True

    def zoom_out(self, to_depth: Optional[int] = None) -> bool:
        """Pop back to ``to_depth`` (default: one level up)."""
        if self.at_root:
            self.diagnostics.report(ErrorCode.DM303, "Already at root")
            return False

        target = self.depth - 1 if to_depth is None else to_depth
        if target < 0 or target >= self.depth:
            self.diagnostics.report(
                ErrorCode.DM303, "Zoom out target is not above the focus", to_depth=to_depth
            )
            return False

        del self._stack[target + 1 :]
        logger.debug("Zoomed out to depth %d", self.depth)
        self._notify()
        return True

    def zoom_to(self, node_id: int) -> bool:
        """Jump back to an ancestor already on the stack (breadcrumb click)."""
        if node_id not in self._stack:
            self.diagnostics.report(
                ErrorCode.DM300, "Breadcrumb target is not on the focus path", node=node_id
            )
            return False
        return self.zoom_out(to_depth=self._stack.index(node_id))

    def reset_to_root(self) -> None:
        changed = not self.at_root
        self._stack = [self.hierarchy.root.node_id]
        if changed:
            self._notify()

    def attach(self, hierarchy: Hierarchy) -> None:
        """Swap in a rebuilt tree; old node ids are meaningless, so always reset."""
        self.hierarchy = hierarchy
        self._stack = [hierarchy.root.node_id]
        self._notify()

    # ── Output ────────────────────────────────────────────────────────

    def breadcrumb(self, translator: Optional[Translator] = None) -> list[Crumb]:
        translate = translator or identity
        crumbs = []
        for depth, node_id in enumerate(self._stack):
            node = self.hierarchy[node_id]
            label = self.root_name if depth == 0 else translate(node.key)
            crumbs.append(Crumb(node_id=node_id, label=label, depth=depth))
        return crumbs

    def breadcrumb_labels(self, translator: Optional[Translator] = None) -> list[str]:
        return [c.label for c in self.breadcrumb(translator)]
