"""Render coordination.

Turns the navigation state into a :class:`Scene`:

    focus node ──► visible children ──► squarified rects ──► cells
                         │                                    │
                         └── (nested) grandchildren tiled ────┘
                             inside each group cell

The rect map is cached per focus and size. Navigation transitions, applied
resizes and rebuilds invalidate it; hovering never does.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..config import DEFAULT_CONFIG, VisualizationConfig
from ..diagnostics import Diagnostics, NullDiagnostics
from ..exceptions import ErrorCode
from ..hierarchy.models import Hierarchy, HierarchyNode
from ..layout import LayoutRect, layout
from ..navigation import NavigationController
from ..sync.legend import LegendEntry, legend_entries
from ..sync.tooltip import TooltipData, TooltipSynchronizer
from ..translation import Translator, identity
from .colors import ColorScheme
from .labels import AverageCharMeasurer, LabelFitter, TextMeasurer
from .resize import ResizeCoalescer
from .scene import Cell, Scene

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data"


class Surface(Protocol):
    def draw(self, scene: Scene) -> None: ...


class RenderCoordinator:
    """Owns one visualization: navigation, layout cache, tooltip and legend.

    Example:
        >>> coordinator = RenderCoordinator(hierarchy, surface=surface)
        >>> scene = coordinator.render()
        >>> coordinator.click(scene.cells[0].node_id)
        True
    """

    def __init__(
        self,
        hierarchy: Hierarchy,
        config: Optional[VisualizationConfig] = None,
        *,
        surface: Optional[Surface] = None,
        measurer: Optional[TextMeasurer] = None,
        translator: Optional[Translator] = None,
        diagnostics: Optional[Diagnostics] = None,
        colors: Optional[ColorScheme] = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.surface = surface
        self.translator = translator or identity
        self.diagnostics = diagnostics or NullDiagnostics()
        self.colors = colors or ColorScheme()
        self.colors.bind(c.key for c in hierarchy.root.children)

        self.navigator = NavigationController(
            hierarchy, self.diagnostics, root_name=self.config.navigation.root_name
        )
        self._unsubscribe = self.navigator.subscribe(self._on_navigate)
        self.tooltips = TooltipSynchronizer(hierarchy, self.colors, self.translator)

        labels = self.config.labels
        measurer = measurer or AverageCharMeasurer(labels.font_size)
        self._group_labels = LabelFitter(
            measurer, labels.group_min_width, labels.group_min_height, labels.inset, labels.ellipsis
        )
        self._leaf_labels = LabelFitter(
            measurer, labels.leaf_min_width, labels.leaf_min_height, labels.inset, labels.ellipsis
        )

        self._size: tuple[float, float] = (self.config.width, self.config.height)
        self._resizes = ResizeCoalescer()
        self._scene: Optional[Scene] = None
        self.layout_passes = 0

    # ── State ─────────────────────────────────────────────────────────

    @property
    def hierarchy(self) -> Hierarchy:
        return self.navigator.hierarchy

    @property
    def size(self) -> tuple[float, float]:
        return self._size

    @property
    def scene(self) -> Scene:
        """Current scene, laid out on demand."""
        if self._scene is None:
            self._scene = self._build_scene()
            self.layout_passes += 1
        return self._scene

    def _on_navigate(self, stack: tuple[int, ...]) -> None:
        self._scene = None

    def close(self) -> None:
        self._unsubscribe()

    # ── Rendering ─────────────────────────────────────────────────────

    def render(self) -> Scene:
        """Lay out if needed and draw onto the surface."""
        scene = self.scene
        if self.surface is not None:
            self.surface.draw(scene)
        return scene

    def visible_children(self, node: HierarchyNode) -> list[HierarchyNode]:
        min_share = self.config.layout.min_share
        if min_share <= 0 or node.aggregate <= 0:
            return list(node.children)
        return [c for c in node.children if c.aggregate / node.aggregate >= min_share]

    def _build_scene(self) -> Scene:
        width, height = self._size
        focus = self.navigator.focus
        scene = Scene(
            width=width,
            height=height,
            focus_id=focus.node_id,
            breadcrumb=self.navigator.breadcrumb(self.translator),
            can_go_back=not self.navigator.at_root,
        )

        if self.hierarchy.is_empty:
            scene.message = NO_DATA_MESSAGE
            return scene

        spacing = self.config.layout
        x0 = y0 = spacing.margin
        inner_w = width - 2 * spacing.margin
        inner_h = height - 2 * spacing.margin

        if focus.is_leaf:
            if inner_w > 0 and inner_h > 0:
                rect = LayoutRect(focus.node_id, x0, y0, x0 + inner_w, y0 + inner_h)
                scene.cells.append(self._cell(focus, rect, depth=1, zoom_target=None))
            else:
                self.diagnostics.report(
                    ErrorCode.DM200, "Non-positive layout dimensions", width=inner_w, height=inner_h
                )
            return scene

        children = self.visible_children(focus)
        rects = layout(
            children,
            inner_w,
            inner_h,
            spacing.padding_inner,
            x=x0,
            y=y0,
            diagnostics=self.diagnostics,
        )

        for child in children:
            rect = rects.get(child.node_id)
            if rect is None:
                continue
            target = None if child.is_leaf else child.node_id
            scene.cells.append(self._cell(child, rect, depth=1, zoom_target=target))
            if spacing.show_nested and not child.is_leaf:
                scene.cells.extend(self._nested_cells(child, rect))

        logger.debug(
            "Laid out %d cells for %s at %.0fx%.0f", len(scene.cells), focus.key, width, height
        )
        return scene

    def _nested_cells(self, group: HierarchyNode, rect: LayoutRect) -> list[Cell]:
        spacing = self.config.layout
        inner = rect.inset(
            spacing.padding_outer, spacing.padding_top, spacing.padding_outer, spacing.padding_outer
        )
        if inner.width <= 0 or inner.height <= 0:
            return []

        children = self.visible_children(group)
        rects = layout(
            children,
            inner.width,
            inner.height,
            spacing.padding_inner,
            x=inner.x0,
            y=inner.y0,
            diagnostics=self.diagnostics,
        )
        return [
            self._cell(child, rects[child.node_id], depth=2, zoom_target=group.node_id)
            for child in children
            if child.node_id in rects
        ]

    def _cell(
        self, node: HierarchyNode, rect: LayoutRect, depth: int, zoom_target: Optional[int]
    ) -> Cell:
        is_group = not node.is_leaf
        fitter = self._group_labels if is_group else self._leaf_labels
        return Cell(
            node_id=node.node_id,
            key=node.key,
            label=fitter.fit(self.translator(node.key), rect.width, rect.height),
            rect=rect,
            fill=self.colors.color_for(node),
            depth=depth,
            is_group=is_group,
            zoom_target_id=zoom_target,
        )

    # ── Interaction ───────────────────────────────────────────────────

    def click(self, node_id: int) -> bool:
        """Drill into the group a visible cell stands for."""
        if node_id not in self.hierarchy:
            self.diagnostics.report(
                ErrorCode.DM302, "Clicked node is not part of the current tree", node=node_id
            )
            return False
        cell = self.scene.cell(node_id)
        if cell is None:
            self.diagnostics.report(
                ErrorCode.DM400, "Clicked node is not visible", node=node_id
            )
            return False
        target_id = cell.zoom_target_id if cell.zoom_target_id is not None else cell.node_id
        return self.navigator.zoom_in(self.hierarchy[target_id])

    def click_at(self, x: float, y: float) -> bool:
        cell = self.scene.hit_test(x, y)
        if cell is None:
            return False
        return self.click(cell.node_id)

    def back(self) -> bool:
        return self.navigator.zoom_out()

    def home(self) -> None:
        self.navigator.reset_to_root()

    def jump(self, node_id: int) -> bool:
        return self.navigator.zoom_to(node_id)

    def hover(self, node_id: int) -> Optional[TooltipData]:
        if node_id not in self.hierarchy:
            self.diagnostics.report(
                ErrorCode.DM400, "Hovered node is not part of the current tree", node=node_id
            )
        return self.tooltips.hover(node_id)

    def hover_at(self, x: float, y: float) -> Optional[TooltipData]:
        cell = self.scene.hit_test(x, y)
        if cell is None:
            self.tooltips.clear()
            return None
        return self.tooltips.hover(cell.node_id)

    def legend(self) -> list[LegendEntry]:
        return legend_entries(
            self.navigator.focus,
            self.hierarchy,
            self.colors,
            self.translator,
            max_items=self.config.legend_max_items,
        )

    # ── Resize and rebuild ────────────────────────────────────────────

    def resize(self, width: float, height: float) -> bool:
        """Apply a new size now; returns True if the layout was invalidated."""
        if (width, height) == self._size:
            return False
        self._size = (width, height)
        self._scene = None
        return True

    def notify_resize(self, width: float, height: float) -> int:
        """Queue a size; only the latest one survives until the next flush."""
        return self._resizes.submit(width, height)

    def flush_resize(self, generation: Optional[int] = None) -> bool:
        """Apply the most recent queued size, unless a rebuild made it stale."""
        if generation is not None and generation != self._resizes.generation:
            self.diagnostics.report(
                ErrorCode.DM401,
                "Discarded resize armed before a rebuild",
                generation=generation,
                current=self._resizes.generation,
            )
            return False
        pending = self._resizes.take()
        if pending is None:
            return False
        return self.resize(*pending)

    def set_hierarchy(self, hierarchy: Hierarchy) -> None:
        """Swap in a rebuilt tree at the latest known size, resetting the focus path."""
        pending = self._resizes.invalidate()
        if pending is not None:
            self._size = pending
        self.colors.bind(c.key for c in hierarchy.root.children)
        self.tooltips.rebind(hierarchy)
        self.navigator.attach(hierarchy)
        self._scene = None
        logger.info("Rebuilt visualization with %d nodes", len(hierarchy))
