"""Public API for drillmap.

Example:
    >>> from drillmap import build_hierarchy, visualize
    >>>
    >>> hierarchy = build_hierarchy(records, ["country", "item_set_title"], weight="word_count")
    >>> coordinator = visualize(records, ["country", "item_set_title"], weight="word_count")
    >>> scene = coordinator.render()
    >>> coordinator.click(scene.cells[0].node_id)
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, Union

from .config import DEFAULT_CONFIG, VisualizationConfig
from .diagnostics import Diagnostics
from .hierarchy import Hierarchy, aggregate, field_weight, key_for
from .hierarchy.keys import KeyFn, WeightFn
from .logging_config import get_logger
from .render import RenderCoordinator
from .render.coordinator import Surface
from .render.labels import TextMeasurer
from .translation import Translator

logger = get_logger(__name__)

GroupSpec = Union[str, KeyFn]
WeightSpec = Union[str, WeightFn, None]


def resolve_keys(group_by: Sequence[GroupSpec]) -> list[KeyFn]:
    """Field names become preset or plain field keys; callables pass through."""
    return [key_for(g) if isinstance(g, str) else g for g in group_by]


def resolve_weight(weight: WeightSpec) -> Optional[WeightFn]:
    if weight is None or callable(weight):
        return weight
    return field_weight(weight)


def build_hierarchy(
    records: Iterable[Any],
    group_by: Sequence[GroupSpec],
    weight: WeightSpec = None,
    *,
    config: Optional[VisualizationConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> Hierarchy:
    """Aggregate records using the sentinel and root name from ``config``."""
    config = config or DEFAULT_CONFIG
    return aggregate(
        records,
        resolve_keys(group_by),
        resolve_weight(weight),
        root_key=config.navigation.root_name,
        sentinel=config.sentinel,
        diagnostics=diagnostics,
    )


def visualize(
    records: Iterable[Any],
    group_by: Sequence[GroupSpec],
    weight: WeightSpec = None,
    *,
    config: Optional[VisualizationConfig] = None,
    surface: Optional[Surface] = None,
    measurer: Optional[TextMeasurer] = None,
    translator: Optional[Translator] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> RenderCoordinator:
    """Build the tree and wrap it in a coordinator positioned at the root."""
    config = config or DEFAULT_CONFIG
    diagnostics = diagnostics or Diagnostics()
    hierarchy = build_hierarchy(
        records, group_by, weight, config=config, diagnostics=diagnostics
    )
    logger.info("Visualizing %d nodes over %d levels", len(hierarchy), hierarchy.levels)
    return RenderCoordinator(
        hierarchy,
        config,
        surface=surface,
        measurer=measurer,
        translator=translator,
        diagnostics=diagnostics,
    )
