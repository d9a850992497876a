"""Shared CLI helpers."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from ..config import VisualizationConfig, load_config
from ..exceptions import RecordsFileError
from ..hierarchy import Hierarchy, HierarchyNode
from ..translation import LabelTranslator

console = Console()


def read_records(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of record objects."""
    if not path.exists():
        raise RecordsFileError(path, "file not found")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordsFileError(path, str(e))
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise RecordsFileError(path, "expected a JSON array of objects")
    return data


def read_translations(path: Optional[Path]) -> Optional[LabelTranslator]:
    """Load a flat ``{"key": "label"}`` JSON catalogue."""
    if path is None:
        return None
    try:
        mapping = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordsFileError(path, str(e))
    if not isinstance(mapping, dict):
        raise RecordsFileError(path, "expected a JSON object of key -> label")
    return LabelTranslator({str(k): str(v) for k, v in mapping.items()})


def resolve_config(
    config: Optional[Path] = None,
    sentinel: Optional[str] = None,
    legend_items: Optional[int] = None,
) -> VisualizationConfig:
    """Build configuration from CLI options."""
    overrides: dict[str, Any] = {}
    if sentinel is not None:
        overrides["sentinel"] = sentinel
    if legend_items is not None:
        overrides["legend_max_items"] = legend_items
    return load_config(config_file=config, **overrides)


def with_layout(
    config: VisualizationConfig, min_share: Optional[float], flat: bool
) -> VisualizationConfig:
    layout = config.layout
    if min_share is not None:
        layout = replace(layout, min_share=min_share)
    if flat:
        layout = replace(layout, show_nested=False)
    return replace(config, layout=layout)


def format_value(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def node_to_dict(node: HierarchyNode, hierarchy: Hierarchy) -> dict[str, Any]:
    parent = hierarchy.parent(node)
    if parent is None:
        share = 100.0
    else:
        share = node.aggregate / parent.aggregate * 100 if parent.aggregate > 0 else 0.0
    return {
        "key": node.key,
        "aggregate": node.aggregate,
        "item_count": node.item_count,
        "percent_of_parent": round(share, 2),
        "children": [node_to_dict(c, hierarchy) for c in node.children],
    }
