"""Build a grouping tree from flat records.

Weight policy: in weighted mode a record whose weight is missing,
non-numeric, boolean, NaN, infinite or negative contributes 0 to
``aggregate`` but is still counted in ``item_count``. Numeric strings are
parsed. Every such record is reported once through the diagnostics sink.
"""

from __future__ import annotations

import itertools
import logging
import math
import numbers
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from ..diagnostics import Diagnostics, NullDiagnostics
from ..exceptions import ErrorCode, KeyFunctionError, WeightFunctionError
from ..exceptions.taxonomy import Severity
from .keys import KeyFn, WeightFn, is_missing
from .models import Hierarchy, HierarchyNode, sibling_order

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL = "Unknown"

# Shared by every build so ids stay unique across rebuilds.
_node_ids = itertools.count()
_node_ids_lock = threading.Lock()


@dataclass
class _Group:
    key: str
    indices: list[int]
    aggregate: float = 0.0
    item_count: int = 0
    children: list[_Group] = field(default_factory=list)


def coerce_weight(value: Any) -> Optional[float]:
    """Return a usable weight, or None when the record should weigh 0."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        weight = float(value)
    elif isinstance(value, str):
        try:
            weight = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(weight) or weight < 0:
        return None
    return weight


def aggregate(
    records: Iterable[Any],
    key_fns: Sequence[KeyFn],
    weight_fn: Optional[WeightFn] = None,
    *,
    root_key: str = "All",
    sentinel: str = DEFAULT_SENTINEL,
    diagnostics: Optional[Diagnostics] = None,
) -> Hierarchy:
    """Group ``records`` level by level into an immutable :class:`Hierarchy`.

    Args:
        records: Flat records, read only.
        key_fns: One grouping function per level; tree depth equals their count.
        weight_fn: Optional weight per record. Without it each record counts 1.
        root_key: Key of the root node.
        sentinel: Key for records whose grouping value is missing.
        diagnostics: Sink for non-fatal input problems.

    Returns:
        The built hierarchy. Empty input gives a childless root with aggregate 0.

    Raises:
        KeyFunctionError: A key function raised; no tree is returned.
        WeightFunctionError: The weight function raised; no tree is returned.
    """
    diagnostics = diagnostics or NullDiagnostics()
    records = list(records)
    key_fns = list(key_fns)

    weights = _resolve_weights(records, weight_fn, diagnostics)
    keys = _resolve_keys(records, key_fns, sentinel, diagnostics)

    top = _Group(key=root_key, indices=list(range(len(records))))
    _partition(top, keys, weights, level=0, levels=len(key_fns))

    nodes: dict[int, HierarchyNode] = {}
    with _node_ids_lock:
        root = _freeze(top, None, 0, (), _node_ids, nodes)

    logger.debug(
        "Built hierarchy: %d records, %d levels, %d nodes, total=%s",
        len(records),
        len(key_fns),
        len(nodes),
        root.aggregate,
    )
    return Hierarchy(root=root, nodes=nodes, levels=len(key_fns), weighted=weight_fn is not None)


def _resolve_weights(
    records: list[Any], weight_fn: Optional[WeightFn], diagnostics: Diagnostics
) -> list[float]:
    if weight_fn is None:
        return [1.0] * len(records)

    weights: list[float] = []
    zeroed: list[int] = []
    for index, record in enumerate(records):
        try:
            raw = weight_fn(record)
        except Exception as e:
            raise WeightFunctionError(index, f"{type(e).__name__}: {e}", record) from e
        weight = coerce_weight(raw)
        if weight is None:
            zeroed.append(index)
            diagnostics.report(
                ErrorCode.DM101,
                "Unusable weight counted as 0",
                record=index,
                value=repr(raw),
            )
            weight = 0.0
        weights.append(weight)

    if zeroed:
        logger.warning(
            "%d of %d records have no usable weight; they count as items with weight 0",
            len(zeroed),
            len(records),
        )
    return weights


def _resolve_keys(
    records: list[Any], key_fns: list[KeyFn], sentinel: str, diagnostics: Diagnostics
) -> list[list[str]]:
    keys: list[list[str]] = []
    missing_per_level = [0] * len(key_fns)

    for index, record in enumerate(records):
        row = []
        for level, fn in enumerate(key_fns):
            try:
                value = fn(record)
            except Exception as e:
                raise KeyFunctionError(level, index, f"{type(e).__name__}: {e}", record) from e
            if is_missing(value):
                missing_per_level[level] += 1
                row.append(sentinel)
            else:
                row.append(value if isinstance(value, str) else str(value))
        keys.append(row)

    for level, missing in enumerate(missing_per_level):
        if missing:
            diagnostics.report(
                ErrorCode.DM103,
                f"Missing grouping value bucketed under {sentinel!r}",
                severity=Severity.INFO,
                level=level,
                records=missing,
            )
    return keys


def _partition(
    group: _Group, keys: list[list[str]], weights: list[float], level: int, levels: int
) -> None:
    group.item_count = len(group.indices)

    if level == levels:
        group.aggregate = math.fsum(weights[i] for i in group.indices)
        return

    buckets: dict[str, list[int]] = {}
    for i in group.indices:
        buckets.setdefault(keys[i][level], []).append(i)

    for key, indices in buckets.items():
        child = _Group(key=key, indices=indices)
        _partition(child, keys, weights, level + 1, levels)
        group.children.append(child)

    group.children.sort(key=lambda g: (-g.aggregate, g.key))
    group.aggregate = math.fsum(c.aggregate for c in group.children)


def _freeze(
    group: _Group,
    parent_id: Optional[int],
    depth: int,
    path: tuple[str, ...],
    counter: itertools.count,
    nodes: dict[int, HierarchyNode],
) -> HierarchyNode:
    node_id = next(counter)
    children = tuple(
        _freeze(child, node_id, depth + 1, path + (child.key,), counter, nodes)
        for child in group.children
    )
    node = HierarchyNode(
        node_id=node_id,
        key=group.key,
        aggregate=group.aggregate,
        item_count=group.item_count,
        children=children,
        parent_id=parent_id,
        depth=depth,
        path=path,
    )
    nodes[node_id] = node
    return node


def check_invariants(hierarchy: Hierarchy, rel_tol: float = 1e-9) -> list[str]:
    """Return a description of every aggregate-sum or ordering violation."""
    problems = []
    for node in hierarchy.walk():
        if node.is_leaf:
            continue
        total = math.fsum(c.aggregate for c in node.children)
        if not math.isclose(node.aggregate, total, rel_tol=rel_tol, abs_tol=1e-9):
            problems.append(f"{node.path or node.key}: aggregate {node.aggregate} != {total}")
        count = sum(c.item_count for c in node.children)
        if node.item_count != count:
            problems.append(f"{node.path or node.key}: item_count {node.item_count} != {count}")
        ordered = sorted(node.children, key=sibling_order)
        if list(node.children) != ordered:
            problems.append(f"{node.path or node.key}: children out of order")
    return problems
