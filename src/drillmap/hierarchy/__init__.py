"""Grouping tree: records in, immutable hierarchy out."""

from .aggregator import aggregate, check_invariants, coerce_weight
from .keys import field_key, field_weight, key_for, year_key
from .models import Hierarchy, HierarchyNode

__all__ = [
    "aggregate",
    "check_invariants",
    "coerce_weight",
    "field_key",
    "field_weight",
    "key_for",
    "year_key",
    "Hierarchy",
    "HierarchyNode",
]
