"""Exception hierarchy for drillmap."""

from .aggregation import (
    AggregationError,
    KeyFunctionError,
    RecordsFileError,
    WeightFunctionError,
)
from .base import DrillmapError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError
from .taxonomy import DrillmapIssue, ErrorCode, LayoutIssue, NavigationIssue, Severity

__all__ = [
    "DrillmapError",
    "AggregationError",
    "KeyFunctionError",
    "WeightFunctionError",
    "RecordsFileError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "DrillmapIssue",
    "ErrorCode",
    "LayoutIssue",
    "NavigationIssue",
    "Severity",
]
