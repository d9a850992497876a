"""Aggregation exceptions: key and weight functions that fail mid-build."""

from typing import Any, Optional

from .base import DrillmapError
from .taxonomy import ErrorCode


class AggregationError(DrillmapError):
    """Base class for errors that abort a hierarchy build."""

    pass


class KeyFunctionError(AggregationError):
    """Raised when a grouping key function raises for a record."""

    code = ErrorCode.DM100

    def __init__(self, level: int, record_index: int, reason: str, record: Optional[Any] = None):
        super().__init__(
            f"Grouping key at level {level} failed for record #{record_index}",
            details={"level": str(level), "record": str(record_index), "reason": reason},
        )
        self.level = level
        self.record_index = record_index
        self.reason = reason
        self.record = record


class WeightFunctionError(AggregationError):
    """Raised when the weight function raises for a record."""

    code = ErrorCode.DM102

    def __init__(self, record_index: int, reason: str, record: Optional[Any] = None):
        super().__init__(
            f"Weight function failed for record #{record_index}",
            details={"record": str(record_index), "reason": reason},
        )
        self.record_index = record_index
        self.reason = reason
        self.record = record


class RecordsFileError(AggregationError):
    """Raised when a records file is missing or is not a JSON array of objects."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            f"Cannot read records from {path}", details={"path": str(path), "reason": reason}
        )
        self.path = path
        self.reason = reason
