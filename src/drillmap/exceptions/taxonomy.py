"""Error taxonomy with codes used by the diagnostics sink.

Error Code Convention:
    DM1xx - Aggregation (records, key and weight functions)
    DM2xx - Layout
    DM3xx - Navigation
    DM4xx - Rendering and interaction
    DM5xx - Configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for diagnostics and debugging."""

    # Aggregation (DM1xx)
    DM100 = "DM100"  # Key function raised
    DM101 = "DM101"  # Weight missing or non-numeric, counted with weight 0
    DM102 = "DM102"  # Weight function raised
    DM103 = "DM103"  # Grouping value missing, bucketed under sentinel

    # Layout (DM2xx)
    DM200 = "DM200"  # Non-positive or non-finite dimensions
    DM201 = "DM201"  # Level total is zero, degenerate rectangles

    # Navigation (DM3xx)
    DM300 = "DM300"  # Zoom target is not a child of the focus
    DM301 = "DM301"  # Zoom target is a leaf
    DM302 = "DM302"  # Zoom target belongs to a discarded tree
    DM303 = "DM303"  # Zoom out has nowhere to go

    # Render (DM4xx)
    DM400 = "DM400"  # Click or hover on an unknown cell
    DM401 = "DM401"  # Stale resize discarded after rebuild

    # Configuration (DM5xx)
    DM500 = "DM500"  # Invalid configuration value


class Severity(Enum):
    """How loudly a diagnostic should be surfaced."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class DrillmapIssue(Exception):
    """Structured failure with a code, context and recovery hint.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (record index, node id, dimensions)
        recoverable: Whether the component degraded instead of failing
        recovery_hint: Suggested fix for the user
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recoverable: bool = True
    recovery_hint: str | None = None
    severity: Severity = Severity.WARNING

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
            "severity": self.severity.value,
        }


class LayoutIssue(DrillmapIssue):
    """Degraded layouts (DM2xx)."""

    pass


class NavigationIssue(DrillmapIssue):
    """Ignored navigation requests (DM3xx)."""

    pass
