"""Injectable diagnostics sink for non-fatal problems.

Components never raise for recoverable conditions (bad zoom targets, zero
dimensions, missing weights). They report a structured issue to the sink
they were constructed with and carry on.

Usage:
    from drillmap.diagnostics import Diagnostics
    from drillmap.exceptions import ErrorCode

    diagnostics = Diagnostics()
    controller = NavigationController(hierarchy, diagnostics=diagnostics)
    controller.zoom_in(leaf)
    diagnostics.codes()   # [ErrorCode.DM301]
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from .exceptions.taxonomy import (
    DrillmapIssue,
    ErrorCode,
    LayoutIssue,
    NavigationIssue,
    Severity,
)
from .logging_config import level_for

logger = logging.getLogger(__name__)


def _issue_class(code: ErrorCode) -> type[DrillmapIssue]:
    family = code.value[2]
    if family == "2":
        return LayoutIssue
    if family == "3":
        return NavigationIssue
    return DrillmapIssue


class Diagnostics:
    """Collects issues reported by one visualization instance.

    Attributes:
        records: Issues in the order they were reported.
        max_records: Oldest records are dropped past this many (0 = unbounded).
    """

    def __init__(self, max_records: int = 1000, log: bool = True) -> None:
        self.records: deque[DrillmapIssue] = deque(maxlen=max_records or None)
        self.max_records = max_records
        self._log = log

    def report(
        self,
        code: ErrorCode,
        message: str,
        *,
        severity: Severity = Severity.DEBUG,
        hint: str | None = None,
        **context: Any,
    ) -> DrillmapIssue:
        """Record a recoverable issue and log it."""
        issue = _issue_class(code)(
            message=message,
            code=code,
            context=context,
            recoverable=True,
            recovery_hint=hint,
            severity=severity,
        )
        self.records.append(issue)

        if self._log:
            logger.log(level_for(severity), "%s %s", issue, context or "")
        return issue

    def codes(self) -> list[ErrorCode]:
        return [r.code for r in self.records]

    def count(self, code: ErrorCode) -> int:
        return sum(1 for r in self.records if r.code is code)

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)


class NullDiagnostics(Diagnostics):
    """Sink that drops everything; the default when none is injected."""

    def __init__(self) -> None:
        super().__init__(max_records=0, log=False)

    def report(
        self,
        code: ErrorCode,
        message: str,
        *,
        severity: Severity = Severity.DEBUG,
        hint: str | None = None,
        **context: Any,
    ) -> DrillmapIssue:
        return _issue_class(code)(message=message, code=code, context=context, severity=severity)
