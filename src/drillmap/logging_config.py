"""
Logging configuration for drillmap.

Logs go through a rich handler on stderr, so a treemap printed on stdout
stays clean. Diagnostics severities map onto logging levels here, and the
CLI uses :func:`log_diagnostics_summary` to report what a run recorded.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler

from .exceptions.taxonomy import Severity

if TYPE_CHECKING:
    from .diagnostics import Diagnostics

SEVERITY_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def level_for(severity: Severity) -> int:
    """Logging level a diagnostic of ``severity`` is emitted at."""
    return SEVERITY_LEVELS[severity]


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``drillmap`` logger.

    Args:
        verbose: DEBUG level, with source paths and locals in tracebacks
        quiet: only ERROR level
        log_file: optional file that receives the same records, plain text

    Returns:
        The ``drillmap`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Record keys are user data and may contain brackets
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers)

    logger = logging.getLogger("drillmap")
    logger.setLevel(level)
    return logger


def log_diagnostics_summary(
    diagnostics: Diagnostics, logger: Optional[logging.Logger] = None
) -> Optional[str]:
    """Log one line counting recorded issues per code.

    The line is emitted at the level of the most severe issue, so a run with
    only DEBUG issues stays silent unless verbose logging is on.

    Returns:
        The summary line, or None when nothing was recorded.
    """
    if not len(diagnostics):
        return None

    counts = Counter(issue.code.value for issue in diagnostics.records)
    level = max(level_for(issue.severity) for issue in diagnostics.records)
    parts = ", ".join(f"{code} x{n}" for code, n in sorted(counts.items()))
    line = f"{len(diagnostics)} diagnostics recorded: {parts}"
    (logger or get_logger()).log(level, line)
    return line


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``drillmap`` namespace; ``get_logger("layout")`` -> ``drillmap.layout``."""
    if name is None:
        return logging.getLogger("drillmap")

    if not name.startswith("drillmap"):
        name = f"drillmap.{name}"

    return logging.getLogger(name)
