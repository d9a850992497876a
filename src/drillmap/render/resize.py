"""Coalescing of resize notifications.

Upstream debouncing may still deliver several sizes between two frames.
Only the most recent one is kept. A rebuild bumps the generation so a
timer armed before the rebuild cannot fire against the new tree; the
size it carried is handed back so the new tree is laid out at it.
"""

from __future__ import annotations

from typing import Optional


class ResizeCoalescer:
    def __init__(self) -> None:
        self.generation = 0
        self._pending: Optional[tuple[float, float]] = None
        self.superseded = 0

    @property
    def pending(self) -> Optional[tuple[float, float]]:
        return self._pending

    def submit(self, width: float, height: float) -> int:
        """Record a size, replacing any pending one; returns the generation token."""
        if self._pending is not None:
            self.superseded += 1
        self._pending = (width, height)
        return self.generation

    def take(self, generation: Optional[int] = None) -> Optional[tuple[float, float]]:
        """Pop the latest size, or None if nothing is pending or the token is stale."""
        if generation is not None and generation != self.generation:
            return None
        pending, self._pending = self._pending, None
        return pending

    def invalidate(self) -> Optional[tuple[float, float]]:
        """Start a new generation and hand back the size that was pending, if any."""
        self.generation += 1
        pending, self._pending = self._pending, None
        return pending
