"""Fit labels into cells."""

from __future__ import annotations

from typing import Optional, Protocol

from rich.cells import cell_len


class TextMeasurer(Protocol):
    def measure(self, text: str) -> float: ...


class AverageCharMeasurer:
    """Pixel width estimate: characters x font size x average glyph ratio."""

    def __init__(self, font_size: float = 12.0, ratio: float = 0.6) -> None:
        self.font_size = font_size
        self.ratio = ratio

    def measure(self, text: str) -> float:
        return len(text) * self.font_size * self.ratio


class CellMeasurer:
    """Terminal width in cells; wide glyphs count double."""

    def measure(self, text: str) -> float:
        return float(cell_len(text))


class LabelFitter:
    """Truncate a label with an ellipsis until it fits its cell.

    Cells below ``min_width`` x ``min_height`` get no label at all.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        min_width: float = 30.0,
        min_height: float = 20.0,
        inset: float = 3.0,
        ellipsis: str = "...",
    ) -> None:
        self.measurer = measurer
        self.min_width = min_width
        self.min_height = min_height
        self.inset = inset
        self.ellipsis = ellipsis

    def fit(self, text: str, width: float, height: float) -> Optional[str]:
        if width < self.min_width or height < self.min_height:
            return None
        available = width - 2 * self.inset
        if available <= 0 or not text:
            return None
        if self.measurer.measure(text) <= available:
            return text

        for end in range(len(text) - 1, 0, -1):
            head = text[:end].rstrip()
            if not head:
                break
            candidate = head + self.ellipsis
            if self.measurer.measure(candidate) <= available:
                return candidate
        return None
