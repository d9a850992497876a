"""Stable colour assignment.

A node's colour depends only on its sibling group (the parent's path), its
own key and the set of top-level keys. Re-renders after a resize keep every
node the same colour, and legend swatches always match the cells. Top-level
siblings get distinct colours while they fit in the palette.
"""

from __future__ import annotations

import colorsys
import zlib
from typing import Iterable, Sequence

from ..hierarchy.models import HierarchyNode

CATEGORY10: tuple[str, ...] = (
    "#1f77b4",  # blue
    "#ff7f0e",  # orange
    "#2ca02c",  # green
    "#d62728",  # red
    "#9467bd",  # purple
    "#8c564b",  # brown
    "#e377c2",  # pink
    "#7f7f7f",  # gray
    "#bcbd22",  # olive
    "#17becf",  # cyan
)


def stable_hash(text: str) -> int:
    """CRC32, unlike ``hash()`` it does not change between interpreter runs."""
    return zlib.crc32(text.encode("utf-8"))


def hex_to_rgb(color: str) -> tuple[float, float, float]:
    color = color.lstrip("#")
    return tuple(int(color[i : i + 2], 16) / 255 for i in (0, 2, 4))  # type: ignore[return-value]


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(round(min(1.0, max(0.0, c)) * 255) for c in (r, g, b)))


def luminance(color: str) -> float:
    """Relative luminance (0 = black, 1 = white)."""
    r, g, b = hex_to_rgb(color)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def readable_text_color(fill: str) -> str:
    return "#000000" if luminance(fill) > 0.55 else "#ffffff"


def assign_slots(keys: Iterable[str], size: int) -> dict[str, int]:
    """Distinct palette slots for up to ``size`` keys.

    Each key starts at its hash slot and moves to the next free one on a
    collision. Keys are placed in sorted order, so the result depends only
    on the key set. Past ``size`` keys, slots repeat.
    """
    slots: dict[str, int] = {}
    taken: set[int] = set()
    for key in sorted(set(keys)):
        slot = stable_hash(key) % size
        if len(taken) < size:
            while slot in taken:
                slot = (slot + 1) % size
        taken.add(slot)
        slots[key] = slot
    return slots


class ColorScheme:
    """Pure colour function over ``(group_path, key)``.

    Top-level groups take a palette colour. Keys passed to :meth:`bind` get
    distinct slots; any other key falls back to its hash slot. Deeper nodes
    take a variant of their parent's colour: same hue, lightness and
    saturation shifted by the hash of their own key.
    """

    def __init__(self, palette: Sequence[str] = CATEGORY10, keys: Iterable[str] = ()) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette = tuple(palette)
        self._cache: dict[tuple[tuple[str, ...], str], str] = {}
        self._slots: dict[str, int] = {}
        self.bind(keys)

    def bind(self, keys: Iterable[str]) -> None:
        """Reserve distinct palette colours for the top-level ``keys``."""
        self._slots = assign_slots(keys, len(self.palette))
        self._cache.clear()

    def color(self, group_path: tuple[str, ...], key: str) -> str:
        cache_key = (tuple(group_path), key)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        if not group_path:
            slot = self._slots.get(key)
            if slot is None:
                slot = stable_hash(key) % len(self.palette)
            result = self.palette[slot]
        else:
            base = self.color(tuple(group_path[:-1]), group_path[-1])
            result = self.variant(base, key)

        self._cache[cache_key] = result
        return result

    def color_for(self, node: HierarchyNode) -> str:
        return self.color(node.group_key, node.key)

    @staticmethod
    def variant(base: str, identifier: str) -> str:
        """Shade of ``base`` keyed by ``identifier``."""
        h, l, s = colorsys.rgb_to_hls(*hex_to_rgb(base))
        spread = (stable_hash(identifier) % 1000) / 1000
        lightness = min(0.8, max(0.25, 0.3 + 0.45 * spread))
        saturation = min(1.0, max(0.2, s * (0.6 + 0.4 * (1 - spread))))
        return rgb_to_hex(*colorsys.hls_to_rgb(h, lightness, saturation))
