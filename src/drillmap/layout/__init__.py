"""Space-filling layout: hierarchy level in, rectangles out."""

from .models import LayoutRect
from .squarify import layout, worst_ratio

__all__ = ["LayoutRect", "layout", "worst_ratio"]
