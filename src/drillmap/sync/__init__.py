"""Tooltip and legend state kept in step with the rendered tree."""

from .legend import OTHERS_COLOR, LegendEntry, legend_entries
from .tooltip import TooltipData, TooltipSynchronizer, place_tooltip

__all__ = [
    "LegendEntry",
    "OTHERS_COLOR",
    "legend_entries",
    "TooltipData",
    "TooltipSynchronizer",
    "place_tooltip",
]
