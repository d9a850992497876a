"""Scene building: layout, colours and labels for the current focus."""

from .colors import CATEGORY10, ColorScheme
from .coordinator import NO_DATA_MESSAGE, RenderCoordinator, Surface
from .labels import AverageCharMeasurer, CellMeasurer, LabelFitter
from .resize import ResizeCoalescer
from .scene import Cell, Scene
from .terminal import TerminalSurface, terminal_config

__all__ = [
    "CATEGORY10",
    "ColorScheme",
    "RenderCoordinator",
    "Surface",
    "NO_DATA_MESSAGE",
    "AverageCharMeasurer",
    "CellMeasurer",
    "LabelFitter",
    "ResizeCoalescer",
    "Cell",
    "Scene",
    "TerminalSurface",
    "terminal_config",
]
