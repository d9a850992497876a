"""
drillmap - drill-down treemaps over grouped records

Flat records are grouped level by level into a weighted tree, tiled with the
squarified algorithm and browsed one level at a time with breadcrumbs,
tooltips and a legend that stay in step with the current focus.
"""

__version__ = "0.1.0"

from .api import build_hierarchy, visualize
from .config import VisualizationConfig, load_config
from .diagnostics import Diagnostics
from .hierarchy import Hierarchy, HierarchyNode, aggregate
from .layout import LayoutRect, layout
from .navigation import NavigationController
from .render import RenderCoordinator, Scene
from .translation import LabelTranslator

__all__ = [
    "build_hierarchy",  # Main entry points
    "visualize",
    "aggregate",
    "layout",
    "Hierarchy",
    "HierarchyNode",
    "LayoutRect",
    "NavigationController",
    "RenderCoordinator",
    "Scene",
    "VisualizationConfig",
    "load_config",
    "Diagnostics",
    "LabelTranslator",
]
