"""Drill-down navigation over a hierarchy."""

from .controller import Crumb, NavigationController

__all__ = ["Crumb", "NavigationController"]
