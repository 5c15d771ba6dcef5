"""File-listing panel: view state, navigation, marking, search and painting."""

from .navigation import NavigationController, ScrollPolicy
from .panel import INVALID_FORMAT_MESSAGE, Panel
from .state import PanelViewState

__all__ = [
    "INVALID_FORMAT_MESSAGE",
    "NavigationController",
    "Panel",
    "PanelViewState",
    "ScrollPolicy",
]
