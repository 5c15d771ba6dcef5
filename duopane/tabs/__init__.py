"""Per-panel tabs: ring, manager, tab strip and saved sessions."""

from .ring import Tab, TabDirection, TabRing

__all__ = ["Tab", "TabDirection", "TabRing"]
