"""Optional widget front-ends."""

from .tab_strip import TabStrip

__all__ = ["TabStrip"]
