"""Utility helpers shared across Prowl modules."""

from .text import clip_to_width, display_width

__all__ = ["clip_to_width", "display_width"]
