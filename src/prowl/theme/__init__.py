"""Highlight group metadata shared by renderers and widgets."""

from .highlights import (
    BAR_GROUP,
    GROUP_SETTINGS_KEYS,
    TRUNCATION_GROUP,
    label_group,
    normalize_color,
    spans_to_html,
    style_for_group,
    tab_group,
)

__all__ = [
    "BAR_GROUP",
    "GROUP_SETTINGS_KEYS",
    "TRUNCATION_GROUP",
    "label_group",
    "normalize_color",
    "spans_to_html",
    "style_for_group",
    "tab_group",
]
