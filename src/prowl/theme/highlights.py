"""Highlight group names and helpers for hosts that apply colors."""

from __future__ import annotations

import html
from typing import Any, Iterable, Mapping, Sequence, Tuple

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

ColorTuple = Tuple[int, int, int]

BAR_GROUP = "ProwlBar"
TRUNCATION_GROUP = "ProwlTruncation"

GROUP_SETTINGS_KEYS: Mapping[str, str] = {
    BAR_GROUP: "bar",
    "ProwlActiveTab": "active_tab",
    "ProwlActiveLabel": "active_label",
    "ProwlActiveTabModified": "active_tab_modified",
    "ProwlActiveLabelModified": "active_label_modified",
    "ProwlInactiveTab": "inactive_tab",
    "ProwlInactiveLabel": "inactive_label",
    "ProwlInactiveTabModified": "inactive_tab_modified",
    "ProwlInactiveLabelModified": "inactive_label_modified",
    TRUNCATION_GROUP: "truncation",
}


def label_group(focused: bool, modified: bool) -> str:
    base = "ProwlActiveLabel" if focused else "ProwlInactiveLabel"
    return base + ("Modified" if modified else "")


def tab_group(focused: bool, modified: bool) -> str:
    base = "ProwlActiveTab" if focused else "ProwlInactiveTab"
    return base + ("Modified" if modified else "")


def _clamp_channel(value: Any) -> int:
    return min(255, max(0, int(value)))


def normalize_color(value: Any) -> ColorTuple:
    """Convert ``value`` into an RGB tuple, accepting hex strings or sequences."""

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        if text.startswith("#"):
            text = text[1:]
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Unsupported color format: {value!r}")
        return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]

    if isinstance(value, Sequence):
        items = list(value)
        if len(items) != 3:
            raise ValueError(f"RGB sequences must contain 3 values, received {value!r}")
        return tuple(_clamp_channel(component) for component in items)  # type: ignore[return-value]

    raise TypeError(f"Cannot convert {type(value)!r} to an RGB color")


def _to_hex(value: ColorTuple) -> str:
    return "#" + "".join(f"{component:02x}" for component in value)


def style_for_group(highlights: Mapping[str, Any], group: str) -> Any | None:
    """Return the configured style object for highlight ``group``."""

    key = GROUP_SETTINGS_KEYS.get(group)
    if key is None:
        return None
    return highlights.get(key)


def _css_for_style(style: Any) -> str:
    if style is None:
        return ""
    rules: list[str] = []
    fg = getattr(style, "fg", None)
    bg = getattr(style, "bg", None)
    if fg:
        rules.append(f"color:{_to_hex(normalize_color(fg))}")
    if bg:
        rules.append(f"background-color:{_to_hex(normalize_color(bg))}")
    if getattr(style, "bold", False):
        rules.append("font-weight:bold")
    return ";".join(rules)


def spans_to_html(spans: Iterable[tuple[str, str]], highlights: Mapping[str, Any]) -> str:
    """Render ``(group, text)`` spans as rich text for widget hosts."""

    parts: list[str] = []
    for group, text in spans:
        escaped = html.escape(text).replace(" ", "&nbsp;")
        css = _css_for_style(style_for_group(highlights, group))
        if css:
            parts.append(f'<span style="{css}">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)
