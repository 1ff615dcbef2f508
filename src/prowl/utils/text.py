"""Display-column helpers for width-constrained status lines."""

from __future__ import annotations

from wcwidth import wcswidth, wcwidth

__all__ = ["display_width", "clip_to_width"]


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""

    if not text:
        return 0
    width = wcswidth(text)
    if width >= 0:
        return width
    # Non-printable characters make wcswidth bail out; count them as zero-width.
    return sum(max(wcwidth(ch), 0) for ch in text)


def clip_to_width(text: str, width: int) -> str:
    """Return the longest prefix of ``text`` that fits in ``width`` columns."""

    if width <= 0:
        return ""
    used = 0
    for index, ch in enumerate(text):
        cell = max(wcwidth(ch), 0)
        if used + cell > width:
            return text[:index]
        used += cell
    return text
