"""Projection of tracked documents into renderable segments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from ..theme.highlights import label_group, tab_group
from ..utils.text import display_width
from .document_model import TrackedDocument, display_basename

__all__ = ["RenderSegment", "format_display_name", "project_segments", "NO_NAME", "ELLIPSIS"]

NO_NAME = "[No Name]"
ELLIPSIS = "..."
MODIFIED_MARKER = "+"


def format_display_name(identity: str, max_length: int | None) -> str:
    """Return the last path component of ``identity``, shortened to ``max_length``."""

    name = display_basename(identity)
    if not name:
        return NO_NAME
    if max_length and len(name) > max_length:
        if max_length <= len(ELLIPSIS):
            return name[:max_length]
        name = name[: max_length - len(ELLIPSIS)] + ELLIPSIS
    return name


@dataclass(slots=True, frozen=True)
class RenderSegment:
    label: str
    display_name: str
    is_focused: bool = False
    is_modified: bool = False
    width: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", display_width(self.text))

    @property
    def label_text(self) -> str:
        return f" {self.label} " if self.label else " "

    @property
    def content_text(self) -> str:
        suffix = MODIFIED_MARKER if self.is_modified else ""
        return f"{self.display_name}{suffix} "

    @property
    def text(self) -> str:
        return self.label_text + self.content_text

    def spans(self) -> tuple[tuple[str, str], tuple[str, str]]:
        return (
            (label_group(self.is_focused, self.is_modified), self.label_text),
            (tab_group(self.is_focused, self.is_modified), self.content_text),
        )


def project_segments(
    documents: Sequence[TrackedDocument],
    *,
    focus_identity: str | None,
    max_filename_length: int | None,
    is_modified: Callable[[str], bool] | None = None,
) -> tuple[list[RenderSegment], int]:
    """Build one segment per document and return them with the focused index.

    ``is_modified`` is consulted only when given, i.e. when the modified
    indicator is enabled. The focused index falls back to ``0`` when the
    focused document is not tracked.
    """

    segments: list[RenderSegment] = []
    focus_index = 0
    for index, document in enumerate(documents):
        focused = document.identity == focus_identity
        if focused:
            focus_index = index
        modified = bool(is_modified(document.identity)) if is_modified is not None else False
        segments.append(
            RenderSegment(
                label=document.label,
                display_name=format_display_name(document.identity, max_filename_length),
                is_focused=focused,
                is_modified=modified,
            )
        )
    return segments, focus_index
