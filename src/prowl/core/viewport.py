"""Selection of the segment window that fits the available width."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..theme.highlights import TRUNCATION_GROUP
from ..utils.text import clip_to_width, display_width
from .projector import RenderSegment
from .render_cache import RenderedLine, Span

__all__ = [
    "LEFT_MARKER",
    "MIN_TABLINE_WIDTH",
    "RIGHT_MARKER",
    "TRUNCATION_INDICATOR_WIDTH",
    "ViewportWindow",
    "fit_viewport",
]

MIN_TABLINE_WIDTH = 20
TRUNCATION_INDICATOR_WIDTH = 3
LEFT_MARKER = " < "
RIGHT_MARKER = " > "


@dataclass(slots=True, frozen=True)
class ViewportWindow:
    segments: tuple[RenderSegment, ...] = ()
    start: int = 0
    truncated_left: bool = False
    truncated_right: bool = False
    budget: int = 0

    @property
    def width(self) -> int:
        """Columns used by the segments and markers."""

        return display_width(self.to_line().text)

    def to_line(self) -> RenderedLine:
        if not self.segments:
            return RenderedLine()
        spans: list[Span] = []
        if self.truncated_left:
            spans.append((TRUNCATION_GROUP, LEFT_MARKER))
        for segment in self.segments:
            segment_spans = segment.spans()
            if segment.width > self.budget:
                segment_spans = _clip_spans(segment_spans, self.budget)
            spans.extend(segment_spans)
        if self.truncated_right:
            spans.append((TRUNCATION_GROUP, RIGHT_MARKER))
        return RenderedLine(spans=tuple(spans))


def fit_viewport(
    segments: Sequence[RenderSegment], focus_index: int, available_width: int
) -> ViewportWindow:
    """Grow a window around ``segments[focus_index]`` alternately left and right.

    When every segment fits, all of them are shown without markers. Otherwise
    one marker's width is held back and the window is refitted with room for
    a second marker if both sides end up cut. A side stops growing as soon as
    its next segment does not fit.
    """

    count = len(segments)
    if count == 0 or available_width < MIN_TABLINE_WIDTH:
        return ViewportWindow()
    focus_index = min(max(focus_index, 0), count - 1)

    if sum(segment.width for segment in segments) <= available_width:
        return ViewportWindow(segments=tuple(segments), budget=available_width)

    budget = available_width - TRUNCATION_INDICATOR_WIDTH
    left, right = _expand(segments, focus_index, budget)
    if left >= 0 and right < count:
        budget -= TRUNCATION_INDICATOR_WIDTH
        left, right = _expand(segments, focus_index, budget)

    return ViewportWindow(
        segments=tuple(segments[left + 1 : right]),
        start=left + 1,
        truncated_left=left >= 0,
        truncated_right=right < count,
        budget=budget,
    )


def _expand(segments: Sequence[RenderSegment], focus_index: int, budget: int) -> tuple[int, int]:
    """Return the exclusive ``(left, right)`` bounds of the greedy window."""

    count = len(segments)
    total_width = segments[focus_index].width
    left = focus_index - 1
    right = focus_index + 1
    left_open = left >= 0
    right_open = right < count
    while left_open or right_open:
        if left_open:
            width = segments[left].width
            if total_width + width <= budget:
                total_width += width
                left -= 1
                left_open = left >= 0
            else:
                left_open = False
        if right_open:
            width = segments[right].width
            if total_width + width <= budget:
                total_width += width
                right += 1
                right_open = right < count
            else:
                right_open = False
    return left, right


def _clip_spans(spans: Sequence[Span], width: int) -> list[Span]:
    clipped: list[Span] = []
    remaining = width
    for group, text in spans:
        piece = clip_to_width(text, remaining)
        if piece:
            clipped.append((group, piece))
        remaining -= display_width(piece)
        if remaining <= 0:
            break
    return clipped
