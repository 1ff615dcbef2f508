"""Memoization of the rendered navigation line."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

__all__ = ["RenderCache", "RenderedLine", "Span"]

LOGGER = logging.getLogger(__name__)

Span = tuple[str, str]


@dataclass(slots=True, frozen=True)
class RenderedLine:
    """Final line as plain text plus ``(highlight_group, text)`` spans."""

    spans: tuple[Span, ...] = ()
    text: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", "".join(text for _group, text in self.spans))

    def __bool__(self) -> bool:
        return bool(self.spans)


class RenderCache:
    """Keeps the last rendered line until its inputs change or it is invalidated."""

    def __init__(self) -> None:
        self._line: RenderedLine | None = None
        self._generation = 0
        self._line_generation = -1
        self._width: int | None = None
        self._focus: str | None = None
        self._modified: bool | None = None
        self._render_count = 0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def render_count(self) -> int:
        """Number of times the line has been recomputed."""

        return self._render_count

    @property
    def line(self) -> RenderedLine | None:
        return self._line

    def invalidate(self) -> None:
        self._generation += 1
        self._line = None

    def lookup(self, focus: str | None, width: int, modified: bool) -> RenderedLine | None:
        if self._line is None or self._line_generation != self._generation:
            return None
        if self._width != width or self._focus != focus or self._modified != modified:
            return None
        return self._line

    def get_or_render(
        self,
        focus: str | None,
        width: int,
        modified: bool,
        render: Callable[[], RenderedLine],
    ) -> RenderedLine:
        cached = self.lookup(focus, width, modified)
        if cached is not None:
            return cached
        line = render()
        self._render_count += 1
        # ``render`` may prune stale documents and bump the generation; the new
        # line already reflects that, so tag it with the current value.
        self._line = line
        self._line_generation = self._generation
        self._width = width
        self._focus = focus
        self._modified = modified
        LOGGER.debug("Rendered line (generation=%d, width=%d)", self._generation, width)
        return line
