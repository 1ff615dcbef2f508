"""Tab strip label showing the rendered navigation line, with optional Qt widgets."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from ..core.render_cache import RenderedLine
from ..theme.highlights import BAR_GROUP, spans_to_html

try:  # pragma: no cover - Qt imports are optional during tests
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QLabel
except Exception:  # pragma: no cover - PySide6 not available
    Qt = None  # type: ignore[assignment]
    QLabel = None  # type: ignore[assignment]

if TYPE_CHECKING:  # pragma: no cover
    from ..engine import Engine

__all__ = ["TabStrip"]

LOGGER = logging.getLogger(__name__)


class TabStrip:
    """Displays :meth:`Engine.render_line` output; tracks its state without Qt."""

    def __init__(self, engine: "Engine | None" = None, *, highlights: Mapping[str, Any] | None = None) -> None:
        self._engine = engine
        if highlights is None and engine is not None:
            highlights = engine.settings.highlights
        self._highlights: Mapping[str, Any] = highlights or {}
        self._line = RenderedLine()
        self._html = ""
        self._label: Any = None

    @property
    def text(self) -> str:
        return self._line.text

    @property
    def html(self) -> str:
        return self._html

    @property
    def widget(self) -> Any:
        return self._label

    def install(self, parent: Any | None) -> Any:
        """Create the backing ``QLabel`` under ``parent`` when Qt is available."""

        if parent is None or QLabel is None:
            return None
        if self._label is not None:
            return self._label
        try:
            label = QLabel(parent)
            label.setObjectName("prowl-tab-strip")
            label.setTextFormat(Qt.TextFormat.RichText)
            label.setContentsMargins(0, 0, 0, 0)
        except Exception:
            LOGGER.debug("TabStrip.install: failed to create label", exc_info=True)
            return None
        self._label = label
        self._apply()
        return label

    def update(self, line: RenderedLine) -> None:
        self._line = line
        self._html = self._wrap(spans_to_html(line.spans, self._highlights))
        self._apply()

    def refresh(self) -> str:
        """Pull the current line from the engine and display it."""

        if self._engine is None:
            return self.text
        self.update(self._engine.render_line())
        return self.text

    def _wrap(self, body: str) -> str:
        bar = spans_to_html(((BAR_GROUP, " "),), self._highlights)
        return f"{body}{bar}" if body else bar

    def _apply(self) -> None:
        if self._label is None:
            return
        try:
            self._label.setText(self._html)
        except Exception:  # pragma: no cover - Qt may reject updates during teardown
            LOGGER.debug("TabStrip: unable to update label text", exc_info=True)
