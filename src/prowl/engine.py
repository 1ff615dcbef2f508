"""Engine tying the label registry, tracking store and render pipeline to a host editor."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, List

from .core.batching import DEFAULT_BATCH_DELAY, DebouncedBatch
from .core.document_model import TrackedDocument, display_basename, normalize_identity
from .core.labels import LabelRegistry
from .core.projector import project_segments
from .core.render_cache import RenderCache, RenderedLine
from .core.tracking import CloseSummary, DocumentTrackingStore
from .core.viewport import fit_viewport
from .host.events import (
    DocumentDeletedEvent,
    DocumentDiscardedEvent,
    DocumentShownEvent,
    HostEvent,
    HostEventBus,
)
from .host.protocol import DocumentHandle, HostEditor
from .services.settings import ConfigurationError, ProwlSettings, validate_settings

__all__ = ["Engine", "get_engine", "reset_engine", "setup", "CLOSE_ALL_KEY"]

LOGGER = logging.getLogger(__name__)

CLOSE_ALL_KEY = "!"


class Engine:
    """Owns all navigation state for one editor session.

    Every mutation goes through this object so the tracked sequence, the
    label indices and the render cache generation stay consistent.
    """

    def __init__(
        self,
        host: HostEditor,
        settings: ProwlSettings | None = None,
        *,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        settings = settings or ProwlSettings()
        validate_settings(settings)
        self._host = host
        self._settings = settings
        self._cache = RenderCache()
        self._registry = LabelRegistry(settings.labels)
        self._store = DocumentTrackingStore(self._registry, host, self._cache)
        self._batch: DebouncedBatch[str] = DebouncedBatch(self._store.track_many, delay=batch_delay, loop=loop)
        self._bus: HostEventBus | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def host(self) -> HostEditor:
        return self._host

    @property
    def settings(self) -> ProwlSettings:
        return self._settings

    @property
    def store(self) -> DocumentTrackingStore:
        return self._store

    @property
    def cache(self) -> RenderCache:
        return self._cache

    @property
    def batch(self) -> DebouncedBatch[str]:
        return self._batch

    def get_state(self) -> List[TrackedDocument]:
        """Return a deep copy of the tracked documents in navigation order."""

        return copy.deepcopy(list(self._store.documents))

    def get_config(self) -> ProwlSettings:
        return copy.deepcopy(self._settings)

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------
    def attach(self, bus: HostEventBus) -> None:
        """Subscribe to host lifecycle events published on ``bus``.

        Subscriptions are weak: an engine nobody references anymore stops
        receiving events instead of being kept alive by the host.
        """

        if self._bus is bus:
            return
        if self._bus is not None:
            self.detach()
        bus.subscribe(DocumentShownEvent, self._on_shown, weak=True)
        bus.subscribe(DocumentDeletedEvent, self._on_deleted, weak=True)
        bus.subscribe(DocumentDiscardedEvent, self._on_discarded, weak=True)
        self._bus = bus

    def detach(self) -> None:
        bus = self._bus
        if bus is None:
            return
        bus.unsubscribe(DocumentShownEvent, self._on_shown)
        bus.unsubscribe(DocumentDeletedEvent, self._on_deleted)
        bus.unsubscribe(DocumentDiscardedEvent, self._on_discarded)
        self._batch.cancel()
        self._bus = None

    def document_shown(self, path: str) -> None:
        """Queue ``path`` for tracking; bursts are collapsed into one batch."""

        identity = normalize_identity(path)
        if identity is None:
            return
        self._batch.add(identity)

    def document_deleted(self, path: str) -> None:
        identity = normalize_identity(path)
        if identity is not None:
            self._store.untrack(identity)

    def document_discarded(self, handle: DocumentHandle) -> None:
        self._store.discard(handle)

    def flush_pending(self) -> None:
        self._batch.flush_now()

    def _on_shown(self, event: HostEvent) -> None:
        self.document_shown(event.path)

    def _on_deleted(self, event: HostEvent) -> None:
        self.document_deleted(event.path)

    def _on_discarded(self, event: HostEvent) -> None:
        self.document_discarded(event.handle)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def track(self, path: str) -> bool:
        identity = normalize_identity(path)
        return identity is not None and self._store.track(identity) is not None

    def untrack(self, path: str) -> bool:
        identity = normalize_identity(path)
        return identity is not None and self._store.untrack(identity)

    def reorder(self) -> None:
        self._store.reorder_by_label_priority()

    def jump(self, label: str) -> bool:
        """Focus the document bound to ``label``; ``False`` when nothing is bound."""

        if not label:
            return False
        document = self._registry.by_label(label)
        if document is None:
            return False
        return self._focus(document.identity)

    def next(self) -> bool:
        return self._cycle(1)

    def prev(self) -> bool:
        return self._cycle(-1)

    def close(self, label: str) -> bool:
        """Delete the document bound to ``label`` without forcing."""

        document = self._registry.by_label(label) if label else None
        if document is None:
            return False
        identity = document.identity
        handle = self._host.find_document(identity)
        if handle is None:
            return False
        result = self._host.delete_document(handle)
        if not result.ok:
            self._host.notify(f"Can't close buffer: {display_basename(identity)}", logging.WARNING)
            return False
        self._store.untrack(identity)
        return True

    def close_all_except_current(self) -> CloseSummary:
        summary = self._store.close_all_except(self._focus_identity())
        for name in summary.failed_names:
            self._host.notify(f"Can't close buffer: {name}", logging.WARNING)
        self._host.notify(summary.message(), logging.INFO)
        return summary

    def handle_key(self, key: str) -> bool:
        """Dispatch a key typed after the jump mapping.

        ``!`` closes everything but the current document, an uppercase letter
        closes the document under its lowercase label, anything else jumps.
        """

        if key == CLOSE_ALL_KEY:
            self.close_all_except_current()
            return True
        if len(key) == 1 and key.isalpha() and key.isupper():
            return self.close(key.lower())
        return self.jump(key)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self) -> str:
        return self.render_line().text

    def render_line(self) -> RenderedLine:
        width = self._host.display_width()
        handle = self._host.current_document()
        focus = self._identity_for(handle)
        modified = self._is_modified_handle(handle)
        return self._cache.get_or_render(focus, width, modified, lambda: self._compose(focus, width))

    def refresh(self) -> None:
        self._cache.invalidate()

    def describe(self) -> List[str]:
        """Return one line per tracked document, for debugging."""

        return [
            f"{index}. [{document.label}] {document.name}"
            for index, document in enumerate(self._store.documents, start=1)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _compose(self, focus: str | None, width: int) -> RenderedLine:
        self._store.prune_ineligible()
        is_modified = self._is_modified_identity if self._settings.show_modified_indicator else None
        segments, focus_index = project_segments(
            self._store.documents,
            focus_identity=focus,
            max_filename_length=self._settings.max_filename_length,
            is_modified=is_modified,
        )
        return fit_viewport(segments, focus_index, width).to_line()

    def _cycle(self, direction: int) -> bool:
        documents = self._store.documents
        if not documents:
            return False
        index = self._store.index_of(self._focus_identity())
        if index is None:
            return self._focus(documents[0].identity)
        target = index + direction
        if self._settings.cycle_wraps_around:
            target %= len(documents)
        elif not 0 <= target < len(documents):
            return False
        return self._focus(documents[target].identity)

    def _focus(self, identity: str) -> bool:
        handle = self._host.find_document(identity)
        if handle is None or not self._host.set_current_document(handle):
            return False
        self._cache.invalidate()
        return True

    def _focus_identity(self) -> str | None:
        return self._identity_for(self._host.current_document())

    def _identity_for(self, handle: DocumentHandle | None) -> str | None:
        if handle is None:
            return None
        info = self._host.document_info(handle)
        if info is None:
            return None
        return normalize_identity(info.path)

    def _is_modified_handle(self, handle: DocumentHandle | None) -> bool:
        if handle is None:
            return False
        return self._host.is_modified(handle) is True

    def _is_modified_identity(self, identity: str) -> bool:
        return self._is_modified_handle(self._host.find_document(identity))


# ----------------------------------------------------------------------
# Session-wide accessor
# ----------------------------------------------------------------------
_ENGINE: Engine | None = None


def setup(
    host: HostEditor,
    settings: ProwlSettings | None = None,
    *,
    bus: HostEventBus | None = None,
    **engine_kwargs: Any,
) -> Engine | None:
    """Create the session engine, reporting configuration errors to the host.

    Returns ``None`` (and creates no state) when the settings are invalid.
    Calling it again returns the existing engine unchanged.
    """

    global _ENGINE
    if _ENGINE is not None:
        host.notify("Prowl: Already initialized", logging.WARNING)
        return _ENGINE
    try:
        engine = Engine(host, settings, **engine_kwargs)
    except ConfigurationError as exc:
        LOGGER.error("Prowl setup aborted: %s", exc)
        host.notify(f"Prowl: {exc}", logging.ERROR)
        return None
    if bus is not None:
        engine.attach(bus)
    _ENGINE = engine
    LOGGER.debug("Prowl engine initialized with %d labels", len(engine.settings.labels))
    return engine


def get_engine() -> Engine | None:
    return _ENGINE


def reset_engine() -> None:
    """Detach and forget the session engine."""

    global _ENGINE
    if _ENGINE is not None:
        _ENGINE.detach()
    _ENGINE = None
