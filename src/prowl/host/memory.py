"""In-process host editor used by the CLI and the test-suite."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from ..core.document_model import normalize_identity
from .events import DocumentDeletedEvent, DocumentDiscardedEvent, DocumentShownEvent, HostEventBus
from .protocol import DeleteResult, DocumentHandle, DocumentInfo, ViewHandle

__all__ = ["InMemoryHost", "Notification"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _Document:
    handle: DocumentHandle
    path: str
    listed: bool = True
    buftype: str = ""
    modified: bool = False


@dataclass(slots=True, frozen=True)
class Notification:
    message: str
    level: int


class InMemoryHost:
    """Minimal editor model: documents, views showing them, and a focused view.

    Every state change that a real editor would announce is published on
    :attr:`bus`, so an attached engine sees the same event stream.
    """

    def __init__(self, *, width: int = 120, bus: HostEventBus | None = None) -> None:
        self.bus = bus or HostEventBus()
        self.width = width
        self.notifications: List[Notification] = []
        self._documents: Dict[DocumentHandle, _Document] = {}
        self._views: Dict[ViewHandle, DocumentHandle | None] = {1: None}
        self._current_view: ViewHandle = 1
        self._next_handle = 1
        self._next_view = 2

    # ------------------------------------------------------------------
    # Editor-side operations
    # ------------------------------------------------------------------
    def open_document(
        self,
        path: Path | str,
        *,
        listed: bool = True,
        buftype: str = "",
        focus: bool = True,
    ) -> DocumentHandle:
        """Open ``path`` (reusing an existing handle) and optionally display it."""

        identity = normalize_identity(path) or ""
        handle = self.find_document(identity) if identity else None
        if handle is None:
            handle = self._next_handle
            self._next_handle += 1
            self._documents[handle] = _Document(handle=handle, path=identity, listed=listed, buftype=buftype)
            LOGGER.debug("Opened document %s as handle %d", identity or "<unnamed>", handle)
        if focus:
            self.set_current_document(handle)
        else:
            self.bus.publish(DocumentShownEvent(handle, identity))
        return handle

    def split_view(self, handle: DocumentHandle) -> ViewHandle:
        """Open an extra view displaying ``handle`` without moving focus."""

        if handle not in self._documents:
            raise KeyError(f"Unknown document handle: {handle}")
        view = self._next_view
        self._next_view += 1
        self._views[view] = handle
        self.bus.publish(DocumentShownEvent(handle, self._documents[handle].path))
        return view

    def close_view(self, view: ViewHandle) -> None:
        if view == self._current_view:
            raise ValueError("Cannot close the focused view")
        self._views.pop(view, None)

    def set_modified(self, handle: DocumentHandle, modified: bool = True) -> None:
        self._documents[handle].modified = modified

    def set_listed(self, handle: DocumentHandle, listed: bool) -> None:
        self._documents[handle].listed = listed

    def wipe_document(self, handle: DocumentHandle) -> None:
        """Remove ``handle`` outright, bypassing the unsaved-changes check."""

        document = self._documents.get(handle)
        if document is None:
            return
        self._remove(document)

    # ------------------------------------------------------------------
    # HostEditor protocol
    # ------------------------------------------------------------------
    def find_document(self, identity: str) -> DocumentHandle | None:
        for document in self._documents.values():
            if document.path and document.path == identity:
                return document.handle
        return None

    def document_info(self, handle: DocumentHandle) -> DocumentInfo | None:
        document = self._documents.get(handle)
        if document is None:
            return None
        return DocumentInfo(handle=handle, path=document.path, listed=document.listed, buftype=document.buftype)

    def is_modified(self, handle: DocumentHandle) -> bool | None:
        document = self._documents.get(handle)
        return None if document is None else document.modified

    def list_views(self) -> Sequence[Tuple[ViewHandle, DocumentHandle]]:
        return [(view, handle) for view, handle in self._views.items() if handle is not None]

    def current_document(self) -> DocumentHandle | None:
        return self._views.get(self._current_view)

    def display_width(self) -> int:
        return self.width

    def delete_document(self, handle: DocumentHandle) -> DeleteResult:
        document = self._documents.get(handle)
        if document is None:
            return DeleteResult(ok=False, reason="no such document")
        if document.modified:
            return DeleteResult(ok=False, reason="unsaved changes")
        self._remove(document)
        return DeleteResult(ok=True)

    def set_current_document(self, handle: DocumentHandle) -> bool:
        document = self._documents.get(handle)
        if document is None:
            return False
        self._views[self._current_view] = handle
        self.bus.publish(DocumentShownEvent(handle, document.path))
        return True

    def notify(self, message: str, level: int) -> None:
        self.notifications.append(Notification(message=message, level=level))
        LOGGER.log(level, "%s", message)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _remove(self, document: _Document) -> None:
        handle = document.handle
        self.bus.publish(DocumentDeletedEvent(handle, document.path))
        del self._documents[handle]
        replacement = next(iter(self._documents), None)
        for view, shown in list(self._views.items()):
            if shown != handle:
                continue
            if view == self._current_view:
                self._views[view] = replacement
            else:
                del self._views[view]
        self.bus.publish(DocumentDiscardedEvent(handle, document.path))
