"""Narrow contract between the engine and the host editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

__all__ = ["DeleteResult", "DocumentHandle", "DocumentInfo", "HostEditor", "ViewHandle"]

DocumentHandle = int
ViewHandle = int


@dataclass(slots=True, frozen=True)
class DocumentInfo:
    """Host attributes that decide whether a document may carry a label."""

    handle: DocumentHandle
    path: str
    listed: bool = True
    buftype: str = ""

    @property
    def eligible(self) -> bool:
        return self.listed and not self.buftype and bool(self.path)


@dataclass(slots=True, frozen=True)
class DeleteResult:
    ok: bool
    reason: str | None = None


@runtime_checkable
class HostEditor(Protocol):
    """Queries and commands the engine needs from an editor.

    Queries report failure by returning ``None`` rather than raising; the
    engine treats a missing answer as "absent" or ``False``.
    """

    def find_document(self, identity: str) -> DocumentHandle | None:
        """Return the handle of the open document with canonical path ``identity``."""

    def document_info(self, handle: DocumentHandle) -> DocumentInfo | None:
        ...

    def is_modified(self, handle: DocumentHandle) -> bool | None:
        ...

    def list_views(self) -> Sequence[tuple[ViewHandle, DocumentHandle]]:
        """Return ``(view, document)`` pairs for every open view."""

    def current_document(self) -> DocumentHandle | None:
        ...

    def display_width(self) -> int:
        ...

    def delete_document(self, handle: DocumentHandle) -> DeleteResult:
        """Delete ``handle`` without forcing; fails when there are unsaved changes."""

    def set_current_document(self, handle: DocumentHandle) -> bool:
        ...

    def notify(self, message: str, level: int) -> None:
        """Show an advisory message to the user (``level`` is a :mod:`logging` level)."""
