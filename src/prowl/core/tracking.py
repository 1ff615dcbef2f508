"""Ordered store of labelled documents; the source of truth for navigation order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..host.protocol import DocumentHandle, HostEditor
from .document_model import TrackedDocument, display_basename
from .labels import Allocation, LabelRegistry
from .render_cache import RenderCache

__all__ = ["CloseSummary", "DocumentTrackingStore"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CloseSummary:
    """Outcome of a close-all-except sweep."""

    closed: int = 0
    failed: int = 0
    skipped_visible: int = 0
    failed_names: List[str] = field(default_factory=list)

    def message(self) -> str:
        plural = "" if self.closed == 1 else "s"
        text = f"Closed {self.closed} buffer{plural}"
        if self.failed:
            text += f" ({self.failed} failed - unsaved changes)"
        if self.skipped_visible:
            text += f" ({self.skipped_visible} visible in windows)"
        return text


@dataclass(slots=True)
class _Eligibility:
    result: bool
    generation: int


class DocumentTrackingStore:
    """Owns the tracked-document sequence and keeps the registry in sync with it."""

    def __init__(self, registry: LabelRegistry, host: HostEditor, cache: RenderCache) -> None:
        self._registry = registry
        self._host = host
        self._cache = cache
        self._documents: List[TrackedDocument] = []
        self._eligibility: Dict[DocumentHandle, _Eligibility] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def documents(self) -> tuple[TrackedDocument, ...]:
        return tuple(self._documents)

    @property
    def registry(self) -> LabelRegistry:
        return self._registry

    def __len__(self) -> int:
        return len(self._documents)

    def index_of(self, identity: str | None) -> int | None:
        if identity is None:
            return None
        for index, document in enumerate(self._documents):
            if document.identity == identity:
                return index
        return None

    def is_eligible(self, identity: str) -> bool:
        """Return whether the host considers ``identity`` worth a label."""

        handle = self._host.find_document(identity)
        if handle is None:
            return False
        generation = self._cache.generation
        cached = self._eligibility.get(handle)
        if cached is not None and cached.generation == generation:
            return cached.result
        info = self._host.document_info(handle)
        result = info is not None and info.eligible
        self._eligibility[handle] = _Eligibility(result=result, generation=generation)
        return result

    def discard(self, handle: DocumentHandle) -> None:
        """Forget cached eligibility for a handle the host has unloaded."""

        self._eligibility.pop(handle, None)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def track(self, identity: str) -> Allocation | None:
        allocation = self._allocate(identity)
        if allocation is not None:
            self._cache.invalidate()
        return allocation

    def track_many(self, identities: Iterable[str]) -> List[Allocation]:
        """Track a batch of identities with a single cache invalidation."""

        allocations: List[Allocation] = []
        for identity in identities:
            allocation = self._allocate(identity)
            if allocation is not None:
                allocations.append(allocation)
        if allocations:
            self._cache.invalidate()
        return allocations

    def untrack(self, identity: str) -> bool:
        index = self.index_of(identity)
        if index is None:
            return False
        del self._documents[index]
        self._commit()
        return True

    def reorder_by_label_priority(self) -> None:
        priority_of = self._registry.priority_of
        self._documents.sort(key=lambda document: priority_of(document.label))
        self._commit()

    def prune_ineligible(self) -> List[str]:
        """Drop documents the host no longer lists; returns their identities."""

        stale = [doc.identity for doc in self._documents if not self.is_eligible(doc.identity)]
        if stale:
            self._documents = [doc for doc in self._documents if doc.identity not in stale]
            self._commit()
            LOGGER.debug("Pruned %d ineligible document(s): %s", len(stale), stale)
        return stale

    def close_all_except(self, focus_identity: str | None) -> CloseSummary:
        """Delete every tracked document except the focus and those on screen."""

        summary = CloseSummary()
        host = self._host
        visible = {handle for _view, handle in host.list_views()}
        kept: List[TrackedDocument] = []
        for document in reversed(list(self._documents)):
            if document.identity == focus_identity:
                kept.append(document)
                continue
            handle = host.find_document(document.identity)
            if handle is None:
                continue
            if handle in visible:
                summary.skipped_visible += 1
                kept.append(document)
                continue
            result = host.delete_document(handle)
            if result.ok:
                summary.closed += 1
                self._eligibility.pop(handle, None)
            else:
                summary.failed += 1
                summary.failed_names.append(display_basename(document.identity))
                LOGGER.debug("Host refused to delete %s: %s", document.identity, result.reason)
                kept.append(document)
        self._documents = kept
        self.reorder_by_label_priority()
        return summary

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _allocate(self, identity: str) -> Allocation | None:
        if self._registry.by_identity(identity) is not None:
            return None
        if not self.is_eligible(identity):
            return None
        return self._registry.allocate(self._documents, identity)

    def _commit(self) -> None:
        self._registry.rebuild(self._documents)
        self._cache.invalidate()
