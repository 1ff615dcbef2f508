"""Label registry: priority table, lookup indices and allocation policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, MutableSequence, Sequence

from ..services.settings import ConfigurationError
from .document_model import TrackedDocument

__all__ = ["Allocation", "LabelRegistry", "FALLBACK_PRIORITY"]

LOGGER = logging.getLogger(__name__)

FALLBACK_PRIORITY = 999


@dataclass(slots=True, frozen=True)
class Allocation:
    """Outcome of :meth:`LabelRegistry.allocate`."""

    document: TrackedDocument
    evicted: str | None = None


class LabelRegistry:
    """Maps the configured label sequence to tracked documents.

    The lookup indices are derived data: they are only ever rebuilt from the
    authoritative document sequence, never patched entry by entry.
    """

    def __init__(self, labels: Sequence[str]) -> None:
        labels = tuple(labels)
        if not labels:
            raise ConfigurationError("labels cannot be empty")
        if len(set(labels)) != len(labels):
            raise ConfigurationError("labels must be unique")
        self._labels = labels
        self._priority: Dict[str, int] = {label: index for index, label in enumerate(labels, start=1)}
        self._by_label: Dict[str, TrackedDocument] = {}
        self._by_identity: Dict[str, TrackedDocument] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def priority_of(self, label: str) -> int:
        """Return the 1-based priority of ``label`` (lower wins)."""

        return self._priority.get(label, FALLBACK_PRIORITY)

    def by_label(self, label: str) -> TrackedDocument | None:
        return self._by_label.get(label)

    def by_identity(self, identity: str) -> TrackedDocument | None:
        return self._by_identity.get(identity)

    def free_label(self) -> str | None:
        """Return the highest-priority label with no document bound to it."""

        for label in self._labels:
            if label not in self._by_label:
                return label
        return None

    def bound_labels(self) -> List[str]:
        return [label for label in self._labels if label in self._by_label]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def rebuild(self, documents: Iterable[TrackedDocument]) -> None:
        by_label: Dict[str, TrackedDocument] = {}
        by_identity: Dict[str, TrackedDocument] = {}
        for document in documents:
            if document.label:
                by_label[document.label] = document
            by_identity[document.identity] = document
        self._by_label = by_label
        self._by_identity = by_identity

    def allocate(
        self, documents: MutableSequence[TrackedDocument], identity: str
    ) -> Allocation | None:
        """Bind ``identity`` to a label, appending to or shifting ``documents``.

        Returns ``None`` when ``identity`` is already tracked. When every label
        is taken, each label adopts the document of the next lower-priority
        label and the lowest-priority label receives ``identity``; whatever
        the highest-priority label held is evicted.
        """

        if identity in self._by_identity:
            return None

        label = self.free_label()
        if label is not None:
            document = TrackedDocument(label=label, identity=identity)
            documents.append(document)
            self.rebuild(documents)
            return Allocation(document=document)

        labels = self._labels
        head = self._by_label.get(labels[0])
        evicted = head.identity if head is not None else None
        for current_label, next_label in zip(labels, labels[1:]):
            current = self._by_label.get(current_label)
            following = self._by_label.get(next_label)
            if current is not None and following is not None:
                current.identity = following.identity
        last = self._by_label[labels[-1]]
        last.identity = identity
        self.rebuild(documents)
        LOGGER.debug("Label chain shifted for %s; evicted %s", identity, evicted)
        return Allocation(document=last, evicted=evicted)
