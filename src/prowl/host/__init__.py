"""Host editor contract and lifecycle events."""

from .events import (
    DocumentDeletedEvent,
    DocumentDiscardedEvent,
    DocumentShownEvent,
    HostEvent,
    HostEventBus,
)
from .protocol import DeleteResult, DocumentInfo, HostEditor

__all__ = [
    "DeleteResult",
    "DocumentDeletedEvent",
    "DocumentDiscardedEvent",
    "DocumentInfo",
    "DocumentShownEvent",
    "HostEditor",
    "HostEvent",
    "HostEventBus",
]
