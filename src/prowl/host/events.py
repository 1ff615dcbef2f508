"""Synchronous bus carrying host document lifecycle events."""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from typing import Callable, Dict, List, Type

__all__ = [
    "DocumentDeletedEvent",
    "DocumentDiscardedEvent",
    "DocumentShownEvent",
    "HostEvent",
    "HostEventBus",
]

_LOGGER = logging.getLogger(__name__)


class HostEvent:
    """Base class for host document events."""

    __slots__ = ("handle", "path")

    def __init__(self, handle: int, path: str = "") -> None:
        self.handle = handle
        self.path = path

    def __repr__(self) -> str:
        return f"{type(self).__name__}(handle={self.handle!r}, path={self.path!r})"


class DocumentShownEvent(HostEvent):
    """Published when a document is added or displayed in a view."""

    __slots__ = ()


class DocumentDeletedEvent(HostEvent):
    """Published when the host deletes a document."""

    __slots__ = ()


class DocumentDiscardedEvent(HostEvent):
    """Published when the host unloads or wipes a document handle."""

    __slots__ = ()


Subscriber = Callable[[HostEvent], None]


@dataclass(slots=True)
class _Subscription:
    """One handler; bound methods subscribed weakly keep only a ``WeakMethod``."""

    handler: Subscriber | None
    weak_method: weakref.WeakMethod | None = None

    def resolve(self) -> Subscriber | None:
        if self.weak_method is not None:
            return self.weak_method()
        return self.handler

    def matches(self, handler: Subscriber) -> bool:
        return self.resolve() == handler


class HostEventBus:
    """Synchronous pub/sub bus for host document events.

    An engine subscribes with ``weak=True`` so that dropping it detaches it
    from the host without an explicit :meth:`unsubscribe`.
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[Type[HostEvent], List[_Subscription]] = {}

    def subscribe(self, event_type: Type[HostEvent], handler: Subscriber, *, weak: bool = False) -> None:
        if weak and getattr(handler, "__self__", None) is None:
            raise TypeError("weak subscriptions require a bound method")
        subscription = (
            _Subscription(handler=None, weak_method=weakref.WeakMethod(handler))  # type: ignore[arg-type]
            if weak
            else _Subscription(handler=handler)
        )
        self._subscriptions.setdefault(event_type, []).append(subscription)

    def unsubscribe(self, event_type: Type[HostEvent], handler: Subscriber) -> None:
        subscriptions = self._subscriptions.get(event_type)
        if not subscriptions:
            return
        self._store(event_type, [sub for sub in subscriptions if not sub.matches(handler)])

    def subscriber_count(self, event_type: Type[HostEvent]) -> int:
        return len(self._subscriptions.get(event_type, ()))

    def publish(self, event: HostEvent) -> None:
        callbacks: list[Subscriber] = []
        for event_type, subscriptions in list(self._subscriptions.items()):
            if not isinstance(event, event_type):
                continue
            live = [(sub, sub.resolve()) for sub in subscriptions]
            callbacks.extend(callback for _sub, callback in live if callback is not None)
            # Weak subscribers whose owner was collected are pruned here.
            self._store(event_type, [sub for sub, callback in live if callback is not None])
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                _LOGGER.exception("Host event subscriber failed for %r", event)

    def _store(self, event_type: Type[HostEvent], subscriptions: List[_Subscription]) -> None:
        if subscriptions:
            self._subscriptions[event_type] = subscriptions
        else:
            self._subscriptions.pop(event_type, None)
