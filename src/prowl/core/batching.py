"""Debounced collection of items flushed as a single batch."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Generic, List, TypeVar

__all__ = ["DebouncedBatch", "DEFAULT_BATCH_DELAY"]

LOGGER = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY = 0.010

T = TypeVar("T")


class DebouncedBatch(Generic[T]):
    """Buffers items and hands them to ``flush`` once no new item arrived for ``delay`` seconds.

    Only one timer is ever pending: each :meth:`add` cancels the previous
    handle and schedules a fresh one. Without a running event loop the batch is
    flushed immediately.
    """

    def __init__(
        self,
        flush: Callable[[List[T]], None],
        *,
        delay: float = DEFAULT_BATCH_DELAY,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._flush = flush
        self._delay = max(0.0, delay)
        self._loop = loop
        self._pending: Dict[T, None] = {}
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> tuple[T, ...]:
        return tuple(self._pending)

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def add(self, item: T) -> None:
        self._pending[item] = None
        loop = self._resolve_loop()
        if loop is None:
            self.flush_now()
            return
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self._delay, self._on_timer)

    def flush_now(self) -> List[T]:
        """Cancel the pending timer and flush whatever is buffered."""

        self.cancel()
        items = list(self._pending)
        self._pending.clear()
        if items:
            LOGGER.debug("Flushing batch of %d item(s)", len(items))
            self._flush(items)
        return items

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_timer(self) -> None:
        self._handle = None
        self.flush_now()

    def _resolve_loop(self) -> asyncio.AbstractEventLoop | None:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None
