"""A thread-safe FIFO queue whose blocked consumers are served in arrival order."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any


class _Waiter:
    """A consumer blocked in :meth:`ConcurrentQueue.dequeue`, with its own condition."""

    __slots__ = ("condition", "item", "served", "cancelled")

    def __init__(self, lock: threading.Lock) -> None:
        self.condition = threading.Condition(lock)
        self.item: Any = None
        self.served = False
        self.cancelled = False


class ConcurrentQueue:
    """Unbounded FIFO queue shared between threads.

    Consumers that find the queue empty sleep, each on its own condition,
    and are woken strictly in the order in which they started waiting.
    An item handed to a sleeping consumer is reserved for it, so a
    non-blocking :meth:`try_dequeue` never takes an item a waiter is owed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[Any] = deque()
        self._waiters: deque[_Waiter] = deque()
        self._visited = 0

    def enqueue(self, item: Any) -> None:
        """Add ``item``; if a consumer is waiting, the oldest one receives it."""
        with self._lock:
            if self._waiters:
                waiter = self._waiters.popleft()
                waiter.item = item
                waiter.served = True
                self._visited += 1
                waiter.condition.notify()
            else:
                self._items.append(item)

    def dequeue(self) -> Any:
        """Remove and return the oldest item, blocking while the queue is empty.

        Raises :class:`RuntimeError` if the queue is destroyed while waiting.
        """
        with self._lock:
            if self._items:
                self._visited += 1
                return self._items.popleft()
            waiter = _Waiter(self._lock)
            self._waiters.append(waiter)
            while not waiter.served:
                waiter.condition.wait()
            if waiter.cancelled:
                raise RuntimeError("queue was destroyed while waiting")
            return waiter.item

    def try_dequeue(self) -> tuple[bool, Any]:
        """Take the oldest unreserved item without blocking.

        Returns ``(True, item)`` on success and ``(False, None)`` when no
        item is available.
        """
        with self._lock:
            if not self._items:
                return False, None
            self._visited += 1
            return True, self._items.popleft()

    def visited(self) -> int:
        """Number of items that have been enqueued and then taken out."""
        with self._lock:
            return self._visited

    def destroy(self) -> None:
        """Drop every queued item and release every waiting consumer.

        Dropped items count as visited; released consumers get
        :class:`RuntimeError` from their :meth:`dequeue` call.
        """
        with self._lock:
            self._visited += len(self._items)
            self._items.clear()
            while self._waiters:
                waiter = self._waiters.popleft()
                waiter.cancelled = True
                waiter.served = True
                waiter.condition.notify()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)