"""Bounded, closable FIFO connecting the discovery walker to the workers."""

from __future__ import annotations

import queue
import threading
from typing import Optional

from ..models import Job

_CLOSED = object()


class QueueClosedError(RuntimeError):
    """Raised when :meth:`JobQueue.put` is called after :meth:`JobQueue.close`."""


class JobQueue:
    """Thin wrapper over :class:`queue.Queue` adding a close signal.

    ``put`` blocks while the queue is full.  ``get`` blocks while it is empty
    and open, and returns ``None`` once the queue has been closed and every
    job enqueued before the close has been handed out.
    """

    def __init__(self, maxsize: int) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._queue: queue.Queue = queue.Queue(maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, job: Job) -> None:
        if self._closed.is_set():
            raise QueueClosedError("job queue is closed")
        self._queue.put(job)

    def get(self) -> Optional[Job]:
        item = self._queue.get()
        if item is _CLOSED:
            # Hand the marker on so every other consumer also wakes up.
            self._queue.put(item)
            return None
        return item

    def close(self) -> None:
        """Signal that no further jobs will be enqueued.  Idempotent."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_CLOSED)

    def qsize(self) -> int:
        return self._queue.qsize()
