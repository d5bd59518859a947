"""Fixed-size pool of transfer threads draining the job queue."""

from __future__ import annotations

import collections
import logging
import threading
from typing import Deque, List

from ..models import Job, TransferResult, TransferStatus
from .jobqueue import JobQueue
from .progress import ProgressCounters
from .transfer import TransferExecutor

logger = logging.getLogger(__name__)


class WorkerPool:
    """Start *size* worker threads that feed jobs to an executor.

    Each worker loops on :meth:`JobQueue.get` until the queue is closed and
    drained.  Every dequeued job yields exactly one :class:`TransferResult`
    and exactly one ``completed`` increment, whatever the outcome.
    """

    def __init__(
        self,
        size: int,
        jobs: JobQueue,
        executor: TransferExecutor,
        counters: ProgressCounters,
    ) -> None:
        if size < 1:
            raise ValueError("worker pool needs at least one worker")
        self.size = size
        self.jobs = jobs
        self.executor = executor
        self.counters = counters
        self._results: Deque[TransferResult] = collections.deque()
        self._threads: List[threading.Thread] = []

    @property
    def results(self) -> List[TransferResult]:
        return list(self._results)

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("worker pool already started")
        for idx in range(self.size):
            thread = threading.Thread(
                target=self._work, name=f"transfer-{idx}", daemon=True
            )
            self._threads.append(thread)
            thread.start()
        logger.debug("Started %d transfer workers", self.size)

    def join(self) -> None:
        """Block until every worker has exited."""
        for thread in self._threads:
            thread.join()

    def _run_one(self, job: Job) -> TransferResult:
        try:
            return self.executor.execute(job)
        except Exception as exc:  # noqa: BLE001 – keep draining
            self.counters.failed.increment()
            logger.error("Unexpected error for %s: %s", job.target, exc, exc_info=True)
            return TransferResult(job=job, status=TransferStatus.FAILED, error=str(exc))

    def _work(self) -> None:
        while True:
            job = self.jobs.get()
            if job is None:
                return
            result = self._run_one(job)
            self._results.append(result)
            self.counters.completed.increment()
