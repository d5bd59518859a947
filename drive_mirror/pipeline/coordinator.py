"""
Pipeline wiring and lifecycle.

:class:`MirrorCoordinator` runs one mirror end to end:

    resolve folder → allocate queue → start reporter → start workers
    → walk the tree → mark discovery done → close queue
    → join workers → stop reporter → return :class:`MirrorSummary`

Discovery runs on the calling thread, so the queue is closed only after the
traversal truly finished and no worker can exit early.  The summary is
produced after every worker has drained, so all in-flight jobs are counted.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional, TextIO

import structlog

from ..api import RemoteDirectoryService
from ..config.schema import MirrorConfig
from ..models import MirrorSummary
from .discovery import DiscoveryWalker
from .jobqueue import JobQueue
from .progress import ProgressCounters, ProgressReporter
from .resolver import resolve_folder_path
from .transfer import TransferExecutor
from .workers import WorkerPool

log = structlog.get_logger(__name__)


class MirrorCoordinator:
    """Mirror a remote folder into *target_root* with a pool of workers.

    Args:
        service: Remote directory service.
        target_root: Local directory receiving the mirror.
        workers: Number of concurrent transfer threads.
        queue_size: Capacity of the bounded job queue.
        temp_suffix: Suffix for in-progress downloads.
        dry_run: Walk and create directories but fetch nothing.
        show_progress: Draw the live status line.
        progress_interval: Seconds between status redraws.
        eta_min_transfers: Real transfers required before an ETA is shown.
        eta_min_seconds: Elapsed seconds required before an ETA is shown.
        stream: Where status and summary lines go (``sys.stderr`` if *None*).
    """

    def __init__(
        self,
        service: RemoteDirectoryService,
        target_root: Path,
        *,
        workers: int = 32,
        queue_size: int = 200_000,
        temp_suffix: str = ".tmp",
        dry_run: bool = False,
        show_progress: bool = True,
        progress_interval: float = 0.2,
        eta_min_transfers: int = 5,
        eta_min_seconds: float = 3.0,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.service = service
        self.target_root = Path(target_root)
        self.workers = workers
        self.queue_size = queue_size
        self.temp_suffix = temp_suffix
        self.dry_run = dry_run
        self.show_progress = show_progress
        self.progress_interval = progress_interval
        self.eta_min_transfers = eta_min_transfers
        self.eta_min_seconds = eta_min_seconds
        self.stream = stream

    @classmethod
    def from_config(
        cls,
        service: RemoteDirectoryService,
        cfg: MirrorConfig,
        *,
        dry_run: bool = False,
        show_progress: bool = True,
        stream: Optional[TextIO] = None,
    ) -> "MirrorCoordinator":
        return cls(
            service,
            cfg.target_root,
            workers=cfg.transfers.workers,
            queue_size=cfg.transfers.queue_size,
            temp_suffix=cfg.transfers.temp_suffix,
            dry_run=dry_run,
            show_progress=show_progress,
            progress_interval=cfg.progress.interval,
            eta_min_transfers=cfg.progress.eta_min_transfers,
            eta_min_seconds=cfg.progress.eta_min_seconds,
            stream=stream,
        )

    def run(
        self, source_path: str = "root", *, folder_id: Optional[str] = None
    ) -> MirrorSummary:
        """Mirror *source_path* (or an already known *folder_id*).

        Raises:
            FolderNotFoundError: When *source_path* cannot be resolved.
            DriveAPIError: When the resolver's lookup call fails.
        """
        if folder_id is None:
            folder_id = resolve_folder_path(self.service, source_path)
        log.info(
            "mirror_start",
            folder_id=folder_id,
            target=str(self.target_root),
            workers=self.workers,
            dry_run=self.dry_run,
        )

        started = time.monotonic()
        counters = ProgressCounters()
        jobs = JobQueue(self.queue_size)
        executor = TransferExecutor(
            self.service, counters, temp_suffix=self.temp_suffix, dry_run=self.dry_run
        )
        pool = WorkerPool(self.workers, jobs, executor, counters)
        walker = DiscoveryWalker(
            self.service, jobs, counters, temp_suffix=self.temp_suffix
        )
        reporter = ProgressReporter(
            counters,
            interval=self.progress_interval,
            stream=self.stream,
            enabled=self.show_progress,
            min_transfers=self.eta_min_transfers,
            min_seconds=self.eta_min_seconds,
        )

        reporter.start()
        try:
            pool.start()
            try:
                walker.walk(folder_id, self.target_root)
            finally:
                counters.mark_discovery_done()
                jobs.close()
                # Workers drain even when discovery raised.
                pool.join()
        finally:
            reporter.stop()

        snap = counters.snapshot()
        summary = MirrorSummary(
            folder_id=folder_id,
            target_root=self.target_root,
            found=snap["found"],
            completed=snap["completed"],
            skipped=snap["skipped"],
            failed=snap["failed"],
            elapsed=time.monotonic() - started,
            results=pool.results,
        )
        log.info(
            "mirror_done",
            found=summary.found,
            completed=summary.completed,
            skipped=summary.skipped,
            failed=summary.failed,
            elapsed=round(summary.elapsed, 3),
        )
        return summary
