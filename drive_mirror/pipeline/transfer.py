"""Materialise one remote file on local disk.

:class:`TransferExecutor` owns the per-job rules:

1. **Skip** – when the (extension-adjusted) target already exists the job is
   complete; the remote service is never contacted.
2. **Atomic write** – bytes are streamed into ``target + temp_suffix`` next
   to the target and renamed over it only once the stream finished.  The
   final path therefore never holds partial content.
3. **Export** – native documents are converted through the export endpoint
   and the export extension is appended to the target name.

Failures are logged and reported as a ``FAILED`` :class:`TransferResult`;
nothing is retried and nothing propagates to the caller.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

from ..api import RemoteDirectoryService
from ..models import Job, TransferResult, TransferStatus
from ..utils.errors import DriveAPIError
from .exports import export_format_for
from .progress import ProgressCounters

logger = logging.getLogger(__name__)

DEFAULT_TEMP_SUFFIX = ".tmp"


def _write_stream(chunks, tmp_path: Path) -> int:
    written = 0
    with open(tmp_path, "wb") as fh:
        for chunk in chunks:
            if chunk:
                fh.write(chunk)
                written += len(chunk)
    return written


class TransferExecutor:
    """Download or export single jobs with skip-if-present semantics.

    Args:
        service: Remote directory service used for content calls.
        counters: Shared counters; ``skipped`` and ``failed`` are bumped here.
            ``completed`` is left to the worker.
        temp_suffix: Suffix of the temporary sibling file.
        dry_run: Log what would be fetched without contacting the service.
    """

    def __init__(
        self,
        service: RemoteDirectoryService,
        counters: ProgressCounters,
        *,
        temp_suffix: str = DEFAULT_TEMP_SUFFIX,
        dry_run: bool = False,
    ) -> None:
        if not temp_suffix:
            raise ValueError("temp_suffix must not be empty")
        self.service = service
        self.counters = counters
        self.temp_suffix = temp_suffix
        self.dry_run = dry_run

    # ------------------------------------------------------------------
    # Public entry-point
    # ------------------------------------------------------------------
    def execute(self, job: Job) -> TransferResult:
        """Run *job* to a terminal outcome and return its tagged result."""
        entry = job.entry
        target = job.target
        if entry.needs_export:
            fmt = export_format_for(entry.mime_type)
            if fmt is None:
                logger.debug(
                    "No export format for %s (%s); skipping", entry.name, entry.mime_type
                )
                return TransferResult(job=job, status=TransferStatus.UNSUPPORTED)
            target = target.with_name(target.name + fmt.extension)

        if target.exists():
            self.counters.skipped.increment()
            logger.info("SKIP %s (exists)", target)
            return TransferResult(job=job, status=TransferStatus.SKIPPED, path=target)

        verb = "EXPORT" if entry.needs_export else "GET"
        if self.dry_run:
            logger.info("[DRY] Would %s %s → %s", verb, entry.id, target)
            return TransferResult(job=job, status=TransferStatus.DRY_RUN, path=target)

        logger.info("%s %s → %s", verb, entry.id, target)
        try:
            if entry.needs_export:
                written = self._export(entry.id, fmt.mime_type, target)
            else:
                written = self._download(entry.id, target)
        except (DriveAPIError, requests.RequestException, OSError) as exc:
            self.counters.failed.increment()
            logger.error("Failed to %s %s → %s: %s", verb.lower(), entry.id, target, exc)
            return TransferResult(
                job=job, status=TransferStatus.FAILED, path=target, error=str(exc)
            )

        logger.info("OK %s (%d bytes)", target, written)
        return TransferResult(
            job=job, status=TransferStatus.SUCCEEDED, path=target, bytes_written=written
        )

    # ------------------------------------------------------------------
    # Content paths
    # ------------------------------------------------------------------
    def _download(self, file_id: str, target: Path) -> int:
        with self.service.download_bytes(file_id) as chunks:
            return self._commit(chunks, target)

    def _export(self, file_id: str, mime_type: str, target: Path) -> int:
        with self.service.export_bytes(file_id, mime_type) as chunks:
            return self._commit(chunks, target)

    def _commit(self, chunks, target: Path) -> int:
        """Stream *chunks* into the temp file, then rename it onto *target*."""
        tmp_path = target.with_name(target.name + self.temp_suffix)
        try:
            written = _write_stream(chunks, tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove partial file %s: %s", tmp_path, exc)
            raise
        return written
