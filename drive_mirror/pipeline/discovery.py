"""
Depth-first discovery of the remote tree.

The walker is the pipeline's only producer.  For every remote folder it:

1. creates the matching local directory (parents included);
2. pages through the folder listing until no page token is returned;
3. recurses into sub-folders before moving on to the next sibling;
4. turns every file into a :class:`~drive_mirror.models.Job`, counts it as
   *found* and puts it on the bounded job queue (blocking when full).

Because step 1 precedes step 4 for each folder, a worker never receives a
job whose parent directory is missing.

Failures are contained to the folder where they happen: a directory that
cannot be created abandons that subtree, a failed listing call abandons the
remaining pages of that folder.  Both are logged as errors and discovery
carries on with the siblings.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..api import RemoteDirectoryService
from ..models import Job, RemoteEntry
from ..utils.errors import DriveAPIError
from .exports import export_format_for
from .jobqueue import JobQueue
from .naming import FolderNames, sanitize_name
from .progress import ProgressCounters

logger = logging.getLogger(__name__)


class DiscoveryWalker:
    """Enumerate a remote folder tree into the job queue.

    Args:
        service: Remote directory service used for listings.
        jobs: Queue receiving one job per discovered file.
        counters: Shared counters; ``found`` is bumped per enqueued job.
        temp_suffix: Suffix the transfer step streams through; reserved
            next to every claimed name.
    """

    def __init__(
        self,
        service: RemoteDirectoryService,
        jobs: JobQueue,
        counters: ProgressCounters,
        *,
        temp_suffix: str = ".tmp",
    ) -> None:
        self.service = service
        self.jobs = jobs
        self.counters = counters
        self.temp_suffix = temp_suffix

    def walk(self, folder_id: str, local_dir: Path) -> None:
        """Mirror the folder *folder_id* into *local_dir*, recursively."""
        try:
            local_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create %s, skipping subtree %s: %s", local_dir, folder_id, exc)
            return
        logger.info("DIR %s", local_dir)

        names = FolderNames(self.temp_suffix)
        page_token = None
        while True:
            try:
                entries, page_token = self.service.list_children(folder_id, page_token)
            except (DriveAPIError, requests.RequestException) as exc:
                logger.error("Listing %s failed, abandoning %s: %s", folder_id, local_dir, exc)
                return
            except Exception as exc:  # noqa: BLE001 - malformed payload
                logger.error(
                    "Listing %s failed, abandoning %s: %s",
                    folder_id,
                    local_dir,
                    exc,
                    exc_info=True,
                )
                return
            logger.debug("Page of %d entries for %s", len(entries), local_dir)

            for entry in entries:
                self._visit(entry, local_dir, names)

            if not page_token:
                return

    def _visit(self, entry: RemoteEntry, local_dir: Path, names: FolderNames) -> None:
        if entry.is_folder:
            name = names.claim(sanitize_name(entry.name), entry.id)
            self.walk(entry.id, local_dir / name)
            return

        extension = ""
        if entry.needs_export:
            fmt = export_format_for(entry.mime_type)
            extension = fmt.extension if fmt else ""
        name = names.claim(sanitize_name(entry.name), entry.id, extension)

        job = Job(entry=entry, target=local_dir / name)
        self.counters.found.increment()
        self.jobs.put(job)
