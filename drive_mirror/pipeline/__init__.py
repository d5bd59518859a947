"""Producer/consumer mirroring pipeline.

The modules are layered leaves first: :mod:`.transfer` (one file),
:mod:`.workers` (thread pool), :mod:`.discovery` (the producer),
:mod:`.progress` (counters and status line) and :mod:`.coordinator`, which
wires them together.
"""

from .coordinator import MirrorCoordinator
from .discovery import DiscoveryWalker
from .jobqueue import JobQueue, QueueClosedError
from .naming import FolderNames, sanitize_name
from .progress import ProgressCounters, ProgressReporter, render_status
from .resolver import resolve_folder_path
from .transfer import TransferExecutor
from .workers import WorkerPool

__all__ = [
    "MirrorCoordinator",
    "DiscoveryWalker",
    "JobQueue",
    "QueueClosedError",
    "FolderNames",
    "sanitize_name",
    "ProgressCounters",
    "ProgressReporter",
    "render_status",
    "resolve_folder_path",
    "TransferExecutor",
    "WorkerPool",
]
