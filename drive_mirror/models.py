"""
Light-weight data containers shared by the mirroring pipeline.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True`` so
that objects handed from the discovery walker to a worker cannot be mutated
in flight.  A :class:`Job` is owned by exactly one worker once dequeued.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
NATIVE_MIME_PREFIX = "application/vnd.google-apps"


class EntryKind(str, Enum):
    """Content-kind marker derived from a remote MIME type."""

    FILE = "file"
    NATIVE = "native"
    FOLDER = "folder"


class RemoteEntry(BaseModel, frozen=True):
    """One child returned by a remote folder listing.

    Attributes
    ----------
    id
        Opaque identifier, unique within the remote store.
    name
        Display name exactly as the service reports it (not sanitised).
    mime_type
        MIME type reported by the service.  Remote-native documents use the
        ``application/vnd.google-apps.*`` family.
    size
        Size in bytes when the service reports one (native documents don't).
    """

    id: str
    name: str
    mime_type: str = ""
    size: Optional[int] = None

    @property
    def kind(self) -> EntryKind:
        if self.mime_type == FOLDER_MIME_TYPE:
            return EntryKind.FOLDER
        if self.mime_type.startswith(NATIVE_MIME_PREFIX):
            return EntryKind.NATIVE
        return EntryKind.FILE

    @property
    def is_folder(self) -> bool:
        return self.kind is EntryKind.FOLDER

    @property
    def needs_export(self) -> bool:
        return self.kind is EntryKind.NATIVE


class Job(BaseModel, frozen=True):
    """A remote entry paired with its resolved local target path.

    The parent directory of *target* exists before the job is enqueued.
    For native documents *target* carries no export extension yet; the
    transfer executor appends it.
    """

    entry: RemoteEntry
    target: Path


class TransferStatus(str, Enum):
    """Terminal outcome of a single job."""

    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    UNSUPPORTED = "unsupported"
    DRY_RUN = "dry_run"
    FAILED = "failed"


class TransferResult(BaseModel, frozen=True):
    """Tagged result returned by :class:`~drive_mirror.pipeline.transfer.TransferExecutor`.

    Attributes
    ----------
    job
        The job this result belongs to.
    status
        Terminal outcome.
    path
        Final local path (extension-adjusted for exports).  ``None`` when the
        native kind has no export format.
    bytes_written
        Bytes streamed to disk; ``0`` for skips and failures.
    error
        Human-readable failure reason when *status* is ``FAILED``.
    """

    job: Job
    status: TransferStatus
    path: Optional[Path] = None
    bytes_written: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not TransferStatus.FAILED


class MirrorSummary(BaseModel, frozen=True):
    """Aggregate returned by :meth:`MirrorCoordinator.run`.

    Counter values are sampled after every worker has drained, so
    ``completed == found`` holds for a run that was not interrupted.
    """

    folder_id: str
    target_root: Path
    found: int
    completed: int
    skipped: int
    failed: int
    elapsed: float
    results: list[TransferResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[TransferResult]:
        return [r for r in self.results if r.status is TransferStatus.FAILED]

    @property
    def transferred(self) -> int:
        return sum(1 for r in self.results if r.status is TransferStatus.SUCCEEDED)
