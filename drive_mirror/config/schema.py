"""
Pydantic models that mirror the YAML configuration consumed by *drive_mirror*.

The classes define a strongly-typed representation of ``drive_mirror.yaml``
so the rest of the codebase works with validated objects instead of ad-hoc
dictionaries.  Unknown keys are rejected to surface misspellings early.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Worker pools beyond this size tend to trip the remote per-user rate limit.
MAX_WORKERS = 1000


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RemoteSettings(_Section):
    """Connection parameters for the remote directory service.

    Attributes:
        base_url: Root of the Drive v3 REST API.
        token_file: JSON file holding an OAuth access token.
        timeout: Per-request timeout in seconds.
        page_size: Entries requested per listing page.
        chunk_size: Bytes read per iteration while streaming file content.
    """

    base_url: str = "https://www.googleapis.com/drive/v3"
    token_file: Path = Path("token.json")
    timeout: float = Field(60.0, gt=0)
    page_size: int = Field(1000, ge=1, le=1000)
    chunk_size: int = Field(1024 * 1024, ge=1024)


class TransferSettings(_Section):
    """Worker pool and queue sizing.

    Attributes:
        workers: Number of concurrent transfer workers.
        queue_size: Maximum number of jobs buffered between discovery and
            the workers.  Discovery blocks once the queue is full.
        temp_suffix: Suffix appended to the target path while streaming.
    """

    workers: int = Field(32, ge=1, le=MAX_WORKERS)
    queue_size: int = Field(200_000, ge=1)
    temp_suffix: str = ".tmp"

    @field_validator("temp_suffix")
    @classmethod
    def _suffix_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("temp_suffix must not be empty")
        return value


class ProgressSettings(_Section):
    """Status-line refresh and ETA thresholds."""

    interval: float = Field(0.2, gt=0)
    eta_min_transfers: int = Field(5, ge=0)
    eta_min_seconds: float = Field(3.0, ge=0)


class LoggingSettings(_Section):
    """Locations of the transfer and error log files."""

    log_dir: Path = Path(".")
    transfer_log: str = "transfers.log"
    error_log: str = "errors.log"


class MirrorConfig(_Section):
    """Root configuration object consumed by the rest of *drive_mirror*.

    Attributes:
        version: Version string of the configuration schema.
        source_path: Slash-separated Drive folder path (``root`` for My Drive).
        target_root: Local directory receiving the mirror.
        remote: Remote service settings.
        transfers: Worker pool settings.
        progress: Status-line settings.
        logging: Log sink settings.
    """

    version: str = "1"
    source_path: str = "root"
    target_root: Path = Path("drive-mirror")
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    transfers: TransferSettings = Field(default_factory=TransferSettings)
    progress: ProgressSettings = Field(default_factory=ProgressSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
