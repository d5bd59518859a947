"""Custom exceptions used across the mirroring pipeline.

Setup-stage errors (:class:`ConfigError`, :class:`DriveAuthError`,
:class:`FolderNotFoundError`) abort the run before any worker starts.
:class:`DriveAPIError` is raised per remote call and handled locally by the
discovery walker (one subtree) or the transfer executor (one job).
"""

from __future__ import annotations


class DriveMirrorError(RuntimeError):
    """Base class for every error raised by *drive_mirror*."""


class ConfigError(DriveMirrorError):
    """Raised when the YAML configuration is unreadable or fails validation."""


class DriveAuthError(DriveMirrorError):
    """Raised when no usable access token can be located."""


class FolderNotFoundError(DriveMirrorError):
    """Raised when a segment of the source folder path does not exist remotely."""


class DriveAPIError(DriveMirrorError):
    """Raised when the remote service answers with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the service.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
