"""Convenience exports for the :mod:`drive_mirror.utils` package."""

from .errors import (
    ConfigError,
    DriveAPIError,
    DriveAuthError,
    DriveMirrorError,
    FolderNotFoundError,
)

__all__ = [
    "ConfigError",
    "DriveAPIError",
    "DriveAuthError",
    "DriveMirrorError",
    "FolderNotFoundError",
]
