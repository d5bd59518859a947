"""Translate a human-readable Drive path into a folder id."""

from __future__ import annotations

import logging

from ..api import RemoteDirectoryService
from ..utils.errors import FolderNotFoundError

logger = logging.getLogger(__name__)

ROOT_ID = "root"


def split_path(path: str) -> list[str]:
    """Return the non-empty ``/``-separated segments of *path*."""
    return [seg for seg in path.strip().split("/") if seg]


def resolve_folder_path(service: RemoteDirectoryService, path: str) -> str:
    """Return the id of the folder at *path*, starting from the Drive root.

    ``""``, ``"/"`` and ``"root"`` all denote the root itself.  Each segment
    is looked up by exact name under the previous one; the first match wins.

    Raises:
        FolderNotFoundError: When a segment has no matching folder.
    """
    segments = split_path(path)
    if segments == [ROOT_ID]:
        segments = []
    elif segments[:1] == [ROOT_ID]:
        segments = segments[1:]

    parent_id = ROOT_ID
    walked: list[str] = []
    for segment in segments:
        walked.append(segment)
        entry = service.find_folder(segment, parent_id)
        if entry is None:
            raise FolderNotFoundError(f"Folder not found: /{'/'.join(walked)}")
        logger.debug("Resolved %s → %s", "/".join(walked), entry.id)
        parent_id = entry.id
    return parent_id
