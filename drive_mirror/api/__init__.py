"""Remote directory service interface and its Drive implementation.

The mirroring core depends only on :class:`RemoteDirectoryService`; tests
substitute an in-memory fake that satisfies the same protocol.
"""

from __future__ import annotations

from typing import ContextManager, Iterable, List, Optional, Protocol, Tuple

from ..models import RemoteEntry


class RemoteDirectoryService(Protocol):
    """Operations the pipeline consumes from the remote store."""

    def list_children(
        self, folder_id: str, page_token: Optional[str] = None
    ) -> Tuple[List[RemoteEntry], Optional[str]]: ...

    def download_bytes(self, file_id: str) -> ContextManager[Iterable[bytes]]: ...

    def export_bytes(
        self, file_id: str, mime_type: str
    ) -> ContextManager[Iterable[bytes]]: ...

    def find_folder(self, name: str, parent_id: str) -> Optional[RemoteEntry]: ...


from .drive import DriveService  # noqa: E402

__all__ = ["RemoteDirectoryService", "DriveService"]
