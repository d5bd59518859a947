"""Drive v3 implementation of the remote directory service.

:class:`DriveService` exposes exactly the four operations the mirroring core
needs: paginated folder listing, direct download, export of native documents,
and folder lookup by name.  Every method raises :class:`DriveAPIError` for a
non-2xx answer; network failures surface unchanged as
:class:`requests.exceptions.RequestException`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Tuple

import requests

from ..models import FOLDER_MIME_TYPE, RemoteEntry
from ..utils.errors import DriveAPIError
from .client import DEFAULT_TIMEOUT, drive_get

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.googleapis.com/drive/v3"
LIST_FIELDS = "nextPageToken, files(id, name, mimeType, size)"
# Same-named siblings are disambiguated in listing order, so it must not vary
# between runs.
LIST_ORDER = "name,createdTime"


def _quote(value: str) -> str:
    """Escape *value* for use inside a single-quoted Drive query literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _check(resp: requests.Response, what: str) -> None:
    if resp.status_code // 100 == 2:
        return
    detail = ""
    try:
        detail = resp.json().get("error", {}).get("message", "")
    except ValueError:
        pass
    msg = f"{what}: HTTP {resp.status_code}"
    if detail:
        msg = f"{msg} – {detail}"
    raise DriveAPIError(msg, status_code=resp.status_code)


def _to_entry(item: dict) -> RemoteEntry:
    size = item.get("size")
    return RemoteEntry(
        id=item["id"],
        name=item.get("name", ""),
        mime_type=item.get("mimeType", ""),
        size=int(size) if size is not None else None,
    )


class DriveService:
    """Token-authenticated client for the parts of Drive v3 used by the mirror.

    Args:
        token: OAuth access token.
        base_url: API root; override for testing or proxies.
        timeout: Per-request timeout in seconds.
        page_size: Entries requested per listing page (max 1000).
        chunk_size: Bytes yielded per iteration while streaming content.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = 1000,
        chunk_size: int = 1024 * 1024,
    ) -> None:
        self.token = token
        self.base_url = base_url
        self.timeout = timeout
        self.page_size = page_size
        self.chunk_size = chunk_size

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def _query(self, q: str, page_token: Optional[str], page_size: int) -> dict:
        params = {
            "q": q,
            "pageSize": page_size,
            "fields": LIST_FIELDS,
            "orderBy": LIST_ORDER,
            "supportsAllDrives": "true",
            "includeItemsFromAllDrives": "true",
        }
        if page_token:
            params["pageToken"] = page_token
        resp = drive_get(self.base_url, "files", self.token, params, timeout=self.timeout)
        _check(resp, f"list '{q}'")
        return resp.json()

    def list_children(
        self, folder_id: str, page_token: Optional[str] = None
    ) -> Tuple[List[RemoteEntry], Optional[str]]:
        """Return one page of non-trashed children of *folder_id*.

        Returns:
            ``(entries, next_page_token)``; the token is ``None`` on the last
            page.
        """
        q = f"'{_quote(folder_id)}' in parents and trashed=false"
        payload = self._query(q, page_token, self.page_size)
        entries = [_to_entry(item) for item in payload.get("files", [])]
        logger.debug("Listed %d entries under %s", len(entries), folder_id)
        return entries, payload.get("nextPageToken") or None

    def find_folder(self, name: str, parent_id: str) -> Optional[RemoteEntry]:
        """Return the first non-trashed folder called *name* under *parent_id*."""
        q = (
            f"mimeType='{FOLDER_MIME_TYPE}' and name='{_quote(name)}' "
            f"and '{_quote(parent_id)}' in parents and trashed=false"
        )
        files = self._query(q, None, 1).get("files", [])
        return _to_entry(files[0]) if files else None

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------
    @contextmanager
    def _stream(self, endpoint: str, params: dict, what: str) -> Iterator[Iterable[bytes]]:
        resp = drive_get(
            self.base_url, endpoint, self.token, params, stream=True, timeout=self.timeout
        )
        try:
            _check(resp, what)
            yield resp.iter_content(chunk_size=self.chunk_size)
        finally:
            resp.close()

    def download_bytes(self, file_id: str):
        """Context manager yielding an iterator over the file's raw bytes."""
        return self._stream(
            f"files/{file_id}",
            {"alt": "media", "supportsAllDrives": "true"},
            f"download {file_id}",
        )

    def export_bytes(self, file_id: str, mime_type: str):
        """Context manager yielding an iterator over *file_id* exported as *mime_type*."""
        return self._stream(
            f"files/{file_id}/export",
            {"mimeType": mime_type},
            f"export {file_id}",
        )
