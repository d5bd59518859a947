"""Shared fixtures: an in-memory remote directory service and logger reset."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

import pytest

from drive_mirror.models import FOLDER_MIME_TYPE, RemoteEntry
from drive_mirror.utils.errors import DriveAPIError
from drive_mirror.utils.logging import PIPELINE_LOGGER

DOC_MIME = "application/vnd.google-apps.document"
SHEET_MIME = "application/vnd.google-apps.spreadsheet"
SLIDES_MIME = "application/vnd.google-apps.presentation"
FORM_MIME = "application/vnd.google-apps.form"


class FakeDrive:
    """Minimal stand-in for :class:`drive_mirror.api.DriveService`.

    Folders are declared with :meth:`add_folder`, files with :meth:`add_file`.
    Every remote call is counted so tests can assert that nothing was fetched.
    """

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.children: Dict[str, List[RemoteEntry]] = {"root": []}
        self.content: Dict[str, bytes] = {}
        self.list_errors: set[str] = set()
        self.download_errors: set[str] = set()
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    # -- tree building -------------------------------------------------
    def add_folder(self, parent: str, folder_id: str, name: str) -> str:
        self.children[parent].append(
            RemoteEntry(id=folder_id, name=name, mime_type=FOLDER_MIME_TYPE)
        )
        self.children[folder_id] = []
        return folder_id

    def add_file(
        self,
        parent: str,
        file_id: str,
        name: str,
        data: bytes = b"",
        mime_type: str = "text/plain",
    ) -> str:
        self.children[parent].append(
            RemoteEntry(id=file_id, name=name, mime_type=mime_type, size=len(data))
        )
        self.content[file_id] = data
        return file_id

    def _record(self, *call) -> None:
        with self._lock:
            self.calls.append(call)

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    # -- protocol ------------------------------------------------------
    def list_children(self, folder_id: str, page_token: Optional[str] = None):
        self._record("list", folder_id, page_token)
        if folder_id in self.list_errors:
            raise DriveAPIError(f"list {folder_id}: HTTP 500", status_code=500)
        entries = self.children.get(folder_id, [])
        start = int(page_token or 0)
        end = start + self.page_size
        next_token = str(end) if end < len(entries) else None
        return entries[start:end], next_token

    @contextmanager
    def _stream(self, file_id: str):
        if file_id in self.download_errors:
            raise DriveAPIError(f"download {file_id}: HTTP 403", status_code=403)
        data = self.content[file_id]
        yield iter([data[:5], data[5:]])

    def download_bytes(self, file_id: str):
        self._record("download", file_id)
        return self._stream(file_id)

    def export_bytes(self, file_id: str, mime_type: str):
        self._record("export", file_id, mime_type)
        return self._stream(file_id)

    def find_folder(self, name: str, parent_id: str):
        self._record("find", name, parent_id)
        for entry in self.children.get(parent_id, []):
            if entry.is_folder and entry.name == name:
                return entry
        return None


@pytest.fixture
def fake_drive() -> FakeDrive:
    return FakeDrive()


@pytest.fixture
def scenario_drive() -> FakeDrive:
    """Root with folder ``F`` holding ``a.txt`` (10 bytes) and a native ``Doc``."""
    drive = FakeDrive()
    drive.add_folder("root", "F-id", "F")
    drive.add_file("F-id", "a-id", "a.txt", b"0123456789")
    drive.add_file("F-id", "doc-id", "Doc", b"exported-docx", mime_type=DOC_MIME)
    return drive


@pytest.fixture(autouse=True)
def _reset_pipeline_logger():
    """Undo handler and propagation changes made by ``setup_logging``."""
    yield
    pipeline = logging.getLogger(PIPELINE_LOGGER)
    for handler in list(pipeline.handlers):
        pipeline.removeHandler(handler)
        handler.close()
    pipeline.propagate = True
    pipeline.setLevel(logging.NOTSET)
