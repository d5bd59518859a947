"""Export formats for remote-native documents.

Native documents have no byte stream of their own and must be converted on
the server.  Only the three office kinds below are supported; every other
native kind (forms, drawings, shortcuts, ...) is skipped without error.
"""

from __future__ import annotations

from typing import Dict, NamedTuple, Optional


class ExportFormat(NamedTuple):
    mime_type: str
    extension: str


EXPORT_FORMATS: Dict[str, ExportFormat] = {
    "application/vnd.google-apps.document": ExportFormat(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ".docx",
    ),
    "application/vnd.google-apps.spreadsheet": ExportFormat(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ".xlsx",
    ),
    "application/vnd.google-apps.presentation": ExportFormat(
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ".pptx",
    ),
}


def export_format_for(mime_type: str) -> Optional[ExportFormat]:
    """Return the export format for a native *mime_type*, or ``None``."""
    return EXPORT_FORMATS.get(mime_type)
