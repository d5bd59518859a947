"""Local file-name derivation for remote entries.

Remote display names may contain characters that are illegal in local paths
and Drive happily stores several children with the same name in one folder.
:func:`sanitize_name` handles the first problem, :class:`FolderNames` the
second.
"""

from __future__ import annotations

import re
import threading
from pathlib import PurePath

_ILLEGAL = re.compile(r'[\\/:*?"<>|]')
_SUBSTITUTE = "_"


def sanitize_name(name: str) -> str:
    """Return *name* with path-illegal characters replaced by ``_``.

    The replacement set is ``\\ / : * ? " < > |``.  Names that would resolve to
    the current or parent directory (or are empty) become ``_``.  Applying the
    function twice yields the same result as applying it once.

    Example:
        >>> sanitize_name("A/B:C")
        'A_B_C'
    """
    cleaned = _ILLEGAL.sub(_SUBSTITUTE, name)
    if cleaned in ("", ".", ".."):
        return _SUBSTITUTE
    return cleaned


def _with_id(name: str, entry_id: str) -> str:
    path = PurePath(name)
    suffix = path.suffix if path.stem else ""
    stem = name[: len(name) - len(suffix)] if suffix else name
    return f"{stem} [{sanitize_name(entry_id)}]{suffix}"


class FolderNames:
    """Hand out unique local names inside one local directory.

    The walker creates one instance per listed folder.  The first entry to
    claim a name gets it unchanged; later entries whose final name is already
    taken get their remote id inserted before the extension.

    Each claimed name also reserves its temporary sibling
    (``name + temp_suffix``), so no entry is ever given a final name that
    another entry streams through, and vice versa.
    """

    def __init__(self, temp_suffix: str = ".tmp") -> None:
        self.temp_suffix = temp_suffix
        self._finals: set[str] = set()
        self._temps: set[str] = set()
        self._lock = threading.Lock()

    def _is_free(self, final: str) -> bool:
        return (
            final not in self._finals
            and final not in self._temps
            and final + self.temp_suffix not in self._finals
        )

    def claim(self, name: str, entry_id: str, extension: str = "") -> str:
        """Reserve and return the local base name for one entry.

        Args:
            name: Sanitised display name.
            entry_id: Remote id used for disambiguation.
            extension: Export extension the transfer step will append, so
                ``Doc`` exported as ``Doc.docx`` cannot clash with a real
                ``Doc.docx`` sibling.

        Returns:
            The base name (without *extension*) to join with the folder path.
        """
        with self._lock:
            base = name
            if not self._is_free(base + extension):
                base = _with_id(name, entry_id)
            final = base + extension
            self._finals.add(final)
            self._temps.add(final + self.temp_suffix)
            return base
