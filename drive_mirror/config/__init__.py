"""
Configuration package façade.

Exports the small, stable surface that external callers rely on:

* :func:`load_config` – Parse, merge, and validate ``drive_mirror.yaml`` into
  a single :class:`MirrorConfig` instance.
* :class:`MirrorConfig` – Pydantic model representing the validated
  configuration.
"""

from .loader import load_config  # noqa: F401
from .schema import MAX_WORKERS, MirrorConfig  # noqa: F401

__all__: list[str] = ["load_config", "MirrorConfig", "MAX_WORKERS"]
