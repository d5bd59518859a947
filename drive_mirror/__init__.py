"""
drive_mirror package initialisation.

The module performs two small tasks:

1. **Expose the version string**
   ``drive_mirror.__version__`` is resolved at import-time from the installed
   distribution metadata so that the CLI ``--version`` flag and log lines
   report the same canonical value.

2. **Re-export the public YAML loader**
   :func:`drive_mirror.config.load_config` is re-exported at the top level so
   call-sites can simply do::

       from drive_mirror import load_config
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("drive-mirror")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
from .config import load_config  # noqa: E402 – deliberate late import

__all__: list[str] = ["load_config", "__version__"]
