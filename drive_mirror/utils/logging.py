"""
Package-level logging configuration.

* Rich console output (colourised, nicely formatted).
* Rotating plain-text **transfer log**: one line per directory, skip and
  attempted transfer.
* Append-only **error log** holding every per-job and per-subtree failure.

Pipeline diagnostics are emitted under the ``drive_mirror.pipeline`` logger.
While the live status line is drawn that logger does not propagate to the
console, so failures land in the log files without breaking the status
display.

The public helper :func:`setup_logging` wires everything and should be the
sole entry-point used by sub-commands.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
from pathlib import Path

import structlog
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging", "PIPELINE_LOGGER"]

PIPELINE_LOGGER = "drive_mirror.pipeline"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


# --------------------------------------------------------------------------- #
# Internal helpers – file-based handlers                                      #
# --------------------------------------------------------------------------- #
def _transfer_file_handler(path: Path, level: int) -> logging.Handler:
    """Return a rotating handler for the transfer log at *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=10_000_000,  # ~10 MB before rollover
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def _error_file_handler(path: Path) -> logging.Handler:
    """Return an append-only handler for ERROR records."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    # Ensure the buffer is flushed on interpreter exit.
    atexit.register(handler.close)
    return handler


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


# --------------------------------------------------------------------------- #
# Public API – main entry-point                                               #
# --------------------------------------------------------------------------- #
def setup_logging(
    *,
    log_dir: Path | str = ".",
    transfer_log: str = "transfers.log",
    error_log: str = "errors.log",
    verbose: bool = False,
    debug: bool = False,
    live_status: bool = False,
) -> None:
    """Configure rich console logging and the two pipeline log files.

    Args:
        log_dir: Directory receiving *transfer_log* and *error_log*; created
            when missing.
        transfer_log: File name of the rotating transfer log.
        error_log: File name of the error log.
        verbose: Emit INFO-level messages to the console.
        debug: Emit DEBUG-level messages plus rich tracebacks.
        live_status: Keep pipeline records off the console because a status
            line is being redrawn there.

    Safe to call more than once; earlier handlers are replaced.
    """
    console_lvl = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    file_lvl = logging.DEBUG if debug else logging.INFO
    log_dir = Path(log_dir).expanduser()

    # --- Rich console on the root logger ---------------------------------------
    console = RichHandler(
        level=console_lvl,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG,  # root logger stays at DEBUG
        handlers=[console],
        format="%(message)s",  # Rich/structlog handle formatting
        force=True,
    )

    # --- Pipeline files ---------------------------------------------------------
    pipeline = logging.getLogger(PIPELINE_LOGGER)
    _reset_handlers(pipeline)
    pipeline.setLevel(file_lvl)
    pipeline.addHandler(_transfer_file_handler(log_dir / transfer_log, file_lvl))
    pipeline.addHandler(_error_file_handler(log_dir / error_log))
    pipeline.propagate = not live_status

    # --- Third-party noise --------------------------------------------------------
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)

    # --- structlog binds --------------------------------------------------------
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            (
                StructlogConsoleRenderer()
                if verbose or debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(console_lvl),
        logger_factory=LoggerFactory(),
    )
