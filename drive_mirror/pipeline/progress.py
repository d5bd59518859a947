"""
Progress tracking and the live status line.

Three pieces live here:

* :class:`ProgressCounters` – the shared counters updated in-band by the
  discovery walker and the workers.
* :func:`render_status` / :func:`render_summary` – pure formatting helpers,
  trivially testable.
* :class:`ProgressReporter` – a background thread that samples the counters
  at a fixed interval and rewrites a single terminal line, in the same way as
  the CLI spinner: ``"\\r\\033[K"`` clears the line before each redraw.
"""

from __future__ import annotations

import sys
import threading
import time
from typing import Optional, TextIO

# --------------------------------------------------------------------------- #
# Shared counters                                                             #
# --------------------------------------------------------------------------- #


class AtomicCounter:
    """Monotonic integer counter safe to increment from many threads."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        return self._value


class ProgressCounters:
    """Process-wide pipeline counters plus the discovery flag and start time.

    ``completed <= found`` and ``skipped <= completed`` hold at every sample
    because a job is counted as found before it is enqueued and a worker
    bumps ``skipped`` before ``completed``.
    """

    def __init__(self, clock=time.monotonic) -> None:
        self._clock = clock
        self.found = AtomicCounter()
        self.completed = AtomicCounter()
        self.skipped = AtomicCounter()
        self.failed = AtomicCounter()
        self._discovery_done = threading.Event()
        self.started_at = clock()

    @property
    def discovery_done(self) -> bool:
        return self._discovery_done.is_set()

    def mark_discovery_done(self) -> None:
        self._discovery_done.set()

    def elapsed(self) -> float:
        return self._clock() - self.started_at

    def snapshot(self) -> dict:
        """Read every counter once.

        ``completed`` is read before ``found`` so the sampled pair never shows
        more completions than discoveries.
        """
        skipped = self.skipped.value
        failed = self.failed.value
        completed = self.completed.value
        return {
            "found": self.found.value,
            "completed": completed,
            "skipped": skipped,
            "failed": failed,
            "discovery_done": self.discovery_done,
            "elapsed": self.elapsed(),
        }


# --------------------------------------------------------------------------- #
# Formatting                                                                  #
# --------------------------------------------------------------------------- #
ETA_PLACEHOLDER = "--:--:--"


def format_duration(seconds: float) -> str:
    """Format *seconds* as ``HH:MM:SS`` (hours may exceed 99)."""
    total = max(0, int(round(seconds)))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def estimate_remaining(
    found: int,
    completed: int,
    skipped: int,
    elapsed: float,
    *,
    min_transfers: int = 5,
    min_seconds: float = 3.0,
) -> Optional[float]:
    """Return the estimated seconds left, or ``None`` while too early to tell.

    Only real transfers (``completed - skipped``) count towards the rate,
    since skips finish almost instantly and would make the estimate far too
    optimistic.
    """
    real = completed - skipped
    if real <= min_transfers or elapsed <= min_seconds:
        return None
    rate = real / elapsed
    return max(0, found - completed) / rate


def render_status(
    found: int,
    completed: int,
    skipped: int,
    discovery_done: bool,
    elapsed: float,
    *,
    min_transfers: int = 5,
    min_seconds: float = 3.0,
) -> str:
    """Return the one-line live status string."""
    pct = (completed / found * 100.0) if found else 0.0
    scanning = "" if discovery_done else " (Scanning...)"
    remaining = estimate_remaining(
        found,
        completed,
        skipped,
        elapsed,
        min_transfers=min_transfers,
        min_seconds=min_seconds,
    )
    eta = ETA_PLACEHOLDER if remaining is None else format_duration(remaining)
    return (
        f"Progress: {completed}/{found} ({pct:.1f}%) | "
        f"Skipped: {skipped}{scanning} | ETA: {eta}"
    )


def render_summary(found: int, completed: int, skipped: int, failed: int) -> str:
    return (
        f"Progress: {completed} / {found} done "
        f"(Skipped: {skipped}, Failed: {failed}) - Finished!"
    )


# --------------------------------------------------------------------------- #
# Reporter thread                                                             #
# --------------------------------------------------------------------------- #
class ProgressReporter:
    """Redraw the status line every *interval* seconds until stopped.

    Args:
        counters: Counters to sample.
        interval: Seconds between redraws.
        stream: Output stream; defaults to ``sys.stderr``.
        enabled: When *False* no live line is drawn; :meth:`stop` still
            prints the final summary.
        min_transfers: Real transfers required before an ETA is shown.
        min_seconds: Elapsed seconds required before an ETA is shown.
    """

    def __init__(
        self,
        counters: ProgressCounters,
        *,
        interval: float = 0.2,
        stream: TextIO | None = None,
        enabled: bool = True,
        min_transfers: int = 5,
        min_seconds: float = 3.0,
    ) -> None:
        self.counters = counters
        self.interval = interval
        self.stream = stream
        self.enabled = enabled
        self.min_transfers = min_transfers
        self.min_seconds = min_seconds
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="progress-reporter", daemon=True
        )
        self._started = False

    @property
    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def render(self) -> str:
        snap = self.counters.snapshot()
        return render_status(
            snap["found"],
            snap["completed"],
            snap["skipped"],
            snap["discovery_done"],
            snap["elapsed"],
            min_transfers=self.min_transfers,
            min_seconds=self.min_seconds,
        )

    def _draw(self) -> None:
        self._out.write("\r\033[K" + self.render())
        self._out.flush()

    def _run(self) -> None:
        while not self._stop.is_set():
            self._draw()
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self.enabled and not self._started:
            self._started = True
            self._thread.start()

    def stop(self) -> str:
        """Stop redrawing, print the summary line and return it."""
        self._stop.set()
        if self._started:
            self._thread.join()
            self._out.write("\r\033[K")
        snap = self.counters.snapshot()
        summary = render_summary(
            snap["found"], snap["completed"], snap["skipped"], snap["failed"]
        )
        self._out.write(summary + "\n")
        self._out.flush()
        return summary

    def __enter__(self) -> "ProgressReporter":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._stop.is_set():
            self.stop()
