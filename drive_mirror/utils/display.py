"""Utility functions to print formatted CLI messages."""

from __future__ import annotations

import click

from ..models import MirrorSummary

__all__ = ["echo_banner", "echo_success", "echo_summary"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick."""
    click.secho(f"✓ {text}", fg="green")


def echo_summary(summary: MirrorSummary, max_failures: int = 10) -> None:
    """Echo the end-of-run totals and the first few failed jobs.

    Args:
        summary: Result returned by the coordinator.
        max_failures: Number of individual failures listed before the rest
            are collapsed into a count.
    """
    click.echo(
        f"  found={summary.found} completed={summary.completed} "
        f"transferred={summary.transferred} skipped={summary.skipped} "
        f"failed={summary.failed} ({summary.elapsed:.1f}s)"
    )
    failures = summary.failures
    if not failures:
        echo_success(f"Mirror of {summary.folder_id} complete in {summary.target_root}")
        return
    click.secho(f"✗ {len(failures)} file(s) failed – see the error log", fg="red")
    for res in failures[:max_failures]:
        click.echo(f"  • {res.job.target}: {res.error}")
    if len(failures) > max_failures:
        click.echo(f"  … and {len(failures) - max_failures} more")
