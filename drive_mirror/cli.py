"""Expose the project-wide Click group for the ``drive-mirror-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main` carrying the global
  flags (configuration file, verbosity);
* provides the ``mirror`` command, which loads the configuration, sets up
  logging, builds the Drive service and runs the pipeline;
* provides the ``resolve`` command, which prints the folder id of a Drive
  path.

Setup failures (configuration, credentials, unresolved folder) become a
:class:`click.ClickException` and therefore a non-zero exit status.  Failed
individual files never change the exit status; they are listed in the
summary and the error log.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click
import requests
import structlog

from drive_mirror import __version__
from drive_mirror.api import DriveService
from drive_mirror.api.session import load_access_token
from drive_mirror.config import MAX_WORKERS, MirrorConfig, load_config
from drive_mirror.pipeline import MirrorCoordinator, resolve_folder_path
from drive_mirror.utils.display import echo_banner, echo_summary
from drive_mirror.utils.errors import DriveMirrorError
from drive_mirror.utils.logging import setup_logging

log = structlog.get_logger()

_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------
def _load(ctx_obj: Dict[str, Any], overrides: Dict[str, Any] | None = None) -> MirrorConfig:
    try:
        return load_config(ctx_obj["config_path"], overrides=overrides)
    except DriveMirrorError as exc:
        raise click.ClickException(str(exc)) from exc


def _configure_logging(ctx_obj: Dict[str, Any], cfg: MirrorConfig, *, live_status: bool) -> None:
    setup_logging(
        log_dir=cfg.logging.log_dir,
        transfer_log=cfg.logging.transfer_log,
        error_log=cfg.logging.error_log,
        verbose=ctx_obj["verbose"],
        debug=ctx_obj["debug"],
        live_status=live_status,
    )


def _build_service(cfg: MirrorConfig) -> DriveService:
    """Return an authenticated :class:`DriveService` for *cfg*."""
    token = load_access_token(cfg.remote.token_file)
    return DriveService(
        token,
        base_url=cfg.remote.base_url,
        timeout=cfg.remote.timeout,
        page_size=cfg.remote.page_size,
        chunk_size=cfg.remote.chunk_size,
    )


# ---------------------------------------------------------------------------
# Top-level Click group
# ---------------------------------------------------------------------------
@click.group(
    context_settings=_CTX,
    help="""\b
drive-mirror-cli – mirror a Drive folder tree to local disk.

""",
)
@click.version_option(__version__)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration file (default: ./drive_mirror.yaml, then built-in defaults).",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """Root command executed by *drive-mirror-cli*."""
    ctx.obj = {
        "config_path": config_path,
        "verbose": verbose,
        "debug": debug,
    }


# ---------------------------------------------------------------------------
# mirror
# ---------------------------------------------------------------------------
@main.command("mirror")
@click.option("-s", "--source", help="Drive folder path, e.g. 'Projects/2024' ('root' for My Drive).")
@click.option(
    "-t",
    "--target",
    type=click.Path(file_okay=False, path_type=Path),
    help="Local directory receiving the mirror.",
)
@click.option(
    "-w",
    "--workers",
    type=click.IntRange(1, MAX_WORKERS),
    help="Number of concurrent transfers.",
)
@click.option("--dry-run", is_flag=True, help="Walk the tree and create folders but fetch nothing.")
@click.option("--no-progress", is_flag=True, help="Do not draw the live status line.")
@click.pass_obj
def mirror_cmd(
    obj: Dict[str, Any],
    source: str | None,
    target: Path | None,
    workers: int | None,
    dry_run: bool,
    no_progress: bool,
) -> None:
    """Recursively mirror a Drive folder to local disk.

    Files already present locally are skipped, so an interrupted run can
    simply be started again.
    """
    cfg = _load(
        obj,
        overrides={
            "source_path": source,
            "target_root": target,
            "transfers.workers": workers,
        },
    )
    _configure_logging(obj, cfg, live_status=not no_progress)

    echo_banner(f"Mirroring '{cfg.source_path}' → {cfg.target_root}")
    try:
        service = _build_service(cfg)
        folder_id = resolve_folder_path(service, cfg.source_path)
    except (DriveMirrorError, requests.RequestException) as exc:
        raise click.ClickException(str(exc)) from exc

    coordinator = MirrorCoordinator.from_config(
        service, cfg, dry_run=dry_run, show_progress=not no_progress
    )
    summary = coordinator.run(folder_id=folder_id)
    echo_summary(summary)


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------
@main.command("resolve")
@click.argument("path")
@click.pass_obj
def resolve_cmd(obj: Dict[str, Any], path: str) -> None:
    """Print the folder id for a Drive PATH."""
    cfg = _load(obj)
    _configure_logging(obj, cfg, live_status=False)
    try:
        folder_id = resolve_folder_path(_build_service(cfg), path)
    except (DriveMirrorError, requests.RequestException) as exc:
        raise click.ClickException(str(exc)) from exc
    log.debug("resolved", path=path, folder_id=folder_id)
    click.echo(folder_id)


cli = main
__all__: list[str] = ["main"]
