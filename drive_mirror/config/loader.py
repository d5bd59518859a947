"""
YAML configuration loader.

This helper locates, reads, merges, and validates ``drive_mirror.yaml``
before returning a :class:`drive_mirror.config.schema.MirrorConfig` instance.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. ``./drive_mirror.yaml`` in the current working directory.
3. The packaged default shipped inside the wheel.

The selected document is deep-merged over the packaged default so that a user
file only needs the keys it changes.  ``DRIVE_MIRROR_*`` environment variables
are applied on top; CLI flags are applied last by the caller.
"""

from __future__ import annotations

import logging
import os
from importlib.resources import as_file, files
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..utils.errors import ConfigError
from .schema import MirrorConfig

log = logging.getLogger(__name__)

LOCAL_CONFIG_NAME = "drive_mirror.yaml"

_DEFAULT_CONFIG = files("drive_mirror.resources") / "default_config.yaml"

# (dotted key, environment variable)
_ENV_OVERRIDES = (
    ("source_path", "DRIVE_MIRROR_SOURCE"),
    ("target_root", "DRIVE_MIRROR_TARGET"),
    ("transfers.workers", "DRIVE_MIRROR_WORKERS"),
    ("remote.token_file", "DRIVE_MIRROR_TOKEN_FILE"),
    ("remote.timeout", "DRIVE_TIMEOUT"),
)


# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #
def _load_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping from *path*.

    Raises:
        ConfigError: When the file cannot be read, is malformed, or does not
            contain a mapping at the top level.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Could not read configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge *override* into *base* (in place) and return *base*."""
    for key, val in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(val, dict):
            _deep_update(base[key], val)
        else:
            base[key] = val
    return base


def _set_dotted(cfg: Dict[str, Any], dotted: str, value: Any) -> None:
    """Assign *value* at ``a.b.c`` inside *cfg*, creating sections as needed."""
    *parents, leaf = dotted.split(".")
    node = cfg
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


def _apply_env(cfg: Dict[str, Any]) -> None:
    for dotted, env in _ENV_OVERRIDES:
        val = os.getenv(env)
        if val:
            log.debug("Config override from %s", env)
            _set_dotted(cfg, dotted, val)


def _resolve_user_file(explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        if not explicit.exists():
            raise ConfigError(f"Configuration file not found: {explicit}")
        return explicit
    local = Path.cwd() / LOCAL_CONFIG_NAME
    return local if local.exists() else None


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    config_path: Optional[str | Path] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
) -> MirrorConfig:
    """Return a fully validated :class:`MirrorConfig`.

    Args:
        config_path: Explicit path to a YAML file.  ``None`` triggers the
            search sequence described in the module doc-string.
        overrides: Mapping of dotted keys (``"transfers.workers"``) to values,
            typically collected from CLI flags.  ``None`` values are ignored.

    Returns:
        A :class:`MirrorConfig` object ready for downstream use.

    Raises:
        ConfigError: When a file is unreadable or the merged document fails
            validation.
    """
    explicit = Path(config_path).expanduser() if config_path else None

    with as_file(_DEFAULT_CONFIG) as p:
        merged = _load_yaml(Path(p))

    user_file = _resolve_user_file(explicit)
    if user_file is not None:
        log.info("Applying configuration from %s", user_file)
        _deep_update(merged, _load_yaml(user_file))

    _apply_env(merged)

    for dotted, value in (overrides or {}).items():
        if value is not None:
            _set_dotted(merged, dotted, value)

    try:
        return MirrorConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration – {exc}") from exc
