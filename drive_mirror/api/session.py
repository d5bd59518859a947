"""
Credential helpers for authenticating against the Drive API.

Token acquisition and refresh happen outside this package (for example with
Google's OAuth tooling, which writes a ``token.json``).  This module only
*locates* an access token so that the rest of the package never needs to
worry about where it came from.

Lookup order:
    1. ``DRIVE_ACCESS_TOKEN`` environment variable.
    2. The JSON token file named in the configuration
       (``remote.token_file``).  Both the ``token`` key written by
       ``google-auth`` and a plain ``access_token`` key are accepted.

A missing or unreadable token raises :class:`DriveAuthError`, which the CLI
treats as setup-fatal.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..utils.errors import DriveAuthError

logger = logging.getLogger(__name__)

TOKEN_ENV = "DRIVE_ACCESS_TOKEN"
_TOKEN_KEYS = ("token", "access_token")


def load_access_token(token_file: str | Path) -> str:
    """Return an access token from the environment or *token_file*.

    Args:
        token_file: Path to a JSON document holding the token.

    Returns:
        The bearer token string.

    Raises:
        DriveAuthError: When no token can be found.
    """
    env_token = os.getenv(TOKEN_ENV)
    if env_token:
        logger.debug("Using access token from %s", TOKEN_ENV)
        return env_token

    path = Path(token_file).expanduser()
    try:
        with open(path, encoding="utf-8") as fh:
            payload = json.load(fh)
    except FileNotFoundError as exc:
        raise DriveAuthError(
            f"No access token: {path} does not exist and {TOKEN_ENV} is not set"
        ) from exc
    except (OSError, ValueError) as exc:
        raise DriveAuthError(f"Could not read token file {path}: {exc}") from exc

    if isinstance(payload, dict):
        for key in _TOKEN_KEYS:
            token = payload.get(key)
            if token:
                logger.debug("Loaded access token from %s", path)
                return str(token)

    raise DriveAuthError(f"{path} contains no 'token' or 'access_token' field")
