"""
Light-weight HTTP helpers for interacting with the Drive v3 REST API.

Only the low-level mechanics of *sending* a request belong here; no parsing
or business logic is performed.  The helpers keep request construction (base
URL, bearer header, timeout) consistent and in one place.

All helpers return the raw ``requests.Response`` object so that callers can
decide how to handle status-codes, JSON decoding, pagination, streaming, etc.

The timeout is supplied by the caller; ``DRIVE_TIMEOUT`` is resolved once by
the configuration loader into ``remote.timeout``.
"""

from typing import Any, Dict, Optional

import requests

DEFAULT_TIMEOUT = 60.0


def drive_get(
    base_url: str,
    endpoint: str,
    token: str,
    params: Optional[Dict[str, Any]] = None,
    *,
    stream: bool = False,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Response:
    """Send a token-authenticated GET request to the Drive API.

    Args:
        base_url: Root URL of the API (e.g. ``"https://www.googleapis.com/drive/v3"``).
        endpoint: Relative path under ``base_url`` (e.g. ``"files"`` or
            ``"files/<id>/export"``).
        token: OAuth access token sent as a bearer credential.
        params: Query parameters to include in the URL.
        stream: When *True* the body is not read eagerly; iterate with
            :meth:`requests.Response.iter_content` and close the response.
        timeout: Seconds to wait for the server.

    Returns:
        The raw :class:`requests.Response` object.
    """
    headers = {
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
    }
    url = f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    # No exception handling here; let callers decide how to react.
    return requests.get(
        url,
        headers=headers,
        params=params or {},
        stream=stream,
        timeout=timeout,
    )
