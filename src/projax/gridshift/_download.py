"""Download grid-shift files.

Provides a helper to fetch a binary grid file over HTTP(S).  Network
errors are propagated to the caller so that higher-level code (e.g.
:func:`~projax.gridshift.load_cached_grid`) can decide on fallback
behaviour.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT: float = 120.0
"""Default HTTP timeout in seconds."""


def download_grid_file(
    url: str,
    filepath: str | Path,
    *,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download a grid-shift file from *url* to *filepath*.

    Creates parent directories if they do not exist.  The body is written
    as bytes, since grid files are binary.

    Args:
        url: URL to fetch.
        filepath: Destination path for the downloaded file.
        timeout: HTTP timeout in seconds.  Defaults to 120.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Downloading grid-shift file from %s", url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()

    filepath.write_bytes(response.content)
    logger.info("Grid-shift file written to %s", filepath)
    return filepath.resolve()
