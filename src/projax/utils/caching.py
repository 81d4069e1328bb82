"""Filesystem cache directory management and file utilities.

Provides helpers for locating the projax cache directory (where downloaded
grid-shift files are kept), checking file freshness, and computing file
hashes.  These are pure-Python utilities with no JAX dependency.

The cache root is determined by the ``PROJAX_CACHE`` environment variable.
If unset, it defaults to ``~/.cache/projax``.
"""

from __future__ import annotations

import hashlib
import os
import time
from pathlib import Path
from urllib.parse import urlparse


_ENV_VAR = "PROJAX_CACHE"
_DEFAULT_SUBDIR = ".cache/projax"


def get_cache_dir(subdirectory: str | None = None) -> Path:
    """Return the projax cache directory, creating it if needed.

    The root is ``$PROJAX_CACHE`` if set, otherwise ``~/.cache/projax``.
    An optional *subdirectory* is appended and also created.

    Args:
        subdirectory: Optional subdirectory to append (e.g. ``"grids"``).

    Returns:
        Resolved :class:`~pathlib.Path` to the cache directory.
    """
    env = os.environ.get(_ENV_VAR)
    if env is not None:
        root = Path(env)
    else:
        root = Path.home() / _DEFAULT_SUBDIR

    if subdirectory is not None:
        root = root / subdirectory

    root.mkdir(parents=True, exist_ok=True)
    return root


def get_grid_cache_dir() -> Path:
    """Return the grid-shift cache directory (``<cache>/grids``).

    Returns:
        Path to the grid cache directory.
    """
    return get_cache_dir("grids")


def cache_filename_for_url(url: str) -> str:
    """Return the file name a download from *url* is cached under.

    Uses the last path component of the URL.

    Raises:
        ValueError: If the URL has no file name component.
    """
    name = Path(urlparse(url).path).name
    if not name:
        raise ValueError(f"Cannot derive a cache file name from URL: '{url}'")
    return name


def file_age_seconds(filepath: str | Path) -> float:
    """Return the age of *filepath* in seconds since last modification.

    Args:
        filepath: Path to the file.

    Returns:
        Seconds elapsed since the file was last modified.

    Raises:
        FileNotFoundError: If *filepath* does not exist.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"No such file: '{filepath}'")
    return max(0.0, time.time() - filepath.stat().st_mtime)


def is_file_stale(filepath: str | Path, max_age_seconds: float) -> bool:
    """Check whether *filepath* is missing or older than *max_age_seconds*.

    Args:
        filepath: Path to the file.
        max_age_seconds: Maximum acceptable age in seconds.

    Returns:
        ``True`` if the file is missing or stale.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        return True
    return file_age_seconds(filepath) > max_age_seconds


def file_hash(
    filepath: str | Path,
    algorithm: str = "sha256",
    chunk_size: int = 65536,
) -> str:
    """Compute the hex digest of *filepath* using the given hash algorithm.

    Reads in chunks, so grid files of any size can be hashed.

    Args:
        filepath: Path to the file.
        algorithm: Hash algorithm name accepted by :mod:`hashlib`.
        chunk_size: Number of bytes per read chunk.

    Returns:
        Lowercase hex digest string.

    Raises:
        FileNotFoundError: If *filepath* does not exist.
        ValueError: If *algorithm* is not supported by :mod:`hashlib`.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"No such file: '{filepath}'")

    try:
        h = hashlib.new(algorithm)
    except ValueError as err:
        raise ValueError(
            f"Unsupported hash algorithm: '{algorithm}'. "
            f"Available: {sorted(hashlib.algorithms_available)}"
        ) from err

    with open(filepath, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()
