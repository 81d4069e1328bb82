"""Shared utility functions for projax.

Provides angle helpers and filesystem cache management.
"""

from projax.utils._angle import from_radians, normalize_longitude, to_radians
from projax.utils.caching import (
    cache_filename_for_url,
    file_age_seconds,
    file_hash,
    get_cache_dir,
    get_grid_cache_dir,
    is_file_stale,
)

__all__ = [
    "cache_filename_for_url",
    "file_age_seconds",
    "file_hash",
    "from_radians",
    "get_cache_dir",
    "get_grid_cache_dir",
    "is_file_stale",
    "normalize_longitude",
    "to_radians",
]
