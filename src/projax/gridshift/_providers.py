"""Factory functions for creating grid-shift sets.

Provides convenience constructors for common configurations:

- :func:`grid_from_arrays`: Build a single grid from arrays of shifts.
- :func:`static_grid`: Constant correction over a region (useful for
  testing).
- :func:`load_grid_from_file`: Load an NTv2 ``.gsb`` file.
- :func:`load_cached_grid`: Load from a local cache, downloading when the
  cached copy is missing or stale.

Grid data is read eagerly; a :class:`~projax.CoordinateTransform` never
performs I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jax.numpy as jnp
from jax.typing import ArrayLike

from projax.config import get_dtype
from projax.constants import DEG2RAD, HALF_PI, PI
from projax.gridshift._download import download_grid_file
from projax.gridshift._parsers import parse_ntv2_file
from projax.gridshift._types import GridData, GridShiftSet
from projax.utils.caching import (
    cache_filename_for_url,
    file_hash,
    get_grid_cache_dir,
    is_file_stale,
)

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE_DAYS: float = 365.0
"""Default maximum age for cached grid files in days."""


def grid_from_arrays(
    lon_min: float,
    lat_min: float,
    lon_step: float,
    lat_step: float,
    lon_shift: ArrayLike,
    lat_shift: ArrayLike,
    name: str = "grid",
) -> GridShiftSet:
    """Create a single-grid set from arrays of corrections.

    Args:
        lon_min: Longitude of the south-west node [rad].
        lat_min: Latitude of the south-west node [rad].
        lon_step: Longitude spacing [rad].  Must be positive.
        lat_step: Latitude spacing [rad].  Must be positive.
        lon_shift: Longitude corrections [rad], positive east,
            shape ``(n_lat, n_lon)``.
        lat_shift: Latitude corrections [rad], shape ``(n_lat, n_lon)``.
        name: Grid name.

    Returns:
        GridShiftSet containing the one grid.

    Raises:
        ValueError: If a spacing is not positive or the arrays are malformed.
    """
    if not (lon_step > 0.0 and lat_step > 0.0):
        raise ValueError(
            f"Grid spacing must be positive, got lon_step={lon_step}, lat_step={lat_step}"
        )
    dtype = get_dtype()
    grid = GridData(
        lon_min=jnp.array(lon_min, dtype=dtype),
        lat_min=jnp.array(lat_min, dtype=dtype),
        lon_step=jnp.array(lon_step, dtype=dtype),
        lat_step=jnp.array(lat_step, dtype=dtype),
        lon_shift=jnp.asarray(lon_shift, dtype=dtype),
        lat_shift=jnp.asarray(lat_shift, dtype=dtype),
    )
    return GridShiftSet(names=(name,), grids=(grid,))


def static_grid(
    dlon: float = 0.0,
    dlat: float = 0.0,
    lon_min: float = -PI,
    lat_min: float = -HALF_PI,
    lon_max: float = PI,
    lat_max: float = HALF_PI,
    name: str = "static",
) -> GridShiftSet:
    """Create a grid with a constant correction over a rectangular region.

    Args:
        dlon: Longitude correction [rad], positive east.
        dlat: Latitude correction [rad], positive north.
        lon_min: Western edge [rad].  Default: -pi.
        lat_min: Southern edge [rad].  Default: -pi/2.
        lon_max: Eastern edge [rad].  Default: pi.
        lat_max: Northern edge [rad].  Default: pi/2.
        name: Grid name.

    Returns:
        GridShiftSet whose correction is constant inside the region.

    Examples:
        ```python
        from projax.gridshift import static_grid
        grids = static_grid(dlon=1e-5, lon_min=-0.1, lon_max=0.1,
                            lat_min=0.7, lat_max=0.9)
        ```
    """
    return grid_from_arrays(
        lon_min=lon_min,
        lat_min=lat_min,
        lon_step=lon_max - lon_min,
        lat_step=lat_max - lat_min,
        lon_shift=jnp.full((2, 2), dlon),
        lat_shift=jnp.full((2, 2), dlat),
        name=name,
    )


def load_grid_from_file(filepath: str | Path) -> GridShiftSet:
    """Load an NTv2 grid-shift file.

    Every sub-grid in the file becomes one grid of the set, ordered finest
    first so that densified child grids take priority over their parents.

    Args:
        filepath: Path to the ``.gsb`` file.

    Returns:
        GridShiftSet ready for JIT-compatible lookups.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid NTv2 file.

    Examples:
        ```python
        from projax.gridshift import load_grid_from_file
        grids = load_grid_from_file("path/to/ntv2_0.gsb")
        ```
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Grid-shift file not found: {filepath}")

    subgrids = parse_ntv2_file(filepath)
    subgrids = sorted(subgrids, key=lambda s: s.lat_step * s.lon_step)
    logger.info("Loaded %d sub-grid(s) from %s", len(subgrids), filepath)

    dtype = get_dtype()
    names = tuple(f"{filepath.name}:{s.name}" for s in subgrids)
    grids = tuple(
        GridData(
            lon_min=jnp.array(s.lon_min, dtype=dtype),
            lat_min=jnp.array(s.lat_min, dtype=dtype),
            lon_step=jnp.array(s.lon_step, dtype=dtype),
            lat_step=jnp.array(s.lat_step, dtype=dtype),
            lon_shift=jnp.asarray(s.lon_shift, dtype=dtype),
            lat_shift=jnp.asarray(s.lat_shift, dtype=dtype),
        )
        for s in subgrids
    )
    return GridShiftSet(names=names, grids=grids)


def load_cached_grid(
    url: str,
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> GridShiftSet:
    """Load a grid-shift file from the local cache, downloading when stale.

    If the cached file at *filepath* is missing or older than
    *max_age_days*, a fresh copy is downloaded from *url*.  When the
    download fails but a stale copy exists, the stale copy is used and a
    warning is logged; with no copy at all the download error propagates.
    A successful download is logged at INFO with the file's SHA-256 digest.

    Args:
        url: URL of the NTv2 file.
        filepath: Cache location.  When ``None`` (the default), uses
            ``<cache_dir>/grids/<file name from url>``.
        max_age_days: Maximum acceptable age of the cached file in days.
            Defaults to 365.

    Returns:
        GridShiftSet loaded from the cached (or freshly downloaded) file.

    Raises:
        httpx.HTTPError: If the download fails and no cached copy exists.
        ValueError: If the file is not a valid NTv2 file.
    """
    if filepath is None:
        filepath = get_grid_cache_dir() / cache_filename_for_url(url)
    else:
        filepath = Path(filepath)

    if is_file_stale(filepath, max_age_days * 86400.0):
        try:
            download_grid_file(url, filepath)
        except Exception:
            if not filepath.exists():
                raise
            logger.warning(
                "Failed to refresh grid-shift file %s; using stale cached copy.",
                filepath,
                exc_info=True,
            )
        else:
            logger.info("Downloaded grid-shift file %s (sha256 %s)", filepath, file_hash(filepath))

    return load_grid_from_file(filepath)


def degrees_grid(
    lon_min_deg: float,
    lat_min_deg: float,
    lon_step_deg: float,
    lat_step_deg: float,
    lon_shift_arcsec: ArrayLike,
    lat_shift_arcsec: ArrayLike,
    name: str = "grid",
) -> GridShiftSet:
    """Create a single-grid set from degree extents and arc-second shifts.

    Convenience wrapper around :func:`grid_from_arrays` for tabulated data
    published in the customary units.

    Args:
        lon_min_deg: Longitude of the south-west node [deg].
        lat_min_deg: Latitude of the south-west node [deg].
        lon_step_deg: Longitude spacing [deg].
        lat_step_deg: Latitude spacing [deg].
        lon_shift_arcsec: Longitude corrections [arcsec], positive east.
        lat_shift_arcsec: Latitude corrections [arcsec].
        name: Grid name.

    Returns:
        GridShiftSet containing the one grid.
    """
    as2rad = DEG2RAD / 3600.0
    return grid_from_arrays(
        lon_min=lon_min_deg * DEG2RAD,
        lat_min=lat_min_deg * DEG2RAD,
        lon_step=lon_step_deg * DEG2RAD,
        lat_step=lat_step_deg * DEG2RAD,
        lon_shift=jnp.asarray(lon_shift_arcsec) * as2rad,
        lat_shift=jnp.asarray(lat_shift_arcsec) * as2rad,
        name=name,
    )
