"""Horizontal grid-shift datasets for datum conversion.

Provides JIT-compatible grid storage and bilinear interpolation using JAX
arrays.  All lookup functions work inside ``jax.jit`` and ``jax.vmap`` and
report coverage misses as boolean masks.

Typical usage::

    from projax.gridshift import load_grid_from_file, apply_shift
    grids = load_grid_from_file("ntv2_0.gsb")
    lon, lat, covered = apply_shift(grids, lon_rad, lat_rad)
"""

from projax.gridshift._download import download_grid_file
from projax.gridshift._lookup import (
    apply_inverse_shift,
    apply_shift,
    lookup_correction,
)
from projax.gridshift._parsers import NTv2Subgrid, parse_ntv2_bytes, parse_ntv2_file
from projax.gridshift._providers import (
    degrees_grid,
    grid_from_arrays,
    load_cached_grid,
    load_grid_from_file,
    static_grid,
)
from projax.gridshift._types import GridData, GridShiftSet

__all__ = [
    "GridData",
    "GridShiftSet",
    "NTv2Subgrid",
    "apply_inverse_shift",
    "apply_shift",
    "degrees_grid",
    "download_grid_file",
    "grid_from_arrays",
    "load_cached_grid",
    "load_grid_from_file",
    "lookup_correction",
    "parse_ntv2_bytes",
    "parse_ntv2_file",
    "static_grid",
]
