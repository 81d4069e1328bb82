"""Type definitions for horizontal grid-shift datasets.

Provides the core data types for grid-shift storage and lookup:

- :class:`GridData`: Immutable container holding one regular grid of
  longitude/latitude corrections as JAX arrays, so interpolation works
  inside ``jax.jit``.
- :class:`GridShiftSet`: An ordered, named collection of grids attached to
  a datum.  The first grid covering a point supplies its correction.

``GridData`` is a :class:`~typing.NamedTuple`, which JAX treats as a pytree
automatically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from jax import Array


class GridData(NamedTuple):
    """A regular grid of horizontal datum corrections.

    Nodes are laid out row-major from south to north, and west to east
    within a row.  Shifts are positive east and north, so the forward
    correction of a point is ``(lon + dlon, lat + dlat)``.

    Attributes:
        lon_min: Longitude of the south-west node [rad], scalar.
        lat_min: Latitude of the south-west node [rad], scalar.
        lon_step: Node spacing in longitude [rad], scalar.
        lat_step: Node spacing in latitude [rad], scalar.
        lon_shift: Longitude corrections [rad], shape ``(n_lat, n_lon)``.
        lat_shift: Latitude corrections [rad], shape ``(n_lat, n_lon)``.
    """

    lon_min: Array
    lat_min: Array
    lon_step: Array
    lat_step: Array
    lon_shift: Array
    lat_shift: Array

    @property
    def shape(self) -> tuple[int, int]:
        """Grid dimensions ``(n_lat, n_lon)``."""
        return self.lon_shift.shape

    @property
    def lon_max(self) -> Array:
        return self.lon_min + (self.shape[1] - 1) * self.lon_step

    @property
    def lat_max(self) -> Array:
        return self.lat_min + (self.shape[0] - 1) * self.lat_step


@dataclass(frozen=True, eq=False)
class GridShiftSet:
    """Ordered grids used by a grid-shift datum.

    Args:
        names: One name per grid (typically ``"<file>:<subgrid>"``).  Two
            sets with the same names are considered the same correction.
        grids: Grids in priority order.

    Raises:
        ValueError: If the set is empty, names and grids differ in length,
            or any grid has fewer than two nodes along an axis.
    """

    names: tuple[str, ...]
    grids: tuple[GridData, ...]

    def __post_init__(self) -> None:
        if not self.grids:
            raise ValueError("GridShiftSet requires at least one grid")
        if len(self.names) != len(self.grids):
            raise ValueError(
                f"GridShiftSet has {len(self.names)} names but {len(self.grids)} grids"
            )
        for name, grid in zip(self.names, self.grids):
            if grid.lon_shift.ndim != 2 or grid.lon_shift.shape != grid.lat_shift.shape:
                raise ValueError(f"Grid '{name}' shift arrays must share a 2-D shape")
            if min(grid.shape) < 2:
                raise ValueError(
                    f"Grid '{name}' needs at least 2 nodes per axis, got {grid.shape}"
                )

    def __len__(self) -> int:
        return len(self.grids)

    def __add__(self, other: GridShiftSet) -> GridShiftSet:
        return GridShiftSet(self.names + other.names, self.grids + other.grids)
