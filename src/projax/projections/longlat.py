"""Geographic (longitude/latitude) pseudo-projection.

Native coordinates are longitude and latitude, in degrees by default.  The
"projection" only converts angle units and applies the central meridian;
there is no scaling by ``a`` and no false origin.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.projections._base import Projection
from projax.utils import from_radians, normalize_longitude, to_radians


@dataclass(frozen=True, kw_only=True)
class LongLatProjection(Projection):
    """Geographic coordinates.

    Args:
        use_degrees: If ``True`` (default), native coordinates are degrees;
            otherwise radians.

    Examples:
        ```python
        from projax.projections import LongLatProjection
        proj = LongLatProjection()
        lon, lat, ok = proj.inverse_project_radians(2.35, 48.85)
        ```
    """

    use_degrees: bool = True

    @property
    def is_geographic(self) -> bool:
        return True

    def project(self, lam: Array, phi: Array) -> tuple[Array, Array, Array]:
        return lam, phi, jnp.ones(jnp.shape(lam), dtype=bool)

    def project_inverse(self, x: Array, y: Array) -> tuple[Array, Array, Array]:
        return x, y, jnp.ones(jnp.shape(x), dtype=bool)

    def project_radians(self, lon: ArrayLike, lat: ArrayLike) -> tuple[Array, Array, Array]:
        lon = jnp.asarray(lon)
        lat = jnp.asarray(lat)
        if self.lon_0 != 0.0:
            lon = normalize_longitude(lon - self.lon_0)
        x = from_radians(lon, self.use_degrees)
        y = from_radians(lat, self.use_degrees)
        return x, y, jnp.isfinite(x) & jnp.isfinite(y)

    def inverse_project_radians(self, x: ArrayLike, y: ArrayLike) -> tuple[Array, Array, Array]:
        lon = to_radians(jnp.asarray(x), self.use_degrees)
        lat = to_radians(jnp.asarray(y), self.use_degrees)
        if self.lon_0 != 0.0:
            lon = normalize_longitude(lon + self.lon_0)
        return lon, lat, jnp.isfinite(lon) & jnp.isfinite(lat)
