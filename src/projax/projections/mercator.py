"""Mercator projection (ellipsoidal and spherical).

The poles map to infinity and are reported as out of domain.

References:
    1. J. P. Snyder, *Map Projections: A Working Manual*, USGS Professional
       Paper 1395, 1987, pp. 38-47.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array

from projax.constants import HALF_PI
from projax.projections._base import EPS10, Projection
from projax.projections._math import msfn, phi2


@dataclass(frozen=True, kw_only=True)
class MercatorProjection(Projection):
    """Normal-aspect Mercator.

    Args:
        lat_ts: Latitude of true scale [rad].  When given, it replaces
            ``k0`` as the scale definition.

    Examples:
        ```python
        from projax.projections import MercatorProjection
        merc = MercatorProjection()
        x, y, ok = merc.project_radians(0.1, 0.5)
        ```
    """

    lat_ts: float | None = None

    @property
    def scale_factor(self) -> float:
        """Effective scale on the equator."""
        if self.lat_ts is None:
            return self.k0
        return self.k0 * float(
            msfn(math.sin(self.lat_ts), math.cos(self.lat_ts), self.ellipsoid.e2)
        )

    def project(self, lam: Array, phi: Array) -> tuple[Array, Array, Array]:
        k = self.scale_factor
        e = self.ellipsoid.e
        ok = jnp.abs(phi) < HALF_PI - EPS10
        safe_phi = jnp.where(ok, phi, 0.0)
        sinphi = jnp.sin(safe_phi)
        x = k * lam
        y = k * (jnp.arcsinh(jnp.tan(safe_phi)) - e * jnp.arctanh(e * sinphi))
        return x, jnp.where(ok, y, jnp.nan), ok

    def project_inverse(self, x: Array, y: Array) -> tuple[Array, Array, Array]:
        k = self.scale_factor
        lam = x / k
        phi = phi2(jnp.exp(-y / k), self.ellipsoid.e)
        return lam, phi, jnp.isfinite(lam) & jnp.isfinite(phi)
