"""Lambert Conformal Conic projection (one or two standard parallels).

The pole at the cone's apex maps to a point; the opposite pole maps to
infinity and is reported as out of domain.

References:
    1. J. P. Snyder, *Map Projections: A Working Manual*, USGS Professional
       Paper 1395, 1987, pp. 104-110.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cached_property
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from projax.constants import HALF_PI
from projax.projections._base import EPS10, Projection
from projax.projections._math import msfn, phi2, tsfn


class _Cone(NamedTuple):
    n: float
    c: float
    rho0: float


@dataclass(frozen=True, kw_only=True)
class LambertConformalConicProjection(Projection):
    """Lambert Conformal Conic.

    Args:
        lat_1: First standard parallel [rad].
        lat_2: Second standard parallel [rad].  Defaults to *lat_1*
            (the one-parallel form).

    Raises:
        ValueError: If the standard parallels are symmetric about the
            equator.

    Examples:
        ```python
        import math
        from projax.projections import LambertConformalConicProjection
        lcc = LambertConformalConicProjection(
            lat_1=math.radians(49.0), lat_2=math.radians(44.0),
            lat_0=math.radians(46.5), lon_0=math.radians(3.0),
            false_easting=700000.0, false_northing=6600000.0,
        )
        ```
    """

    lat_1: float = 0.0
    lat_2: float | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if abs(self.lat_1 + self.standard_parallel_2) < EPS10:
            raise ValueError(
                "Lambert Conformal Conic standard parallels must not be symmetric about the equator"
            )

    @property
    def standard_parallel_2(self) -> float:
        return self.lat_1 if self.lat_2 is None else self.lat_2

    @cached_property
    def _cone(self) -> _Cone:
        e = self.ellipsoid.e
        e2 = self.ellipsoid.e2
        phi1 = self.lat_1
        phi2_ = self.standard_parallel_2

        sin1 = math.sin(phi1)
        m1 = float(msfn(sin1, math.cos(phi1), e2))
        t1 = float(tsfn(phi1, sin1, e))
        if abs(phi1 - phi2_) >= EPS10:
            sin2 = math.sin(phi2_)
            m2 = float(msfn(sin2, math.cos(phi2_), e2))
            t2 = float(tsfn(phi2_, sin2, e))
            n = math.log(m1 / m2) / math.log(t1 / t2)
        else:
            n = sin1

        c = m1 * t1 ** (-n) / n
        if abs(abs(self.lat_0) - HALF_PI) < EPS10:
            rho0 = 0.0
        else:
            rho0 = c * float(tsfn(self.lat_0, math.sin(self.lat_0), e)) ** n
        return _Cone(n, c, rho0)

    def project(self, lam: Array, phi: Array) -> tuple[Array, Array, Array]:
        n, c, rho0 = self._cone
        e = self.ellipsoid.e

        at_pole = jnp.abs(jnp.abs(phi) - HALF_PI) < EPS10
        ok = ~(at_pole & (phi * n <= 0.0))
        safe_phi = jnp.where(at_pole, 0.0, phi)
        rho = jnp.where(at_pole, 0.0, c * jnp.power(tsfn(safe_phi, jnp.sin(safe_phi), e), n))

        lam = lam * n
        x = self.k0 * rho * jnp.sin(lam)
        y = self.k0 * (rho0 - rho * jnp.cos(lam))
        return jnp.where(ok, x, jnp.nan), jnp.where(ok, y, jnp.nan), ok

    def project_inverse(self, x: Array, y: Array) -> tuple[Array, Array, Array]:
        n, c, rho0 = self._cone
        e = self.ellipsoid.e

        x = x / self.k0
        y = rho0 - y / self.k0
        rho = jnp.hypot(x, y)

        # Cone opening southwards
        if n < 0.0:
            rho, x, y = -rho, -x, -y

        at_apex = rho == 0.0
        safe_rho = jnp.where(at_apex, c, rho)
        phi = jnp.where(
            at_apex,
            HALF_PI if n > 0.0 else -HALF_PI,
            phi2(jnp.power(safe_rho / c, 1.0 / n), e),
        )
        lam = jnp.where(at_apex, 0.0, jnp.arctan2(x, y) / n)
        return lam, phi, jnp.isfinite(lam) & jnp.isfinite(phi)
