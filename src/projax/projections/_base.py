"""Base class for map projections.

A projection maps geographic radians to planar coordinates and back.  Each
family implements :meth:`Projection.project` and
:meth:`Projection.project_inverse` on the unit ellipsoid (outputs in
multiples of the semi-major axis, longitudes relative to the central
meridian).  The base class wraps them with the parameters common to every
family: central meridian, scale by ``a``, false easting/northing and the
linear unit.

Projection kernels never raise.  They return an ``ok`` mask that is
``False`` wherever the point is outside the projection's domain or the
result is not finite, so they can run under ``jax.jit``.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.ellipsoid import WGS84, Ellipsoid
from projax.projections._axis import ENU, AxisOrder
from projax.projections._meridian import GREENWICH, PrimeMeridian
from projax.utils import normalize_longitude

EPS10 = 1.0e-10


@dataclass(frozen=True, kw_only=True)
class Projection:
    """Common projection parameters.

    Args:
        ellipsoid: Ellipsoid the projection is computed on.
        lon_0: Central meridian [rad].
        lat_0: Latitude of origin [rad].
        k0: Scale factor at the natural origin.
        false_easting: False easting [m].
        false_northing: False northing [m].
        to_meter: Size of one native linear unit in metres.
        axis_order: Ordinate order of the native coordinates.
        prime_meridian: Meridian that longitudes are measured from.
        name: Descriptive name.
    """

    ellipsoid: Ellipsoid = WGS84
    lon_0: float = 0.0
    lat_0: float = 0.0
    k0: float = 1.0
    false_easting: float = 0.0
    false_northing: float = 0.0
    to_meter: float = 1.0
    axis_order: AxisOrder = ENU
    prime_meridian: PrimeMeridian = GREENWICH
    name: str = ""

    def __post_init__(self) -> None:
        if not self.k0 > 0.0:
            raise ValueError(f"Scale factor must be positive, got {self.k0}")
        if not self.to_meter > 0.0:
            raise ValueError(f"Unit size must be positive, got {self.to_meter}")

    @property
    def is_geographic(self) -> bool:
        """``True`` for projections whose native coordinates are lon/lat."""
        return False

    def project(self, lam: Array, phi: Array) -> tuple[Array, Array, Array]:
        """Forward formula on the unit ellipsoid.

        Args:
            lam: Longitude relative to the central meridian [rad].
            phi: Latitude [rad].

        Returns:
            Tuple ``(x, y, ok)`` with ``x, y`` in multiples of ``a``.
        """
        raise NotImplementedError

    def project_inverse(self, x: Array, y: Array) -> tuple[Array, Array, Array]:
        """Inverse formula on the unit ellipsoid.

        Args:
            x: Easting in multiples of ``a``, without false easting.
            y: Northing in multiples of ``a``, without false northing.

        Returns:
            Tuple ``(lam, phi, ok)`` with longitude relative to the central
            meridian and latitude in *rad*.
        """
        raise NotImplementedError

    def project_radians(self, lon: ArrayLike, lat: ArrayLike) -> tuple[Array, Array, Array]:
        """Project geographic coordinates to native planar coordinates.

        Args:
            lon: Longitude relative to the prime meridian [rad].
            lat: Latitude [rad].

        Returns:
            Tuple ``(x, y, ok)`` in native units; ``ok`` is ``False`` where
            the point is outside the projection's domain.
        """
        lon = jnp.asarray(lon)
        lat = jnp.asarray(lat)
        lam = normalize_longitude(lon - self.lon_0)
        x, y, ok = self.project(lam, lat)
        a = self.ellipsoid.a
        x = (a * x + self.false_easting) / self.to_meter
        y = (a * y + self.false_northing) / self.to_meter
        ok = ok & jnp.isfinite(x) & jnp.isfinite(y)
        return x, y, ok

    def inverse_project_radians(self, x: ArrayLike, y: ArrayLike) -> tuple[Array, Array, Array]:
        """Inverse-project native planar coordinates to geographic radians.

        Args:
            x: Native easting.
            y: Native northing.

        Returns:
            Tuple ``(lon, lat, ok)`` in *rad*; ``ok`` is ``False`` where the
            point is outside the projection's domain.
        """
        x = jnp.asarray(x)
        y = jnp.asarray(y)
        a = self.ellipsoid.a
        x_n = (x * self.to_meter - self.false_easting) / a
        y_n = (y * self.to_meter - self.false_northing) / a
        lam, phi, ok = self.project_inverse(x_n, y_n)
        lon = normalize_longitude(lam + self.lon_0)
        ok = ok & jnp.isfinite(lon) & jnp.isfinite(phi)
        return lon, phi, ok
