"""Geodetic <-> geocentric (Earth-centred Cartesian) conversion.

Converts between geodetic coordinates ``(lon, lat, h)`` on an arbitrary
reference ellipsoid and geocentric Cartesian coordinates ``(X, Y, Z)``.

The forward transformation is closed-form; the inverse uses Bowring's
iterative method implemented with ``jax.lax.while_loop`` for JAX
traceability.  Instead of raising, both kernels return a boolean mask
alongside their results (domain validity for the forward direction,
convergence for the inverse) so that they can run under ``jax.jit``.

All inputs and outputs use SI base units (metres, radians).  A NaN height
is treated as absent and converted as zero.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.3.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.config import get_convergence_tolerance, get_dtype
from projax.constants import (
    GEOCENTRIC_MAX_ITERATIONS,
    HALF_PI,
    PI,
    POLE_CLAMP_RATIO,
    TWO_PI,
)
from projax.ellipsoid import WGS84, Ellipsoid


def geodetic_to_geocentric(
    lon: ArrayLike,
    lat: ArrayLike,
    h: ArrayLike,
    a: float,
    e2: float,
) -> tuple[Array, Array, Array, Array]:
    """Convert geodetic coordinates to geocentric Cartesian coordinates.

    Uses the prime vertical radius of curvature:

    .. math::

        N = \\frac{a}{\\sqrt{1 - e^2 \\sin^2 \\phi}}

    Latitudes up to 0.1% past a pole are clamped onto the pole; anything
    further is reported in the returned mask.

    Args:
        lon: Longitude [rad].
        lat: Latitude [rad].
        h: Ellipsoidal height [m].  NaN is treated as 0.
        a: Semi-major axis of the ellipsoid [m].
        e2: First eccentricity squared of the ellipsoid.

    Returns:
        Tuple ``(X, Y, Z, ok)`` where ``X, Y, Z`` are in *m* and ``ok`` is
        ``False`` where the latitude is out of range.
    """
    dtype = get_dtype()
    lon = jnp.asarray(lon, dtype=dtype)
    lat = jnp.asarray(lat, dtype=dtype)
    h = jnp.asarray(h, dtype=dtype)

    ok = jnp.abs(lat) <= HALF_PI * POLE_CLAMP_RATIO
    lat = jnp.clip(lat, -HALF_PI, HALF_PI)
    lon = jnp.where(lon > PI, lon - TWO_PI, lon)
    h = jnp.where(jnp.isnan(h), 0.0, h)

    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    N = a / jnp.sqrt(1.0 - e2 * sin_lat * sin_lat)

    x = (N + h) * cos_lat * jnp.cos(lon)
    y = (N + h) * cos_lat * jnp.sin(lon)
    z = ((1.0 - e2) * N + h) * sin_lat

    return x, y, z, ok


def geocentric_to_geodetic(
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    a: float,
    e2: float,
    tolerance: float | None = None,
    max_iterations: int = GEOCENTRIC_MAX_ITERATIONS,
) -> tuple[Array, Array, Array, Array]:
    """Convert geocentric Cartesian coordinates to geodetic coordinates.

    Uses Bowring's iterative method: the correction ``dz = N e² sin(phi)``
    is refined until successive iterates differ by less than
    ``tolerance * a`` (an arc of *tolerance* radians), or until
    *max_iterations* is reached.

    Args:
        x: Geocentric X [m].
        y: Geocentric Y [m].
        z: Geocentric Z [m].
        a: Semi-major axis of the ellipsoid [m].
        e2: First eccentricity squared of the ellipsoid.
        tolerance: Angular convergence tolerance [rad].  Defaults to
            :func:`~projax.config.get_convergence_tolerance`.
        max_iterations: Iteration bound.

    Returns:
        Tuple ``(lon, lat, h, converged)`` with longitude and latitude in
        *rad*, height in *m*, and a mask that is ``False`` where the
        iteration did not reach tolerance or the result is not finite.
    """
    dtype = get_dtype()
    x, y, z = jnp.broadcast_arrays(
        jnp.asarray(x, dtype=dtype),
        jnp.asarray(y, dtype=dtype),
        jnp.asarray(z, dtype=dtype),
    )
    if tolerance is None:
        tolerance = get_convergence_tolerance()

    eps = tolerance * a
    rho2 = x * x + y * y

    def _sin_phi(zdz):
        nh = jnp.sqrt(rho2 + zdz * zdz)
        safe_nh = jnp.where(nh > 0.0, nh, 1.0)
        return jnp.where(nh > 0.0, zdz / safe_nh, 0.0)

    # State: (dz, dz_prev, iteration_count)
    dz0 = e2 * z

    def cond(state):
        dz, dz_prev, i = state
        return jnp.any(jnp.abs(dz - dz_prev) > eps) & (i < max_iterations)

    def body(state):
        dz, _, i = state
        sinphi = _sin_phi(z + dz)
        N = a / jnp.sqrt(1.0 - e2 * sinphi * sinphi)
        return (N * e2 * sinphi, dz, i + 1)

    # Force the first iteration by setting dz_prev far from dz0
    init_state = (dz0, dz0 + jnp.asarray(1e10, dtype=dtype), jnp.int32(0))
    dz, dz_prev, _ = jax.lax.while_loop(cond, body, init_state)

    converged = jnp.abs(dz - dz_prev) <= eps

    zdz = z + dz
    lon = jnp.arctan2(y, x)
    lat = jnp.arctan2(zdz, jnp.sqrt(rho2))

    sinphi = _sin_phi(zdz)
    N = a / jnp.sqrt(1.0 - e2 * sinphi * sinphi)
    h = jnp.sqrt(rho2 + zdz * zdz) - N

    converged = converged & jnp.isfinite(lat) & jnp.isfinite(h)
    return lon, lat, h, converged


class GeocentricConverter:
    """Bidirectional geodetic/geocentric converter bound to one ellipsoid.

    Stateless apart from the ellipsoid; safe to share between threads.

    Args:
        ellipsoid: Working ellipsoid.  Defaults to WGS84.

    Examples:
        ```python
        from projax.geocentric import GeocentricConverter
        conv = GeocentricConverter()
        x, y, z, ok = conv.geodetic_to_geocentric(0.0, 0.0, 0.0)
        float(x)  # 6378137.0
        ```
    """

    __slots__ = ("_ellipsoid",)

    def __init__(self, ellipsoid: Ellipsoid = WGS84) -> None:
        self._ellipsoid = ellipsoid

    @classmethod
    def wgs84(cls) -> GeocentricConverter:
        """Converter on the WGS84 reference ellipsoid."""
        return cls(WGS84)

    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid

    def geodetic_to_geocentric(
        self, lon: ArrayLike, lat: ArrayLike, h: ArrayLike
    ) -> tuple[Array, Array, Array, Array]:
        """See :func:`geodetic_to_geocentric`."""
        return geodetic_to_geocentric(lon, lat, h, self._ellipsoid.a, self._ellipsoid.e2)

    def geocentric_to_geodetic(
        self, x: ArrayLike, y: ArrayLike, z: ArrayLike
    ) -> tuple[Array, Array, Array, Array]:
        """See :func:`geocentric_to_geodetic`."""
        return geocentric_to_geodetic(x, y, z, self._ellipsoid.a, self._ellipsoid.e2)

    def __repr__(self) -> str:
        return f"GeocentricConverter({self._ellipsoid.name})"
