"""Helmert similarity transforms between geocentric frames.

The forward transform takes a datum's geocentric coordinates into the
WGS84 geocentric frame::

    [X', Y', Z'] = M * R(rx, ry, rz) @ [X, Y, Z] + [tx, ty, tz]

with ``M = 1 + ds * 1e-6`` and ``R`` the linearised small-angle rotation
matrix.  The 3-parameter case is a pure translation.  The reverse direction
uses the exact algebraic inverse (subtract translation, divide by scale,
multiply by ``R^-1``), so a forward/inverse round trip is exact up to
floating-point rounding.

Parameter unit conversion happens in Python at trace time; the kernels only
see floats, so they run unchanged under ``jax.jit``.

References:
    1. IOGP Publication 373-7-2, *Geomatics Guidance Note 7, part 2*,
       Sec. 2.4.3.
"""

from __future__ import annotations

from jax import Array
from jax.typing import ArrayLike

from projax.datum._types import HelmertParams


def helmert_to_wgs84(
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    params: HelmertParams,
) -> tuple[Array, Array, Array]:
    """Transform datum geocentric coordinates into the WGS84 frame.

    Args:
        x: Geocentric X [m].
        y: Geocentric Y [m].
        z: Geocentric Z [m].
        params: Helmert parameters of the datum.

    Returns:
        Tuple ``(X, Y, Z)`` in the WGS84 geocentric frame [m].

    Examples:
        ```python
        from projax.datum import HelmertParams, helmert_to_wgs84
        p = HelmertParams(446.448, -125.157, 542.06, 0.15, 0.247, 0.842, -20.489)
        x, y, z = helmert_to_wgs84(3909833.0, -147097.0, 5020322.0, p)
        ```
    """
    tx, ty, tz = params.translation
    if params.is_translation_only:
        return x + tx, y + ty, z + tz

    m = params.scale
    (r00, r01, r02), (r10, r11, r12), (r20, r21, r22) = params.rotation_matrix()

    x_out = m * (r00 * x + r01 * y + r02 * z) + tx
    y_out = m * (r10 * x + r11 * y + r12 * z) + ty
    z_out = m * (r20 * x + r21 * y + r22 * z) + tz
    return x_out, y_out, z_out


def helmert_from_wgs84(
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    params: HelmertParams,
) -> tuple[Array, Array, Array]:
    """Transform WGS84 geocentric coordinates into the datum frame.

    Exact inverse of :func:`helmert_to_wgs84`.

    Args:
        x: WGS84 geocentric X [m].
        y: WGS84 geocentric Y [m].
        z: WGS84 geocentric Z [m].
        params: Helmert parameters of the datum.

    Returns:
        Tuple ``(X, Y, Z)`` in the datum geocentric frame [m].
    """
    tx, ty, tz = params.translation
    if params.is_translation_only:
        return x - tx, y - ty, z - tz

    m = params.scale
    (q00, q01, q02), (q10, q11, q12), (q20, q21, q22) = params.inverse_rotation_matrix()

    x_t = (x - tx) / m
    y_t = (y - ty) / m
    z_t = (z - tz) / m

    x_out = q00 * x_t + q01 * y_t + q02 * z_t
    y_out = q10 * x_t + q11 * y_t + q12 * z_t
    z_out = q20 * x_t + q21 * y_t + q22 * z_t
    return x_out, y_out, z_out
