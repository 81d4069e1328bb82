"""Ellipsoidal helper functions shared by the conformal projections.

References:
    1. J. P. Snyder, *Map Projections: A Working Manual*, USGS Professional
       Paper 1395, 1987, eqs. 7-7, 14-15, 15-9.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.constants import HALF_PI

PHI2_ITERATIONS = 15


def msfn(sinphi: ArrayLike, cosphi: ArrayLike, e2: float) -> Array:
    """Parallel radius on the unit ellipsoid, ``cos(phi) / sqrt(1 - e² sin² phi)``."""
    return cosphi / jnp.sqrt(1.0 - e2 * sinphi * sinphi)


def tsfn(phi: ArrayLike, sinphi: ArrayLike, e: float) -> Array:
    """Snyder's ``t``: ``tan(pi/4 - phi/2) / ((1 - e sin phi)/(1 + e sin phi))^(e/2)``."""
    con = e * sinphi
    return jnp.tan(0.5 * (HALF_PI - phi)) / jnp.power((1.0 - con) / (1.0 + con), 0.5 * e)


def phi2(ts: ArrayLike, e: float) -> Array:
    """Recover latitude from Snyder's ``t`` (inverse of :func:`tsfn`).

    Runs a fixed number of fixed-point iterations, which converges to
    double precision for every terrestrial eccentricity.
    """
    ts = jnp.asarray(ts)
    half_e = 0.5 * e

    def body(_, phi):
        con = e * jnp.sin(phi)
        return HALF_PI - 2.0 * jnp.arctan(ts * jnp.power((1.0 - con) / (1.0 + con), half_e))

    return jax.lax.fori_loop(0, PHI2_ITERATIONS, body, HALF_PI - 2.0 * jnp.arctan(ts))
