"""Angle helpers shared by the projection and grid-shift kernels.

``to_radians``/``from_radians`` wrap the ``use_degrees`` convention;
``normalize_longitude`` wraps longitudes into ``[-pi, pi]`` without
touching values already in range, so that round trips stay bit-exact.
"""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.constants import PI, TWO_PI


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle to radians if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle value.
        use_degrees (bool): If ``True``, treat ``angle`` as degrees and convert.

    Returns:
        Angle in radians.
    """
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle from radians to degrees if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle in radians.
        use_degrees (bool): If ``True``, convert to degrees.

    Returns:
        Angle in radians or degrees.
    """
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def normalize_longitude(lon: ArrayLike) -> Array:
    """Wrap a longitude into ``[-pi, pi]``.

    Args:
        lon (ArrayLike): Longitude in radians.

    Returns:
        Longitude in radians, unchanged if already within ``[-pi, pi]``.
    """
    lon = jnp.asarray(lon)
    wrapped = jnp.mod(lon + PI, TWO_PI) - PI
    return jnp.where(jnp.abs(lon) <= PI, lon, wrapped)
