"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
throughout projax.  The default is ``jnp.float64``: datum shifts and
projected coordinates are resolved to the millimetre on values of order
``1e6``-``1e7`` metres, which single precision cannot represent.  Importing
this module therefore enables JAX's 64-bit mode (``jax_enable_x64``).

Call ``set_dtype`` **before** building any :class:`~projax.CoordinateTransform`
with ``jit=True``.  Under JIT, ``get_dtype()`` runs during tracing and its
result is baked into the compiled program.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for projax.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_convergence_tolerance() -> float:
    """Return the dtype-adaptive angular tolerance for iterative solvers.

    Used by the geocentric-to-geodetic latitude recovery.  The tolerance
    scales with the precision of the configured float dtype:

    - ``float64``: 1e-12 rad
    - ``float32``: 1e-6 rad

    Returns:
        float: Convergence tolerance in radians.
    """
    if _dtype == jnp.float64:
        return 1e-12
    return 1e-6
