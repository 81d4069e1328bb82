"""Per-point transform pipeline.

:func:`create_pipeline` turns a :class:`TransformStrategy` into a pure
function ``pipeline(x, y, z) -> (x, y, z, status)`` built from JAX
kernels.  Stage flags are captured as Python booleans and resolved while
the function is traced, so a jitted pipeline contains only the stages the
strategy selected.

Stages run strictly in this order:

1. source axis order to east/north/up
2. inverse projection to geographic radians
3. source prime meridian to Greenwich
4. clear the height
5. datum conversion (source grid shift, geocentric Helmert pivot, target
   inverse grid shift)
6. Greenwich to the target prime meridian
7. forward projection
8. east/north/up to the target axis order

Between stages 2 and 7 coordinates are longitude/latitude in radians
relative to Greenwich and heights in metres.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.config import get_dtype
from projax.datum import TransformKind
from projax.errors import UnsupportedDatumPathError
from projax.transform._strategy import TransformStrategy


class PipelineStatus(NamedTuple):
    """Per-stage success masks returned by a pipeline.

    Each field is a boolean array (``True`` where the stage succeeded) or
    ``None`` when the stage did not run.  Fields are in pipeline order.

    Attributes:
        inverse_projection: Source inverse projection stayed in its domain.
        source_grid: Source grid covered the point.
        geocentric_domain: Latitude was valid for geocentric conversion.
        geocentric_convergence: Geodetic latitude recovery converged.
        target_grid: Target grid covered the point.
        forward_projection: Target forward projection stayed in its domain.
    """

    inverse_projection: Array | None = None
    source_grid: Array | None = None
    geocentric_domain: Array | None = None
    geocentric_convergence: Array | None = None
    target_grid: Array | None = None
    forward_projection: Array | None = None


Pipeline = Callable[[ArrayLike, ArrayLike, ArrayLike], tuple[Array, Array, Array, PipelineStatus]]


def _check_datum_path(strategy: TransformStrategy) -> None:
    src_datum = strategy.source.datum
    tgt_datum = strategy.target.datum
    has_pivot = src_datum.has_transform_to_wgs84 or tgt_datum.has_transform_to_wgs84
    if not has_pivot and TransformKind.UNKNOWN in (src_datum.kind, tgt_datum.kind):
        raise UnsupportedDatumPathError(
            f"No datum path between '{strategy.source.name}' ({src_datum.kind.name}) "
            f"and '{strategy.target.name}' ({tgt_datum.kind.name})",
            stage="datum transform",
            crs=strategy.source.name,
        )
    if strategy.transform_via_geocentric and (
        strategy.source_converter is None or strategy.target_converter is None
    ):
        raise UnsupportedDatumPathError(
            "Geocentric datum conversion requested without geocentric converters",
            stage="datum transform",
            crs=strategy.source.name,
        )


def create_pipeline(strategy: TransformStrategy) -> Pipeline:
    """Build the per-point pipeline function for a strategy.

    The returned function accepts scalars or equally shaped arrays, never
    raises on bad points, and reports failures through its
    :class:`PipelineStatus`.  It is safe to wrap in ``jax.jit``.

    Args:
        strategy: Stage selection from
            :func:`~projax.transform.compute_strategy`.

    Returns:
        A callable ``pipeline(x, y, z) -> (x, y, z, status)``.

    Raises:
        UnsupportedDatumPathError: If the strategy requests a datum
            conversion that has no path between the two datums.

    Examples:
        ```python
        from projax import geographic_crs, utm_crs
        from projax.transform import compute_strategy, create_pipeline
        pipeline = create_pipeline(compute_strategy(geographic_crs(), utm_crs(31)))
        x, y, z, status = pipeline(3.0, 45.0, float("nan"))
        ```
    """
    if strategy.do_datum_transform:
        _check_datum_path(strategy)

    # Capture static configuration for the closure.
    _src_proj = strategy.source.projection
    _tgt_proj = strategy.target.projection
    _src_datum = strategy.source.datum
    _tgt_datum = strategy.target.datum

    _do_inverse = strategy.do_inverse_projection
    _do_forward = strategy.do_forward_projection
    _do_datum = strategy.do_datum_transform
    _via_geocentric = strategy.transform_via_geocentric
    _src_conv = strategy.source_converter
    _tgt_conv = strategy.target_converter

    _src_grid = _do_datum and _src_datum.kind is TransformKind.GRIDSHIFT
    _tgt_grid = _do_datum and _tgt_datum.kind is TransformKind.GRIDSHIFT
    _src_helmert = _src_datum.has_transform_to_wgs84
    _tgt_helmert = _tgt_datum.has_transform_to_wgs84

    def pipeline(
        x: ArrayLike, y: ArrayLike, z: ArrayLike
    ) -> tuple[Array, Array, Array, PipelineStatus]:
        dtype = get_dtype()
        x, y, z = jnp.broadcast_arrays(
            jnp.asarray(x, dtype=dtype),
            jnp.asarray(y, dtype=dtype),
            jnp.asarray(z, dtype=dtype),
        )
        status = {}

        x, y, z = _src_proj.axis_order.to_enu(x, y, z)

        if _do_inverse:
            x, y, status["inverse_projection"] = _src_proj.inverse_project_radians(x, y)

        x = _src_proj.prime_meridian.to_greenwich(x)

        # Heights are not carried through an inverse projection
        z = jnp.full_like(x, jnp.nan)

        if _do_datum:
            if _src_grid:
                x, y, status["source_grid"] = _src_datum.shift(x, y)

            if _via_geocentric:
                gx, gy, gz, status["geocentric_domain"] = _src_conv.geodetic_to_geocentric(
                    x, y, z
                )
                if _src_helmert:
                    gx, gy, gz = _src_datum.geocentric_to_wgs84(gx, gy, gz)
                if _tgt_helmert:
                    gx, gy, gz = _tgt_datum.geocentric_from_wgs84(gx, gy, gz)
                x, y, z, status["geocentric_convergence"] = _tgt_conv.geocentric_to_geodetic(
                    gx, gy, gz
                )

            if _tgt_grid:
                x, y, status["target_grid"] = _tgt_datum.inverse_shift(x, y)

        x = _tgt_proj.prime_meridian.from_greenwich(x)

        if _do_forward:
            x, y, status["forward_projection"] = _tgt_proj.project_radians(x, y)

        x, y, z = _tgt_proj.axis_order.from_enu(x, y, z)
        return x, y, z, PipelineStatus(**status)

    return pipeline
