"""Coordinate transforms between two CRS.

A :class:`CoordinateTransform` is built once per (source, target) pair and
then applied repeatedly.  Construction computes the strategy and compiles
the pipeline; each call runs the pipeline, checks its status masks in stage
order and raises the first failure.  Transforms hold no mutable state and
may be shared between threads.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from projax.config import get_dtype
from projax.coordinate import ProjCoordinate
from projax.crs import CoordinateReferenceSystem
from projax.errors import ConvergenceError, GridCoverageError, ProjectionDomainError
from projax.transform._pipeline import PipelineStatus, create_pipeline
from projax.transform._strategy import TransformStrategy, compute_strategy

# Status field -> (stage description, error type, side whose CRS is blamed)
_STAGE_ERRORS = {
    "inverse_projection": ("inverse projection", ProjectionDomainError, "source"),
    "source_grid": ("source grid shift", GridCoverageError, "source"),
    "geocentric_domain": ("geodetic to geocentric conversion", ProjectionDomainError, "source"),
    "geocentric_convergence": ("geocentric to geodetic conversion", ConvergenceError, "target"),
    "target_grid": ("target grid shift", GridCoverageError, "target"),
    "forward_projection": ("forward projection", ProjectionDomainError, "target"),
}


class CoordinateTransform:
    """Transform coordinates from a source CRS to a target CRS.

    Args:
        source: Source CRS.
        target: Target CRS.
        jit: Compile the pipeline with ``jax.jit``.  Defaults to ``True``.

    Raises:
        TypeError: If *source* or *target* is not a
            :class:`~projax.CoordinateReferenceSystem`.
        UnsupportedDatumPathError: If the datums cannot be related.

    Examples:
        ```python
        from projax import CoordinateTransform, ProjCoordinate, geographic_crs, utm_crs
        t = CoordinateTransform(geographic_crs(), utm_crs(31))
        p = t.transform(ProjCoordinate(3.0, 45.0))
        p.x, p.y  # (500000.0, 4982950.4...)
        ```
    """

    __slots__ = ("_strategy", "_pipeline")

    def __init__(
        self,
        source: CoordinateReferenceSystem,
        target: CoordinateReferenceSystem,
        *,
        jit: bool = True,
    ) -> None:
        for role, crs in (("source", source), ("target", target)):
            if not isinstance(crs, CoordinateReferenceSystem):
                raise TypeError(
                    f"{role} must be a CoordinateReferenceSystem, got {type(crs).__name__}"
                )
        self._strategy = compute_strategy(source, target)
        pipeline = create_pipeline(self._strategy)
        self._pipeline = jax.jit(pipeline) if jit else pipeline

    @property
    def source_crs(self) -> CoordinateReferenceSystem:
        return self._strategy.source

    @property
    def target_crs(self) -> CoordinateReferenceSystem:
        return self._strategy.target

    @property
    def strategy(self) -> TransformStrategy:
        """Stage selection computed at construction."""
        return self._strategy

    def _raise_on_failure(self, status: PipelineStatus) -> None:
        for field in PipelineStatus._fields:
            ok = getattr(status, field)
            if ok is None:
                continue
            n_failed = int(jnp.size(ok) - jnp.count_nonzero(ok))
            if n_failed:
                stage, error_cls, side = _STAGE_ERRORS[field]
                crs = self.source_crs if side == "source" else self.target_crs
                raise error_cls(
                    f"{stage} failed for {n_failed} point(s) in CRS '{crs.name}'",
                    stage=stage,
                    crs=crs.name,
                    count=n_failed,
                )

    def _run(
        self, x: ArrayLike, y: ArrayLike, z: ArrayLike
    ) -> tuple[Array, Array, Array]:
        x, y, z, status = self._pipeline(x, y, z)
        self._raise_on_failure(status)
        return x, y, z

    def transform(
        self, src: ProjCoordinate, tgt: ProjCoordinate | None = None
    ) -> ProjCoordinate:
        """Transform a coordinate.

        *src* is read in full before *tgt* is written, so both may be the
        same object.  On failure *tgt* is left untouched.

        Args:
            src: Coordinate in the source CRS.  Ordinates may be floats or
                equally shaped arrays.
            tgt: Coordinate to receive the result.  A new one is created
                when ``None``.

        Returns:
            ProjCoordinate: *tgt*, holding the coordinate in the target CRS.
            Scalar input gives float ordinates; array input gives arrays.

        Raises:
            ProjectionDomainError: A projection could not map a point.
            GridCoverageError: A grid shift had no data at a point.
            ConvergenceError: Geodetic latitude recovery did not converge.
        """
        scalar = all(jnp.ndim(v) == 0 for v in (src.x, src.y, src.z))
        x, y, z = self._run(src.x, src.y, src.z)
        if scalar:
            x, y, z = float(x), float(y), float(z)
        if tgt is None:
            tgt = ProjCoordinate()
        tgt.set_value(ProjCoordinate(x, y, z))
        return tgt

    def transform_array(self, points: ArrayLike) -> Array:
        """Transform an array of points.

        Args:
            points: Array of shape ``(..., 2)`` or ``(..., 3)``.  A missing
                third column means no height.

        Returns:
            Array with the same shape as *points*.

        Raises:
            ValueError: If the trailing dimension is not 2 or 3.
            ProjectionDomainError: A projection could not map a point.
            GridCoverageError: A grid shift had no data at a point.
            ConvergenceError: Geodetic latitude recovery did not converge.

        Examples:
            ```python
            import jax.numpy as jnp
            from projax import create_transform, geographic_crs, utm_crs
            t = create_transform(geographic_crs(), utm_crs(31))
            xy = t.transform_array(jnp.array([[3.0, 45.0], [2.5, 44.0]]))
            ```
        """
        points = jnp.asarray(points, dtype=get_dtype())
        if points.ndim == 0 or points.shape[-1] not in (2, 3):
            raise ValueError(
                f"points must have shape (..., 2) or (..., 3), got {points.shape}"
            )
        x = points[..., 0]
        y = points[..., 1]
        z = points[..., 2] if points.shape[-1] == 3 else jnp.full_like(x, jnp.nan)

        x, y, z = self._run(x, y, z)
        if points.shape[-1] == 2:
            return jnp.stack([x, y], axis=-1)
        return jnp.stack([x, y, z], axis=-1)

    def __repr__(self) -> str:
        return f"CoordinateTransform({self.source_crs.name!r} -> {self.target_crs.name!r})"


def create_transform(
    source: CoordinateReferenceSystem,
    target: CoordinateReferenceSystem,
    *,
    jit: bool = True,
) -> CoordinateTransform:
    """Build a transform from *source* to *target*.

    Args:
        source: Source CRS.
        target: Target CRS.
        jit: Compile the pipeline with ``jax.jit``.  Defaults to ``True``.

    Returns:
        CoordinateTransform: The transform.
    """
    return CoordinateTransform(source, target, jit=jit)
