"""Exception types raised by the transform pipeline.

Kernels never raise: they return boolean failure masks so that they remain
traceable under ``jax.jit``.  :class:`~projax.CoordinateTransform` inspects
those masks in pipeline order and raises the first matching error below.
"""

from __future__ import annotations


class ProjaxError(Exception):
    """Base class for coordinate transformation failures.

    Args:
        message: Human-readable description.
        stage: Pipeline stage that failed (e.g. ``"inverse projection"``).
        crs: Name of the CRS whose collaborator failed.
        count: Number of points that failed in the call.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        crs: str | None = None,
        count: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.crs = crs
        self.count = count


class ProjectionDomainError(ProjaxError, ValueError):
    """A projection formula cannot map the point (e.g. Mercator at a pole)."""


class GridCoverageError(ProjaxError, ValueError):
    """A grid-shift lookup has no data at the point's location."""


class ConvergenceError(ProjaxError, RuntimeError):
    """Iterative geocentric-to-geodetic recovery did not reach tolerance."""


class UnsupportedDatumPathError(ProjaxError, RuntimeError):
    """A datum conversion was requested with no path between the datums.

    Indicates an inconsistent :class:`~projax.transform.TransformStrategy`;
    :func:`~projax.transform.compute_strategy` never produces one.
    """
