"""Mutable coordinate buffer passed through the transform pipeline.

A :class:`ProjCoordinate` holds ``x``, ``y`` and ``z`` ordinates whose
meaning depends on where it sits in the pipeline: projected units, degrees
or radians, heights in metres.  ``z`` defaults to NaN, meaning "no height";
conversions that do not use height must treat NaN as absent, not zero.

Ordinates may be Python floats (a single point) or arrays of identical
shape (a batch of points).
"""

from __future__ import annotations

import math

from jax.typing import ArrayLike


class ProjCoordinate:
    """A 3-ordinate coordinate ``(x, y, z)`` with an optional height.

    Args:
        x: First ordinate.
        y: Second ordinate.
        z: Third ordinate.  ``NaN`` (the default) marks the height as absent.

    Examples:
        ```python
        from projax import ProjCoordinate
        p = ProjCoordinate(3.0, 45.0)
        p.z  # nan, no height
        ```
    """

    __slots__ = ("x", "y", "z")

    def __init__(
        self,
        x: ArrayLike = math.nan,
        y: ArrayLike = math.nan,
        z: ArrayLike = math.nan,
    ) -> None:
        self.x = x
        self.y = y
        self.z = z

    def set_value(self, other: ProjCoordinate) -> None:
        """Copy all three ordinates from *other* into this coordinate."""
        self.x = other.x
        self.y = other.y
        self.z = other.z

    def __repr__(self) -> str:
        return f"ProjCoordinate(x={self.x!r}, y={self.y!r}, z={self.z!r})"
