"""Type definitions for datum transformations.

- :class:`TransformKind`: the closed set of ways a datum relates to WGS84.
- :class:`HelmertParams`: 3- or 7-parameter similarity transform from a
  datum's geocentric frame to WGS84, in the customary units (metres,
  arc-seconds, parts per million).
"""

from __future__ import annotations

import enum
from typing import NamedTuple

import numpy as np

from projax.constants import AS2RAD, PPM


class TransformKind(enum.Enum):
    """How a datum converts to WGS84.

    Attributes:
        NONE: The datum *is* WGS84 (or indistinguishable from it); no
            conversion is needed.
        THREE_PARAM: Geocentric translation.
        SEVEN_PARAM: Geocentric translation, small-angle rotation and scale.
        GRIDSHIFT: Tabulated horizontal corrections by location.
        UNKNOWN: No path to WGS84 is known.
    """

    NONE = "none"
    THREE_PARAM = "3param"
    SEVEN_PARAM = "7param"
    GRIDSHIFT = "gridshift"
    UNKNOWN = "unknown"

    @property
    def is_helmert(self) -> bool:
        """``True`` for the kinds that carry Helmert parameters to WGS84."""
        return self in (TransformKind.THREE_PARAM, TransformKind.SEVEN_PARAM)


class HelmertParams(NamedTuple):
    """Helmert transform parameters from a datum to WGS84.

    Position-vector rotation convention (as in the PROJ ``+towgs84``
    parameter).

    Attributes:
        tx: Translation along X [m].
        ty: Translation along Y [m].
        tz: Translation along Z [m].
        rx: Rotation about X [arcsec].
        ry: Rotation about Y [arcsec].
        rz: Rotation about Z [arcsec].
        ds: Scale difference [ppm].
    """

    tx: float
    ty: float
    tz: float
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0
    ds: float = 0.0

    @property
    def is_identity(self) -> bool:
        return all(v == 0.0 for v in self)

    @property
    def is_translation_only(self) -> bool:
        return self.rx == 0.0 and self.ry == 0.0 and self.rz == 0.0 and self.ds == 0.0

    @property
    def translation(self) -> tuple[float, float, float]:
        """Translation vector [m]."""
        return (self.tx, self.ty, self.tz)

    @property
    def rotation_radians(self) -> tuple[float, float, float]:
        """Rotations converted to radians."""
        return (self.rx * AS2RAD, self.ry * AS2RAD, self.rz * AS2RAD)

    @property
    def scale(self) -> float:
        """Scale multiplier ``1 + ds * 1e-6``."""
        return 1.0 + self.ds * PPM

    def rotation_matrix(self) -> list[list[float]]:
        """Linearised small-angle rotation matrix (position-vector convention).

        Returns:
            Row-major 3x3 matrix ``R`` with ``R @ [X, Y, Z]`` rotating a
            datum geocentric vector into the WGS84 frame.
        """
        rx, ry, rz = self.rotation_radians
        return [
            [1.0, -rz, ry],
            [rz, 1.0, -rx],
            [-ry, rx, 1.0],
        ]

    def inverse_rotation_matrix(self) -> list[list[float]]:
        """Exact inverse of :meth:`rotation_matrix`.

        Returns:
            Row-major 3x3 matrix as Python floats.
        """
        return np.linalg.inv(np.array(self.rotation_matrix(), dtype=np.float64)).tolist()

    @classmethod
    def from_sequence(cls, values) -> HelmertParams:
        """Build from a ``+towgs84``-style sequence of 3 or 7 numbers.

        Raises:
            ValueError: If the sequence does not have 3 or 7 elements.
        """
        values = [float(v) for v in values]
        if len(values) not in (3, 7):
            raise ValueError(
                f"Helmert parameters must have 3 or 7 values, got {len(values)}"
            )
        return cls(*values)
