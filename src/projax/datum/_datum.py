"""Geodetic datums.

A :class:`Datum` pairs an ellipsoid with a description of how its
coordinates relate to WGS84: nothing to do (``NONE``), a Helmert transform
(``THREE_PARAM``/``SEVEN_PARAM``), a set of correction grids
(``GRIDSHIFT``), or no known relation (``UNKNOWN``).  Datums are immutable
and validated on construction.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from jax import Array
from jax.typing import ArrayLike

from projax.datum._helmert import helmert_from_wgs84, helmert_to_wgs84
from projax.datum._types import HelmertParams, TransformKind
from projax.ellipsoid import Ellipsoid
from projax.gridshift import GridShiftSet, apply_inverse_shift, apply_shift


@dataclass(frozen=True, eq=False)
class Datum:
    """A geodetic datum: an ellipsoid plus its relation to WGS84.

    Prefer the alternate constructors :meth:`from_towgs84`,
    :meth:`with_grids` and :meth:`unknown`, which pick the kind for you.

    Args:
        code: Short identifier (e.g. ``"WGS84"``).
        ellipsoid: Reference ellipsoid.
        kind: How the datum converts to WGS84.
        helmert: Helmert parameters; required for ``THREE_PARAM`` and
            ``SEVEN_PARAM`` and forbidden otherwise.  All-zero parameters
            reduce the kind to ``NONE`` and zero rotations and scale reduce
            it to ``THREE_PARAM``.
        grids: Correction grids; required for ``GRIDSHIFT`` and forbidden
            otherwise.
        name: Descriptive name.

    Raises:
        ValueError: If *kind* and the supplied parameters disagree.
    """

    code: str
    ellipsoid: Ellipsoid
    kind: TransformKind = TransformKind.NONE
    helmert: HelmertParams | None = None
    grids: GridShiftSet | None = None
    name: str = ""

    def __post_init__(self) -> None:
        if self.kind.is_helmert:
            if self.helmert is None:
                raise ValueError(f"Datum '{self.code}' of kind {self.kind.name} requires Helmert parameters")
            if self.kind is TransformKind.THREE_PARAM and not self.helmert.is_translation_only:
                raise ValueError(
                    f"Datum '{self.code}' is THREE_PARAM but has rotation or scale parameters"
                )
            # The kind follows the parameters, not the declaration
            if self.helmert.is_identity:
                object.__setattr__(self, "kind", TransformKind.NONE)
                object.__setattr__(self, "helmert", None)
            elif self.helmert.is_translation_only:
                object.__setattr__(self, "kind", TransformKind.THREE_PARAM)
        elif self.helmert is not None:
            raise ValueError(f"Datum '{self.code}' of kind {self.kind.name} cannot carry Helmert parameters")

        if self.kind is TransformKind.GRIDSHIFT:
            if self.grids is None:
                raise ValueError(f"Datum '{self.code}' of kind GRIDSHIFT requires grids")
        elif self.grids is not None:
            raise ValueError(f"Datum '{self.code}' of kind {self.kind.name} cannot carry grids")

    @classmethod
    def from_towgs84(
        cls,
        code: str,
        ellipsoid: Ellipsoid,
        params: Sequence[float] | None = None,
        name: str = "",
    ) -> Datum:
        """Build a datum from ``+towgs84``-style Helmert parameters.

        An absent or all-zero parameter vector collapses to kind ``NONE``;
        seven parameters whose rotations and scale are zero collapse to
        ``THREE_PARAM``.

        Args:
            code: Short identifier.
            ellipsoid: Reference ellipsoid.
            params: 3 or 7 values ``tx, ty, tz[, rx, ry, rz, ds]`` in metres,
                arc-seconds and ppm.
            name: Descriptive name.

        Returns:
            Datum: The datum.

        Raises:
            ValueError: If *params* does not have 3 or 7 values.

        Examples:
            ```python
            from projax.datum import Datum, TransformKind
            from projax.ellipsoid import INTERNATIONAL
            ed50 = Datum.from_towgs84("ED50", INTERNATIONAL, [-87, -98, -121])
            ed50.kind is TransformKind.THREE_PARAM
            ```
        """
        if params is None:
            return cls(code, ellipsoid, TransformKind.NONE, name=name)
        helmert = HelmertParams.from_sequence(params)
        if helmert.is_identity:
            return cls(code, ellipsoid, TransformKind.NONE, name=name)
        kind = TransformKind.THREE_PARAM if helmert.is_translation_only else TransformKind.SEVEN_PARAM
        return cls(code, ellipsoid, kind, helmert=helmert, name=name)

    @classmethod
    def with_grids(
        cls,
        code: str,
        ellipsoid: Ellipsoid,
        grids: GridShiftSet,
        name: str = "",
    ) -> Datum:
        """Build a datum converted to WGS84 by grid shift."""
        return cls(code, ellipsoid, TransformKind.GRIDSHIFT, grids=grids, name=name)

    @classmethod
    def unknown(cls, code: str, ellipsoid: Ellipsoid, name: str = "") -> Datum:
        """Build a datum with no known relation to WGS84."""
        return cls(code, ellipsoid, TransformKind.UNKNOWN, name=name)

    @property
    def has_transform_to_wgs84(self) -> bool:
        """``True`` if the datum carries a Helmert transform to WGS84."""
        return self.kind.is_helmert

    def is_equal(self, other: Datum) -> bool:
        """Parameter equality of two datums.

        Datums are equal when they share the transform kind, their
        ellipsoids are equal under :meth:`Ellipsoid.is_equal`, their
        Helmert parameters are identical, and their grids have the same
        names.  Codes and descriptive names are ignored.

        Args:
            other: Datum to compare against.

        Returns:
            ``True`` if converting between the two datums is a no-op.
        """
        if self is other:
            return True
        if self.kind is not other.kind:
            return False
        if not self.ellipsoid.is_equal(other.ellipsoid):
            return False
        if self.kind.is_helmert and tuple(self.helmert) != tuple(other.helmert):
            return False
        if self.kind is TransformKind.GRIDSHIFT and self.grids.names != other.grids.names:
            return False
        return True

    def shift(self, lon: ArrayLike, lat: ArrayLike) -> tuple[Array, Array, Array]:
        """Apply the forward grid correction (datum to WGS84 frame).

        Returns:
            Tuple ``(lon, lat, covered)``; see
            :func:`~projax.gridshift.apply_shift`.
        """
        return apply_shift(self.grids, lon, lat)

    def inverse_shift(self, lon: ArrayLike, lat: ArrayLike) -> tuple[Array, Array, Array]:
        """Apply the inverse grid correction (WGS84 frame to datum).

        Returns:
            Tuple ``(lon, lat, covered)``; see
            :func:`~projax.gridshift.apply_inverse_shift`.
        """
        return apply_inverse_shift(self.grids, lon, lat)

    def geocentric_to_wgs84(
        self, x: ArrayLike, y: ArrayLike, z: ArrayLike
    ) -> tuple[Array, Array, Array]:
        """Move geocentric coordinates from this datum into WGS84."""
        return helmert_to_wgs84(x, y, z, self.helmert)

    def geocentric_from_wgs84(
        self, x: ArrayLike, y: ArrayLike, z: ArrayLike
    ) -> tuple[Array, Array, Array]:
        """Move WGS84 geocentric coordinates into this datum."""
        return helmert_from_wgs84(x, y, z, self.helmert)

    def __repr__(self) -> str:
        return f"Datum({self.code!r}, {self.ellipsoid.name}, {self.kind.name})"
