"""Reference ellipsoids.

An :class:`Ellipsoid` is an immutable ``(a, e²)`` pair plus a name.  Two
ellipsoids are compared with :meth:`Ellipsoid.is_equal`, a tolerance-based
predicate: it decides whether a datum conversion can skip the geocentric
round-trip, so numerically indistinguishable ellipsoids such as GRS80 and
WGS84 must compare equal.

References:
    1. NIMA Technical Report TR8350.2, *Department of Defense World Geodetic
       System 1984*.
    2. J. P. Snyder, *Map Projections: A Working Manual*, USGS Professional
       Paper 1395, 1987, Table 1.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from projax.constants import (
    ELLIPSOID_A_TOLERANCE,
    ELLIPSOID_E2_TOLERANCE,
    GRS80_a,
    GRS80_f,
    WGS84_a,
    WGS84_f,
)


@dataclass(frozen=True)
class Ellipsoid:
    """Geometric parameters of a reference ellipsoid.

    Args:
        name: Short identifier (e.g. ``"WGS84"``).
        a: Semi-major (equatorial) axis [m].  Must be positive.
        e2: First eccentricity squared, in ``[0, 1)``.

    Raises:
        ValueError: If *a* or *e2* is out of range.
    """

    name: str
    a: float
    e2: float

    def __post_init__(self) -> None:
        if not (self.a > 0.0 and math.isfinite(self.a)):
            raise ValueError(f"Ellipsoid semi-major axis must be positive, got {self.a}")
        if not (0.0 <= self.e2 < 1.0):
            raise ValueError(
                f"Ellipsoid eccentricity squared must be in [0, 1), got {self.e2}"
            )

    @classmethod
    def from_flattening(cls, name: str, a: float, rf: float) -> Ellipsoid:
        """Build an ellipsoid from its semi-major axis and inverse flattening.

        Args:
            name: Short identifier.
            a: Semi-major axis [m].
            rf: Inverse flattening ``1/f``.  ``0`` or ``inf`` gives a sphere.

        Returns:
            Ellipsoid: The ellipsoid.
        """
        if rf == 0.0 or math.isinf(rf):
            return cls(name, a, 0.0)
        f = 1.0 / rf
        return cls(name, a, f * (2.0 - f))

    @classmethod
    def from_axes(cls, name: str, a: float, b: float) -> Ellipsoid:
        """Build an ellipsoid from its semi-major and semi-minor axes.

        Args:
            name: Short identifier.
            a: Semi-major axis [m].
            b: Semi-minor axis [m].

        Returns:
            Ellipsoid: The ellipsoid.
        """
        return cls(name, a, 1.0 - (b * b) / (a * a))

    @property
    def b(self) -> float:
        """Semi-minor (polar) axis [m]."""
        return self.a * math.sqrt(1.0 - self.e2)

    @property
    def f(self) -> float:
        """Flattening ``(a - b) / a``."""
        return 1.0 - math.sqrt(1.0 - self.e2)

    @property
    def e(self) -> float:
        """First eccentricity."""
        return math.sqrt(self.e2)

    @property
    def ep2(self) -> float:
        """Second eccentricity squared ``e² / (1 - e²)``."""
        return self.e2 / (1.0 - self.e2)

    @property
    def is_sphere(self) -> bool:
        return self.e2 == 0.0

    def is_equal(
        self,
        other: Ellipsoid,
        a_tolerance: float = ELLIPSOID_A_TOLERANCE,
        e2_tolerance: float = ELLIPSOID_E2_TOLERANCE,
    ) -> bool:
        """Approximate equality of two ellipsoids.

        Names are ignored; only the geometry is compared.

        Args:
            other: Ellipsoid to compare against.
            a_tolerance: Maximum semi-major axis difference [m].
            e2_tolerance: Maximum eccentricity-squared difference.

        Returns:
            ``True`` if ``|a - other.a| < a_tolerance`` and
            ``|e2 - other.e2| < e2_tolerance``.

        Examples:
            ```python
            from projax.ellipsoid import GRS80, WGS84
            WGS84.is_equal(GRS80)  # True
            ```
        """
        return (
            abs(self.a - other.a) < a_tolerance
            and abs(self.e2 - other.e2) < e2_tolerance
        )


WGS84 = Ellipsoid.from_flattening("WGS84", WGS84_a, 1.0 / WGS84_f)
GRS80 = Ellipsoid.from_flattening("GRS80", GRS80_a, 1.0 / GRS80_f)
WGS72 = Ellipsoid.from_flattening("WGS72", 6378135.0, 298.26)
CLARKE_1866 = Ellipsoid.from_axes("clrk66", 6378206.4, 6356583.8)
CLARKE_1880 = Ellipsoid.from_flattening("clrk80", 6378249.145, 293.4663)
BESSEL = Ellipsoid.from_flattening("bessel", 6377397.155, 299.1528128)
AIRY = Ellipsoid.from_axes("airy", 6377563.396, 6356256.910)
MOD_AIRY = Ellipsoid.from_axes("mod_airy", 6377340.189, 6356034.446)
INTERNATIONAL = Ellipsoid.from_flattening("intl", 6378388.0, 297.0)
KRASSOVSKY = Ellipsoid.from_flattening("krass", 6378245.0, 298.3)
SPHERE = Ellipsoid("sphere", 6370997.0, 0.0)

ELLIPSOIDS: dict[str, Ellipsoid] = {
    e.name: e
    for e in (
        WGS84,
        GRS80,
        WGS72,
        CLARKE_1866,
        CLARKE_1880,
        BESSEL,
        AIRY,
        MOD_AIRY,
        INTERNATIONAL,
        KRASSOVSKY,
        SPHERE,
    )
}
"""Named ellipsoids keyed by their short identifier."""
