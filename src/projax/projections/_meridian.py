"""Prime meridians.

A :class:`PrimeMeridian` is the longitude, relative to Greenwich, from which
a CRS measures its longitudes.  The transform pipeline shifts longitudes to
Greenwich after the inverse projection and back before the forward
projection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from jax.typing import ArrayLike


@dataclass(frozen=True)
class PrimeMeridian:
    """A named prime meridian.

    Args:
        name: Identifier (e.g. ``"paris"``).
        longitude_deg: Longitude east of Greenwich [deg].
    """

    name: str
    longitude_deg: float

    @property
    def longitude(self) -> float:
        """Longitude east of Greenwich [rad]."""
        return math.radians(self.longitude_deg)

    @property
    def is_greenwich(self) -> bool:
        return self.longitude_deg == 0.0

    def to_greenwich(self, lon: ArrayLike) -> ArrayLike:
        """Convert a longitude relative to this meridian to Greenwich [rad]."""
        if self.is_greenwich:
            return lon
        return lon + self.longitude

    def from_greenwich(self, lon: ArrayLike) -> ArrayLike:
        """Convert a Greenwich longitude to one relative to this meridian [rad]."""
        if self.is_greenwich:
            return lon
        return lon - self.longitude

    @classmethod
    def for_name(cls, name: str) -> PrimeMeridian:
        """Look up a named prime meridian.

        Args:
            name: Case-insensitive meridian name.

        Returns:
            PrimeMeridian: The meridian.

        Raises:
            ValueError: If *name* is not a known meridian.
        """
        try:
            return PRIME_MERIDIANS[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown prime meridian '{name}'. Known: {', '.join(PRIME_MERIDIANS)}"
            ) from None


GREENWICH = PrimeMeridian("greenwich", 0.0)

PRIME_MERIDIANS: dict[str, PrimeMeridian] = {
    pm.name: pm
    for pm in (
        GREENWICH,
        PrimeMeridian("lisbon", -9.131906111111),
        PrimeMeridian("paris", 2.337229166667),
        PrimeMeridian("bogota", -74.080916666667),
        PrimeMeridian("madrid", -3.687938888889),
        PrimeMeridian("rome", 12.452333333333),
        PrimeMeridian("bern", 7.439583333333),
        PrimeMeridian("jakarta", 106.807719444444),
        PrimeMeridian("ferro", -17.666666666667),
        PrimeMeridian("brussels", 4.367975),
        PrimeMeridian("stockholm", 18.058277777778),
        PrimeMeridian("athens", 23.7163375),
        PrimeMeridian("oslo", 10.722916666667),
    )
}
"""Named prime meridians keyed by lower-case name."""
