"""Coordinate reference systems.

A :class:`CoordinateReferenceSystem` combines a datum with a projection and
is the endpoint of a :class:`~projax.CoordinateTransform`.  The sentinel
:data:`CS_GEO` stands for "plain geographic radians on WGS84": using it as
source or target skips the corresponding projection stage entirely.
"""

from __future__ import annotations

from dataclasses import dataclass

from projax.datum import WGS84, Datum
from projax.ellipsoid import Ellipsoid
from projax.projections import LongLatProjection, Projection, TransverseMercatorProjection


@dataclass(frozen=True, eq=False)
class CoordinateReferenceSystem:
    """A projection on a datum.

    Args:
        name: Identifier used in error messages and logs.
        datum: Geodetic datum.
        projection: Projection, computed on the datum's ellipsoid.

    Raises:
        ValueError: If the projection's ellipsoid differs from the datum's.
    """

    name: str
    datum: Datum
    projection: Projection

    def __post_init__(self) -> None:
        if not self.projection.ellipsoid.is_equal(self.datum.ellipsoid):
            raise ValueError(
                f"CRS '{self.name}': projection ellipsoid {self.projection.ellipsoid.name} "
                f"does not match datum ellipsoid {self.datum.ellipsoid.name}"
            )

    @property
    def is_geographic(self) -> bool:
        return self.projection.is_geographic

    @property
    def ellipsoid(self) -> Ellipsoid:
        return self.datum.ellipsoid

    def __repr__(self) -> str:
        return f"CoordinateReferenceSystem({self.name!r})"


CS_GEO = CoordinateReferenceSystem(
    "CS_GEO", WGS84, LongLatProjection(ellipsoid=WGS84.ellipsoid, use_degrees=False)
)
"""Plain geographic coordinates (longitude, latitude in radians) on WGS84."""


def geographic_crs(datum: Datum = WGS84, name: str | None = None) -> CoordinateReferenceSystem:
    """Geographic CRS with coordinates in degrees, longitude first.

    Args:
        datum: Geodetic datum.  Defaults to WGS84.
        name: CRS name.  Defaults to ``"<datum code> geographic"``.

    Returns:
        CoordinateReferenceSystem: The CRS.
    """
    return CoordinateReferenceSystem(
        name or f"{datum.code} geographic",
        datum,
        LongLatProjection(ellipsoid=datum.ellipsoid),
    )


def utm_crs(zone: int, south: bool = False, datum: Datum = WGS84) -> CoordinateReferenceSystem:
    """UTM CRS for a zone.

    Args:
        zone: UTM zone number, 1 to 60.
        south: Use the southern-hemisphere false northing.
        datum: Geodetic datum.  Defaults to WGS84.

    Returns:
        CoordinateReferenceSystem: The CRS.

    Raises:
        ValueError: If *zone* is out of range.

    Examples:
        ```python
        from projax import utm_crs
        crs = utm_crs(33, south=True)
        crs.name  # "WGS84 / UTM zone 33S"
        ```
    """
    projection = TransverseMercatorProjection.utm(zone, south, datum.ellipsoid)
    return CoordinateReferenceSystem(f"{datum.code} / {projection.name}", datum, projection)
