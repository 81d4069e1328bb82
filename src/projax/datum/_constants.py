"""Commonly used datums with published ``towgs84`` parameters.

Values follow the PROJ datum table.  Grid-shift datums (e.g. NAD27) are
not predefined because their grids must be loaded explicitly; build them
with :meth:`Datum.with_grids`.
"""

from __future__ import annotations

from projax import ellipsoid
from projax.datum._datum import Datum

WGS84 = Datum.from_towgs84("WGS84", ellipsoid.WGS84, [0.0, 0.0, 0.0], "WGS84")
NAD83 = Datum.from_towgs84("NAD83", ellipsoid.GRS80, [0.0, 0.0, 0.0], "North American Datum 1983")
GGRS87 = Datum.from_towgs84(
    "GGRS87", ellipsoid.GRS80, [-199.87, 74.79, 246.62], "Greek Geodetic Reference System 1987"
)
POTSDAM = Datum.from_towgs84(
    "potsdam",
    ellipsoid.BESSEL,
    [598.1, 73.7, 418.2, 0.202, 0.045, -2.455, 6.7],
    "Potsdam Rauenberg 1950 DHDN",
)
CARTHAGE = Datum.from_towgs84(
    "carthage", ellipsoid.CLARKE_1880, [-263.0, 6.0, 431.0], "Carthage 1934 Tunisia"
)
HERMANNSKOGEL = Datum.from_towgs84(
    "hermannskogel",
    ellipsoid.BESSEL,
    [577.326, 90.129, 463.919, 5.137, 1.474, 5.297, 2.4232],
    "Hermannskogel",
)
IRE65 = Datum.from_towgs84(
    "ire65",
    ellipsoid.MOD_AIRY,
    [482.530, -130.596, 564.557, -1.042, -0.214, -0.631, 8.15],
    "Ireland 1965",
)
NZGD49 = Datum.from_towgs84(
    "nzgd49",
    ellipsoid.INTERNATIONAL,
    [59.47, -5.04, 187.44, 0.47, -0.1, 1.024, -4.5993],
    "New Zealand Geodetic Datum 1949",
)
OSGB36 = Datum.from_towgs84(
    "OSGB36",
    ellipsoid.AIRY,
    [446.448, -125.157, 542.060, 0.1502, 0.2470, 0.8421, -20.4894],
    "Ordnance Survey of Great Britain 1936",
)
ED50 = Datum.from_towgs84(
    "ED50", ellipsoid.INTERNATIONAL, [-87.0, -98.0, -121.0], "European Datum 1950"
)

DATUMS: dict[str, Datum] = {
    d.code: d
    for d in (WGS84, NAD83, GGRS87, POTSDAM, CARTHAGE, HERMANNSKOGEL, IRE65, NZGD49, OSGB36, ED50)
}
"""Named datums keyed by code."""
