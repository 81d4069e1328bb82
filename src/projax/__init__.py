"""
projax converts point coordinates between coordinate reference systems, implemented in JAX.
"""

from .config import set_dtype, get_dtype

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    RAD2AS,
    WGS84_a,
    WGS84_f,
)

from .errors import (
    ProjaxError,
    ProjectionDomainError,
    GridCoverageError,
    ConvergenceError,
    UnsupportedDatumPathError,
)

from .coordinate import ProjCoordinate
from .ellipsoid import Ellipsoid

from .geocentric import (
    GeocentricConverter,
    geodetic_to_geocentric,
    geocentric_to_geodetic,
)

from .datum import (
    Datum,
    HelmertParams,
    TransformKind,
)

from .projections import (
    AxisOrder,
    PrimeMeridian,
    Projection,
    LongLatProjection,
    MercatorProjection,
    TransverseMercatorProjection,
    LambertConformalConicProjection,
)

from .crs import (
    CS_GEO,
    CoordinateReferenceSystem,
    geographic_crs,
    utm_crs,
)

from .transform import (
    CoordinateTransform,
    TransformStrategy,
    compute_strategy,
    create_transform,
)

__all__ = [
    # Config
    "set_dtype",
    "get_dtype",
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "AS2RAD",
    "RAD2AS",
    "WGS84_a",
    "WGS84_f",
    # Errors
    "ProjaxError",
    "ProjectionDomainError",
    "GridCoverageError",
    "ConvergenceError",
    "UnsupportedDatumPathError",
    # Coordinates and ellipsoids
    "ProjCoordinate",
    "Ellipsoid",
    # Geocentric
    "GeocentricConverter",
    "geodetic_to_geocentric",
    "geocentric_to_geodetic",
    # Datums
    "Datum",
    "HelmertParams",
    "TransformKind",
    # Projections
    "AxisOrder",
    "PrimeMeridian",
    "Projection",
    "LongLatProjection",
    "MercatorProjection",
    "TransverseMercatorProjection",
    "LambertConformalConicProjection",
    # CRS
    "CS_GEO",
    "CoordinateReferenceSystem",
    "geographic_crs",
    "utm_crs",
    # Transform
    "CoordinateTransform",
    "TransformStrategy",
    "compute_strategy",
    "create_transform",
]
