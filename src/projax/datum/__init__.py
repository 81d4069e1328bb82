"""Geodetic datums and Helmert transforms.

Typical usage::

    from projax.datum import OSGB36, helmert_to_wgs84
    x, y, z = helmert_to_wgs84(x, y, z, OSGB36.helmert)
"""

from projax.datum._constants import (
    CARTHAGE,
    DATUMS,
    ED50,
    GGRS87,
    HERMANNSKOGEL,
    IRE65,
    NAD83,
    NZGD49,
    OSGB36,
    POTSDAM,
    WGS84,
)
from projax.datum._datum import Datum
from projax.datum._helmert import helmert_from_wgs84, helmert_to_wgs84
from projax.datum._types import HelmertParams, TransformKind

__all__ = [
    "CARTHAGE",
    "DATUMS",
    "Datum",
    "ED50",
    "GGRS87",
    "HERMANNSKOGEL",
    "HelmertParams",
    "IRE65",
    "NAD83",
    "NZGD49",
    "OSGB36",
    "POTSDAM",
    "TransformKind",
    "WGS84",
    "helmert_from_wgs84",
    "helmert_to_wgs84",
]
