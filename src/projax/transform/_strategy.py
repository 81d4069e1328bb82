"""Construction-time transform strategy.

:func:`compute_strategy` decides, once per (source, target) CRS pair, which
pipeline stages run.  The result is a frozen :class:`TransformStrategy`
whose booleans are read as plain Python ``if``s while the pipeline is
traced, so each compiled pipeline contains only the stages it needs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from projax.crs import CS_GEO, CoordinateReferenceSystem
from projax.datum import TransformKind
from projax.geocentric import GeocentricConverter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformStrategy:
    """Stage selection for one source/target CRS pair.

    Attributes:
        source: Source CRS.
        target: Target CRS.
        do_inverse_projection: Source coordinates must be inverse-projected.
        do_forward_projection: Target coordinates must be forward-projected.
        do_datum_transform: A datum conversion is required.
        transform_via_geocentric: The datum conversion passes through
            geocentric Cartesian coordinates.
        source_converter: Geocentric converter for the source side, set only
            when *transform_via_geocentric* is ``True``.
        target_converter: Geocentric converter for the target side, set only
            when *transform_via_geocentric* is ``True``.
    """

    source: CoordinateReferenceSystem
    target: CoordinateReferenceSystem
    do_inverse_projection: bool
    do_forward_projection: bool
    do_datum_transform: bool
    transform_via_geocentric: bool
    source_converter: GeocentricConverter | None = None
    target_converter: GeocentricConverter | None = None


def compute_strategy(
    source: CoordinateReferenceSystem,
    target: CoordinateReferenceSystem,
) -> TransformStrategy:
    """Decide which pipeline stages a transform needs.

    A datum conversion is skipped when either side is :data:`~projax.CS_GEO`,
    when the datums are the same object or parameter-equal, or when neither
    side has a Helmert path to WGS84 and either side is ``UNKNOWN``.  The
    geocentric detour is taken when the ellipsoids differ or either side has
    a Helmert path.

    A side's geocentric converter works on the WGS84 ellipsoid instead of its
    own when that side is a grid-shift datum, or when it has no Helmert path
    and the other CRS is projected.  The second rule is a compatibility
    heuristic rather than a geodetic requirement.

    Args:
        source: Source CRS.
        target: Target CRS.

    Returns:
        TransformStrategy: The stage selection.

    Examples:
        ```python
        from projax import geographic_crs, utm_crs
        from projax.transform import compute_strategy
        s = compute_strategy(geographic_crs(), utm_crs(31))
        s.do_datum_transform  # False
        ```
    """
    src_datum = source.datum
    tgt_datum = target.datum
    src_to_wgs84 = src_datum.has_transform_to_wgs84
    tgt_to_wgs84 = tgt_datum.has_transform_to_wgs84

    do_inverse = source is not CS_GEO
    do_forward = target is not CS_GEO
    do_datum = (
        do_inverse
        and do_forward
        and src_datum is not tgt_datum
        and not src_datum.is_equal(tgt_datum)
        and (
            src_to_wgs84
            or tgt_to_wgs84
            or (
                src_datum.kind is not TransformKind.UNKNOWN
                and tgt_datum.kind is not TransformKind.UNKNOWN
            )
        )
    )

    via_geocentric = False
    src_conv = None
    tgt_conv = None
    if do_datum:
        src_ellipsoid = src_datum.ellipsoid
        tgt_ellipsoid = tgt_datum.ellipsoid
        via_geocentric = (
            not src_ellipsoid.is_equal(tgt_ellipsoid) or src_to_wgs84 or tgt_to_wgs84
        )
        if via_geocentric:
            if src_datum.kind is TransformKind.GRIDSHIFT or (
                not src_to_wgs84 and not target.is_geographic
            ):
                src_conv = GeocentricConverter.wgs84()
            else:
                src_conv = GeocentricConverter(src_ellipsoid)

            if tgt_datum.kind is TransformKind.GRIDSHIFT or (
                not tgt_to_wgs84 and not source.is_geographic
            ):
                tgt_conv = GeocentricConverter.wgs84()
            else:
                tgt_conv = GeocentricConverter(tgt_ellipsoid)

    strategy = TransformStrategy(
        source=source,
        target=target,
        do_inverse_projection=do_inverse,
        do_forward_projection=do_forward,
        do_datum_transform=do_datum,
        transform_via_geocentric=via_geocentric,
        source_converter=src_conv,
        target_converter=tgt_conv,
    )
    logger.debug(
        "Transform %s -> %s: inverse=%s datum=%s geocentric=%s forward=%s",
        source.name,
        target.name,
        do_inverse,
        do_datum,
        via_geocentric,
        do_forward,
    )
    return strategy
