"""Tests for projax.transform: strategy selection, pipeline and errors."""

import math
from unittest.mock import patch

import jax.numpy as jnp
import numpy as np
import pytest

from projax import (
    CS_GEO,
    ConvergenceError,
    CoordinateReferenceSystem,
    CoordinateTransform,
    GridCoverageError,
    ProjCoordinate,
    ProjectionDomainError,
    UnsupportedDatumPathError,
    create_transform,
    geographic_crs,
    utm_crs,
)
from projax import ellipsoid as ell
from projax.datum import ED50, OSGB36, WGS84, Datum, HelmertParams, TransformKind
from projax.gridshift import static_grid
from projax.projections import (
    NEU,
    LambertConformalConicProjection,
    LongLatProjection,
    MercatorProjection,
    PrimeMeridian,
)
from projax.transform import (
    PipelineStatus,
    TransformStrategy,
    compute_strategy,
    create_pipeline,
)

WGS84_GEO = geographic_crs()
WORLD_MERCATOR = CoordinateReferenceSystem("WGS84 / World Mercator", WGS84, MercatorProjection())

# NAD27-like datum whose grid covers the continental US with a constant shift
GRID_DLON = 1.0e-5
GRID_DLAT = -5.0e-6
NAD27 = Datum.with_grids(
    "NAD27",
    ell.CLARKE_1866,
    static_grid(
        dlon=GRID_DLON,
        dlat=GRID_DLAT,
        lon_min=math.radians(-130.0),
        lat_min=math.radians(20.0),
        lon_max=math.radians(-60.0),
        lat_max=math.radians(55.0),
        name="conus",
    ),
)

# Global lon/lat sample grid
_LON, _LAT = np.meshgrid(np.arange(-180.0, 181.0, 45.0), np.arange(-80.0, 81.0, 20.0))
GLOBAL_POINTS = np.stack([_LON.ravel(), _LAT.ravel()], axis=-1)


# ---------------------------------------------------------------------------
# Strategy
# ---------------------------------------------------------------------------


class TestComputeStrategy:
    def test_same_datum_no_datum_transform(self) -> None:
        s = compute_strategy(WGS84_GEO, utm_crs(31))
        assert s.do_inverse_projection
        assert s.do_forward_projection
        assert not s.do_datum_transform
        assert not s.transform_via_geocentric
        assert s.source_converter is None and s.target_converter is None

    def test_equal_datum_with_different_code(self) -> None:
        twin = Datum.from_towgs84("WGS84-twin", ell.WGS84, [0.0, 0.0, 0.0])
        s = compute_strategy(WGS84_GEO, geographic_crs(twin))
        assert not s.do_datum_transform

    def test_cs_geo_skips_projection_and_datum(self) -> None:
        s = compute_strategy(CS_GEO, geographic_crs(OSGB36))
        assert not s.do_inverse_projection
        assert s.do_forward_projection
        assert not s.do_datum_transform

        s = compute_strategy(utm_crs(31), CS_GEO)
        assert s.do_inverse_projection
        assert not s.do_forward_projection

    def test_helmert_pair_via_geocentric(self) -> None:
        s = compute_strategy(geographic_crs(OSGB36), geographic_crs(ED50))
        assert s.do_datum_transform
        assert s.transform_via_geocentric
        assert s.source_converter.ellipsoid is ell.AIRY
        assert s.target_converter.ellipsoid is ell.INTERNATIONAL

    def test_same_ellipsoid_no_pivot_skips_geocentric(self) -> None:
        src = Datum.from_towgs84("A", ell.BESSEL)
        tgt = Datum.with_grids("B", ell.BESSEL, static_grid())
        s = compute_strategy(geographic_crs(src), geographic_crs(tgt))
        assert s.do_datum_transform
        assert not s.transform_via_geocentric

    def test_converter_override_for_projected_other_side(self) -> None:
        clarke = Datum.from_towgs84("clarke", ell.CLARKE_1866)
        s = compute_strategy(geographic_crs(clarke), utm_crs(31, datum=ED50))
        assert s.transform_via_geocentric
        # No WGS84 path and the other side is projected: WGS84 ellipsoid
        assert s.source_converter.ellipsoid is ell.WGS84
        assert s.target_converter.ellipsoid is ell.INTERNATIONAL

    def test_no_override_when_other_side_geographic(self) -> None:
        clarke = Datum.from_towgs84("clarke", ell.CLARKE_1866)
        s = compute_strategy(geographic_crs(clarke), geographic_crs(ED50))
        assert s.source_converter.ellipsoid is ell.CLARKE_1866

    def test_gridshift_side_uses_wgs84(self) -> None:
        s = compute_strategy(geographic_crs(NAD27), WGS84_GEO)
        assert s.do_datum_transform
        assert s.transform_via_geocentric
        assert s.source_converter.ellipsoid is ell.WGS84
        assert s.target_converter.ellipsoid is ell.WGS84

    def test_unknown_without_pivot_skips_datum(self) -> None:
        mystery = Datum.unknown("mystery", ell.CLARKE_1866)
        s = compute_strategy(geographic_crs(mystery), WGS84_GEO)
        assert not s.do_datum_transform

    def test_unknown_with_pivot_on_other_side(self) -> None:
        mystery = Datum.unknown("mystery", ell.CLARKE_1866)
        s = compute_strategy(geographic_crs(mystery), geographic_crs(ED50))
        assert s.do_datum_transform
        assert s.transform_via_geocentric


class TestCreatePipeline:
    def test_unknown_datum_path_raises(self) -> None:
        mystery = geographic_crs(Datum.unknown("mystery", ell.CLARKE_1866))
        strategy = TransformStrategy(
            source=mystery,
            target=WGS84_GEO,
            do_inverse_projection=True,
            do_forward_projection=True,
            do_datum_transform=True,
            transform_via_geocentric=False,
        )
        with pytest.raises(UnsupportedDatumPathError, match="No datum path"):
            create_pipeline(strategy)

    def test_geocentric_without_converters_raises(self) -> None:
        strategy = TransformStrategy(
            source=geographic_crs(OSGB36),
            target=geographic_crs(ED50),
            do_inverse_projection=True,
            do_forward_projection=True,
            do_datum_transform=True,
            transform_via_geocentric=True,
        )
        with pytest.raises(UnsupportedDatumPathError, match="converters"):
            create_pipeline(strategy)

    def test_status_fields(self) -> None:
        pipeline = create_pipeline(compute_strategy(WGS84_GEO, utm_crs(31)))
        x, _, _, status = pipeline(3.0, 45.0, jnp.nan)
        assert isinstance(status, PipelineStatus)
        assert bool(status.inverse_projection)
        assert bool(status.forward_projection)
        assert status.source_grid is None
        assert status.geocentric_convergence is None
        assert float(x) == pytest.approx(500000.0, abs=1e-6)

    def test_does_not_raise_on_bad_points(self) -> None:
        pipeline = create_pipeline(compute_strategy(WGS84_GEO, WORLD_MERCATOR))
        _, y, _, status = pipeline(jnp.array([0.0, 0.0]), jnp.array([90.0, 10.0]), jnp.nan)
        np.testing.assert_array_equal(status.forward_projection, [False, True])
        assert bool(jnp.isnan(y[0]))


# ---------------------------------------------------------------------------
# Identity and round trips
# ---------------------------------------------------------------------------


class TestIdentityAndRoundTrip:
    @pytest.mark.parametrize(
        ("crs", "atol"),
        [(WGS84_GEO, 1e-9), (geographic_crs(OSGB36), 1e-9), (WORLD_MERCATOR, 1e-6)],
        ids=["wgs84", "osgb36", "mercator"],
    )
    def test_identity(self, crs: CoordinateReferenceSystem, atol: float) -> None:
        t = CoordinateTransform(crs, crs)
        points = GLOBAL_POINTS
        if not crs.is_geographic:
            points = CoordinateTransform(WGS84_GEO, crs).transform_array(GLOBAL_POINTS)
        out = t.transform_array(points)
        np.testing.assert_allclose(out, points, atol=atol, rtol=0.0)

    def test_identity_drops_height(self) -> None:
        t = CoordinateTransform(WGS84_GEO, WGS84_GEO)
        out = t.transform(ProjCoordinate(10.0, 20.0, 100.0))
        assert out.x == pytest.approx(10.0)
        assert math.isnan(out.z)

    @pytest.mark.parametrize(
        "target",
        [
            WORLD_MERCATOR,
            CS_GEO,
            CoordinateReferenceSystem(
                "paris geographic",
                WGS84,
                LongLatProjection(prime_meridian=PrimeMeridian.for_name("paris")),
            ),
        ],
        ids=["mercator", "cs_geo", "paris"],
    )
    def test_global_round_trip(self, target: CoordinateReferenceSystem) -> None:
        forward = CoordinateTransform(WGS84_GEO, target)
        back = CoordinateTransform(target, WGS84_GEO)
        out = back.transform_array(forward.transform_array(GLOBAL_POINTS))
        # -180 and 180 are the same meridian
        dlon = (out[:, 0] - GLOBAL_POINTS[:, 0] + 180.0) % 360.0 - 180.0
        np.testing.assert_allclose(dlon, 0.0, atol=1e-7)
        np.testing.assert_allclose(out[:, 1], GLOBAL_POINTS[:, 1], atol=1e-7)

    def test_datum_round_trip(self) -> None:
        lon, lat = np.meshgrid(np.arange(-10.0, 30.1, 5.0), np.arange(36.0, 70.1, 4.0))
        points = np.stack([lon.ravel(), lat.ravel()], axis=-1)
        forward = CoordinateTransform(WGS84_GEO, geographic_crs(ED50))
        back = CoordinateTransform(geographic_crs(ED50), WGS84_GEO)
        out = back.transform_array(forward.transform_array(points))
        np.testing.assert_allclose(out, points, atol=1e-7, rtol=0.0)

    def test_projected_round_trip(self) -> None:
        lcc = CoordinateReferenceSystem(
            "ED50 / LCC",
            ED50,
            LambertConformalConicProjection(
                ellipsoid=ell.INTERNATIONAL,
                lat_1=math.radians(49.0),
                lat_2=math.radians(44.0),
                lat_0=math.radians(46.5),
                lon_0=math.radians(3.0),
                false_easting=700000.0,
                false_northing=6600000.0,
            ),
        )
        utm = utm_crs(31)
        xy = np.array([[500000.0, 5000000.0], [300000.0, 4800000.0], [700000.0, 5300000.0]])
        out = CoordinateTransform(lcc, utm).transform_array(
            CoordinateTransform(utm, lcc).transform_array(xy)
        )
        np.testing.assert_allclose(out, xy, atol=1e-2, rtol=0.0)


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


class TestEndToEnd:
    def test_utm_known_point(self) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        p = t.transform(ProjCoordinate(3.0, 45.0))
        assert isinstance(p.x, float)
        assert p.x == pytest.approx(500000.0, abs=1e-6)
        assert p.y == pytest.approx(4982950.4, abs=0.1)

    def test_equal_datum_only_projects(self) -> None:
        zero_shift = Datum.from_towgs84("GRS80-zero", ell.GRS80, [0.0] * 7)
        projection = MercatorProjection(ellipsoid=ell.GRS80)
        target = CoordinateReferenceSystem("GRS80 / Mercator", zero_shift, projection)

        t = CoordinateTransform(CS_GEO, target)
        assert not t.strategy.do_datum_transform

        lon, lat = math.radians(12.5), math.radians(41.9)
        p = t.transform(ProjCoordinate(lon, lat))
        x, y, _ = projection.project_radians(lon, lat)
        assert p.x == pytest.approx(float(x), abs=1e-9)
        assert p.y == pytest.approx(float(y), abs=1e-9)

    def test_constructed_zero_shift_datum_only_projects(self) -> None:
        zero_shift = Datum(
            "GRS80-zero",
            ell.GRS80,
            TransformKind.SEVEN_PARAM,
            helmert=HelmertParams(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
        )
        projection = MercatorProjection(ellipsoid=ell.GRS80)
        target = CoordinateReferenceSystem("GRS80 / Mercator", zero_shift, projection)

        t = CoordinateTransform(WGS84_GEO, target)
        assert zero_shift.is_equal(WGS84)
        assert not t.strategy.do_datum_transform
        assert not t.strategy.transform_via_geocentric

        p = t.transform(ProjCoordinate(12.5, 41.9))
        x, y, _ = projection.project_radians(math.radians(12.5), math.radians(41.9))
        assert p.x == pytest.approx(float(x), abs=1e-9)
        assert p.y == pytest.approx(float(y), abs=1e-9)

    def test_cs_geo_radians(self) -> None:
        p = CoordinateTransform(WGS84_GEO, CS_GEO).transform(ProjCoordinate(90.0, 45.0))
        assert p.x == pytest.approx(math.pi / 2)
        assert p.y == pytest.approx(math.pi / 4)

    def test_helmert_shift_magnitude(self) -> None:
        # WGS84 -> OSGB36 moves points in Great Britain by roughly 100 m
        t = CoordinateTransform(WGS84_GEO, geographic_crs(OSGB36))
        p = t.transform(ProjCoordinate(-1.5, 52.0))
        dx = (p.x + 1.5) * 111320.0 * math.cos(math.radians(52.0))
        dy = (p.y - 52.0) * 111320.0
        assert 50.0 < math.hypot(dx, dy) < 200.0

    def test_lat_first_axis_order(self) -> None:
        lat_lon = CoordinateReferenceSystem(
            "WGS84 lat/lon", WGS84, LongLatProjection(axis_order=NEU)
        )
        p = CoordinateTransform(lat_lon, utm_crs(31)).transform(ProjCoordinate(45.0, 3.0))
        assert p.x == pytest.approx(500000.0, abs=1e-6)

    def test_prime_meridian(self) -> None:
        paris = CoordinateReferenceSystem(
            "paris geographic",
            WGS84,
            LongLatProjection(prime_meridian=PrimeMeridian.for_name("paris")),
        )
        p = CoordinateTransform(paris, WGS84_GEO).transform(ProjCoordinate(0.0, 48.0))
        assert p.x == pytest.approx(2.337229166667, abs=1e-9)
        assert p.y == pytest.approx(48.0, abs=1e-9)

    def test_utm_pole_is_defined(self) -> None:
        p = CoordinateTransform(WGS84_GEO, utm_crs(31)).transform(ProjCoordinate(3.0, 90.0))
        assert math.isfinite(p.x) and math.isfinite(p.y)

    def test_grid_shift_forward(self) -> None:
        t = CoordinateTransform(geographic_crs(NAD27), WGS84_GEO)
        p = t.transform(ProjCoordinate(-75.0, 40.0))
        assert p.x == pytest.approx(-75.0 + math.degrees(GRID_DLON), abs=1e-9)
        assert p.y == pytest.approx(40.0 + math.degrees(GRID_DLAT), abs=1e-9)

    def test_grid_shift_inverse(self) -> None:
        t = CoordinateTransform(WGS84_GEO, geographic_crs(NAD27))
        p = t.transform(ProjCoordinate(-75.0, 40.0))
        assert p.x == pytest.approx(-75.0 - math.degrees(GRID_DLON), abs=1e-9)
        assert p.y == pytest.approx(40.0 - math.degrees(GRID_DLAT), abs=1e-9)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_mercator_pole_raises(self) -> None:
        t = CoordinateTransform(WGS84_GEO, WORLD_MERCATOR)
        with pytest.raises(ProjectionDomainError) as exc_info:
            t.transform(ProjCoordinate(0.0, 90.0))
        err = exc_info.value
        assert err.stage == "forward projection"
        assert err.crs == "WGS84 / World Mercator"
        assert err.count == 1

    def test_failure_count(self) -> None:
        t = CoordinateTransform(WGS84_GEO, WORLD_MERCATOR)
        points = jnp.array([[0.0, 90.0], [10.0, 10.0], [0.0, -90.0]])
        with pytest.raises(ProjectionDomainError, match="2 point"):
            t.transform_array(points)

    def test_grid_coverage_raises(self) -> None:
        t = CoordinateTransform(geographic_crs(NAD27), WGS84_GEO)
        with pytest.raises(GridCoverageError) as exc_info:
            t.transform(ProjCoordinate(2.0, 48.0))
        assert exc_info.value.stage == "source grid shift"
        assert exc_info.value.crs == "NAD27 geographic"

    def test_target_grid_coverage_raises(self) -> None:
        t = CoordinateTransform(WGS84_GEO, geographic_crs(NAD27))
        with pytest.raises(GridCoverageError) as exc_info:
            t.transform(ProjCoordinate(2.0, 48.0))
        assert exc_info.value.stage == "target grid shift"

    def test_inverse_projection_raises(self) -> None:
        t = CoordinateTransform(utm_crs(31), WGS84_GEO)
        with pytest.raises(ProjectionDomainError) as exc_info:
            t.transform(ProjCoordinate(1.0e8, 0.0))
        assert exc_info.value.stage == "inverse projection"
        assert exc_info.value.crs == "WGS84 / UTM zone 31N"

    def test_geocentric_domain_raises(self) -> None:
        t = CoordinateTransform(WGS84_GEO, geographic_crs(ED50))
        with pytest.raises(ProjectionDomainError) as exc_info:
            t.transform(ProjCoordinate(0.0, 95.0))
        assert exc_info.value.stage == "geodetic to geocentric conversion"

    def test_non_convergence_raises(self) -> None:
        t = CoordinateTransform(WGS84_GEO, geographic_crs(ED50), jit=False)
        with (
            patch("projax.geocentric.get_convergence_tolerance", return_value=-1.0),
            pytest.raises(ConvergenceError) as exc_info,
        ):
            t.transform(ProjCoordinate(10.0, 50.0))
        assert exc_info.value.stage == "geocentric to geodetic conversion"
        assert exc_info.value.crs == "ED50 geographic"

    def test_target_untouched_on_failure(self) -> None:
        t = CoordinateTransform(WGS84_GEO, WORLD_MERCATOR)
        tgt = ProjCoordinate(1.0, 2.0, 3.0)
        with pytest.raises(ProjectionDomainError):
            t.transform(ProjCoordinate(0.0, 90.0), tgt)
        assert (tgt.x, tgt.y, tgt.z) == (1.0, 2.0, 3.0)

    def test_non_crs_argument_raises(self) -> None:
        with pytest.raises(TypeError, match="source must be a CoordinateReferenceSystem"):
            CoordinateTransform("EPSG:4326", utm_crs(31))
        with pytest.raises(TypeError, match="target"):
            CoordinateTransform(WGS84_GEO, None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class TestCoordinateTransform:
    def test_properties(self) -> None:
        target = utm_crs(31)
        t = create_transform(WGS84_GEO, target)
        assert t.source_crs is WGS84_GEO
        assert t.target_crs is target
        assert isinstance(t.strategy, TransformStrategy)
        assert repr(t) == "CoordinateTransform('WGS84 geographic' -> 'WGS84 / UTM zone 31N')"

    def test_in_place(self) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        p = ProjCoordinate(3.0, 45.0)
        result = t.transform(p, p)
        assert result is p
        assert p.x == pytest.approx(500000.0, abs=1e-6)

    def test_writes_into_separate_target(self) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        src = ProjCoordinate(3.0, 45.0, 10.0)
        tgt = ProjCoordinate(1.0, 2.0, 3.0)
        result = t.transform(src, tgt)
        assert result is tgt
        assert (src.x, src.y, src.z) == (3.0, 45.0, 10.0)
        assert tgt.x == pytest.approx(500000.0, abs=1e-6)
        assert math.isnan(tgt.z)

    def test_batch_coordinate(self) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        p = t.transform(ProjCoordinate(jnp.array([3.0, 3.0]), jnp.array([0.0, 45.0])))
        assert p.x.shape == (2,)
        np.testing.assert_allclose(p.x, [500000.0, 500000.0], atol=1e-6)
        assert float(p.y[0]) == pytest.approx(0.0, abs=1e-6)

    @pytest.mark.parametrize("shape", [(4, 2), (4, 3), (2, 3, 2)])
    def test_transform_array_shapes(self, shape: tuple[int, ...]) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        points = jnp.broadcast_to(jnp.array([3.0, 45.0, 10.0][: shape[-1]]), shape)
        out = t.transform_array(points)
        assert out.shape == shape
        assert bool(jnp.all(jnp.abs(out[..., 0] - 500000.0) < 1e-6))

    @pytest.mark.parametrize("shape", [(4,), (4, 4), (4, 1)])
    def test_transform_array_bad_shape(self, shape: tuple[int, ...]) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        with pytest.raises(ValueError, match="points must have shape"):
            t.transform_array(jnp.zeros(shape))

    def test_scalar_array_raises(self) -> None:
        t = CoordinateTransform(WGS84_GEO, utm_crs(31))
        with pytest.raises(ValueError, match="points must have shape"):
            t.transform_array(1.0)

    def test_jit_matches_eager(self) -> None:
        target = geographic_crs(OSGB36)
        jitted = CoordinateTransform(WGS84_GEO, target)
        eager = CoordinateTransform(WGS84_GEO, target, jit=False)
        points = jnp.array([[-1.5, 52.0], [-4.0, 56.5], [0.5, 51.2]])
        np.testing.assert_allclose(
            jitted.transform_array(points), eager.transform_array(points), atol=1e-12
        )

    def test_datum_kinds(self) -> None:
        assert OSGB36.kind is TransformKind.SEVEN_PARAM
        assert NAD27.kind is TransformKind.GRIDSHIFT
