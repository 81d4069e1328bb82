# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "polars>=1.0", "projax"]
#
# [tool.uv.sources]
# projax = { path = ".." }
# ///
"""Reproject a CSV of points between coordinate reference systems.

Reads a CSV with ``x`` and ``y`` columns (and optionally ``z``), transforms
every row with a single jitted pipeline call, and writes the input columns
plus ``x_out``/``y_out`` to a new CSV.

CRS descriptors:

* ``geographic[:DATUM]``: longitude/latitude in degrees
* ``utm:<zone><N|S>[:DATUM]``: UTM zone, e.g. ``utm:31N``
* ``mercator[:DATUM]``: World Mercator

``DATUM`` is one of the codes in :data:`projax.datum.DATUMS` (default
``WGS84``).

Requires projax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/reproject_points.py INPUT OUTPUT [OPTIONS]

Examples:
    # WGS84 lon/lat to UTM zone 31N
    uv run examples/reproject_points.py points.csv out.csv --target utm:31N

    # British National Grid style datum shift, WGS84 to OSGB36 lon/lat
    uv run examples/reproject_points.py points.csv out.csv --target geographic:OSGB36
"""

import time
from pathlib import Path
from typing import Annotated

import jax.numpy as jnp
import polars as pl
import typer

from projax import (
    CoordinateReferenceSystem,
    MercatorProjection,
    ProjaxError,
    create_transform,
    geographic_crs,
    set_dtype,
    utm_crs,
)
from projax.datum import DATUMS

set_dtype(jnp.float64)  # Must be before any JIT compilation


def parse_crs(descriptor: str) -> CoordinateReferenceSystem:
    """Build a CRS from a ``kind[:arg][:DATUM]`` descriptor."""
    kind, *rest = descriptor.split(":")
    kind = kind.lower()

    datum_code = "WGS84"
    if rest and rest[-1] in DATUMS:
        datum_code = rest.pop()
    datum = DATUMS[datum_code]

    if kind == "geographic" and not rest:
        return geographic_crs(datum)
    if kind == "mercator" and not rest:
        return CoordinateReferenceSystem(
            f"{datum.code} / World Mercator",
            datum,
            MercatorProjection(ellipsoid=datum.ellipsoid),
        )
    if kind == "utm" and len(rest) == 1:
        zone = rest[0].upper()
        if zone[-1] not in "NS" or not zone[:-1].isdigit():
            raise typer.BadParameter(f"UTM zone must look like '31N', got '{rest[0]}'")
        return utm_crs(int(zone[:-1]), south=zone[-1] == "S", datum=datum)

    raise typer.BadParameter(f"Unrecognised CRS descriptor '{descriptor}'")


def main(
    input_csv: Annotated[Path, typer.Argument(help="CSV with x, y (and optional z) columns")],
    output_csv: Annotated[Path, typer.Argument(help="Destination CSV")],
    source: Annotated[str, typer.Option(help="Source CRS descriptor")] = "geographic",
    target: Annotated[str, typer.Option(help="Target CRS descriptor")] = "utm:31N",
    no_jit: Annotated[bool, typer.Option(help="Run the pipeline eagerly")] = False,
) -> None:
    """Reproject INPUT_CSV from SOURCE to TARGET and write OUTPUT_CSV."""
    src_crs = parse_crs(source)
    tgt_crs = parse_crs(target)

    print(f"Reading {input_csv}...")
    df = pl.read_csv(input_csv)
    missing = {"x", "y"} - set(df.columns)
    if missing:
        raise typer.BadParameter(f"Input is missing column(s): {', '.join(sorted(missing))}")
    columns = ["x", "y", "z"] if "z" in df.columns else ["x", "y"]
    points = jnp.asarray(df.select(columns).to_numpy())
    print(f"  {len(df)} point(s)")

    transform = create_transform(src_crs, tgt_crs, jit=not no_jit)
    strategy = transform.strategy
    print(f"\n{transform!r}")
    print(
        f"  inverse projection: {strategy.do_inverse_projection}, "
        f"datum transform: {strategy.do_datum_transform} "
        f"(via geocentric: {strategy.transform_via_geocentric}), "
        f"forward projection: {strategy.do_forward_projection}"
    )

    t_start = time.perf_counter()
    try:
        out = transform.transform_array(points)
        out.block_until_ready()
    except ProjaxError as err:
        print(f"\nTransform failed: {err}")
        raise typer.Exit(code=1) from err
    elapsed = time.perf_counter() - t_start
    print(f"  Transformed in {elapsed * 1e3:.1f} ms")

    result = df.with_columns(
        pl.Series("x_out", out[:, 0].tolist()),
        pl.Series("y_out", out[:, 1].tolist()),
    )
    result.write_csv(output_csv)
    print(f"\nWrote {output_csv}")


if __name__ == "__main__":
    typer.run(main)
