import struct

import jax.numpy as jnp
import pytest

from projax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    test_config.py switches the dtype to float32 in some tests; this fixture
    restores the projax default so that every other test runs in float64.
    """
    set_dtype(jnp.float64)


def _record(label: str, value: bytes) -> bytes:
    return label.encode("ascii").ljust(8, b" ") + value


def _build_ntv2(subgrids, order="<", gs_type="SECONDS"):
    """Serialise sub-grid definitions into NTv2 bytes.

    Each sub-grid is a dict with ``name``, ``parent``, ``s_lat``, ``n_lat``,
    ``e_long``, ``w_long``, ``lat_inc``, ``long_inc`` (NTv2 units, longitude
    positive west) and ``shifts``: a function ``(row, col_from_east) ->
    (lat_shift, lon_shift_west)`` in the same units.
    """
    def i(v):
        return struct.pack(order + "i", v) + b"\x00" * 4

    def d(v):
        return struct.pack(order + "d", v)

    def s(v):
        return v.encode("ascii").ljust(8, b" ")

    out = [
        _record("NUM_OREC", i(11)),
        _record("NUM_SREC", i(11)),
        _record("NUM_FILE", i(len(subgrids))),
        _record("GS_TYPE", s(gs_type)),
        _record("VERSION", s("NTv2.0")),
        _record("SYSTEM_F", s("NAD27")),
        _record("SYSTEM_T", s("NAD83")),
        _record("MAJOR_F", d(6378206.4)),
        _record("MINOR_F", d(6356583.8)),
        _record("MAJOR_T", d(6378137.0)),
        _record("MINOR_T", d(6356752.314)),
    ]
    for g in subgrids:
        rows = int(round((g["n_lat"] - g["s_lat"]) / g["lat_inc"])) + 1
        cols = int(round((g["w_long"] - g["e_long"]) / g["long_inc"])) + 1
        out += [
            _record("SUB_NAME", s(g["name"])),
            _record("PARENT", s(g.get("parent", "NONE"))),
            _record("CREATED", s("20240101")),
            _record("UPDATED", s("20240101")),
            _record("S_LAT", d(g["s_lat"])),
            _record("N_LAT", d(g["n_lat"])),
            _record("E_LONG", d(g["e_long"])),
            _record("W_LONG", d(g["w_long"])),
            _record("LAT_INC", d(g["lat_inc"])),
            _record("LONG_INC", d(g["long_inc"])),
            _record("GS_COUNT", i(rows * cols)),
        ]
        for r in range(rows):
            for c in range(cols):
                lat_shift, lon_shift = g["shifts"](r, c)
                out.append(struct.pack(order + "ffff", lat_shift, lon_shift, 0.0, 0.0))
    out.append(_record("END", b"\x00" * 8))
    return b"".join(out)


@pytest.fixture
def build_ntv2():
    """Factory fixture returning NTv2 file contents for synthetic sub-grids."""
    return _build_ntv2


@pytest.fixture
def ntv2_file(tmp_path):
    """A single 3x3 sub-grid over 40-41N, 74-76W written to ``test.gsb``.

    Latitude shift is ``0.1 * row + 0.01 * col_from_east`` arc-seconds and
    the (positive west) longitude shift is ``1 + 0.5 * col_from_east +
    0.25 * row`` arc-seconds.
    """
    grid = {
        "name": "SUBGRID1",
        "s_lat": 40.0 * 3600,
        "n_lat": 41.0 * 3600,
        "e_long": 74.0 * 3600,
        "w_long": 76.0 * 3600,
        "lat_inc": 1800.0,
        "long_inc": 3600.0,
        "shifts": lambda r, c: (0.1 * r + 0.01 * c, 1.0 + 0.5 * c + 0.25 * r),
    }
    path = tmp_path / "test.gsb"
    path.write_bytes(_build_ntv2([grid]))
    return path
