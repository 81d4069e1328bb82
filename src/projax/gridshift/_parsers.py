"""Parsers for NTv2 horizontal grid-shift files.

NTv2 (``.gsb``) files consist of an overview header followed by one or more
sub-grids, each with its own header and a block of shift records.  Every
header record is 16 bytes: an 8-byte ASCII label and an 8-byte value
(a 4-byte integer plus padding, a double, or 8 ASCII characters).

NTv2 stores longitudes positive *west* and orders each row from east to
west; the parser converts both to the positive-east, west-to-east layout
used by :class:`~projax.gridshift.GridData`.  The byte order is detected
from the first record.

References:
    1. Natural Resources Canada, *National Transformation Version 2
       Developer's Guide*, 1995.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import NamedTuple

import numpy as np

from projax.constants import AS2RAD

_RECORD_SIZE = 16
_UNIT_SECONDS = {"SECONDS": 1.0, "MINUTES": 60.0, "DEGREES": 3600.0}


class NTv2Subgrid(NamedTuple):
    """One parsed NTv2 sub-grid, converted to radians.

    Attributes:
        name: Sub-grid name (``SUB_NAME``).
        parent: Parent sub-grid name, or ``"NONE"`` for top-level grids.
        lon_min: Western edge [rad], positive east.
        lat_min: Southern edge [rad].
        lon_step: Longitude spacing [rad].
        lat_step: Latitude spacing [rad].
        lon_shift: Longitude corrections [rad], positive east,
            shape ``(n_lat, n_lon)``.
        lat_shift: Latitude corrections [rad], shape ``(n_lat, n_lon)``.
    """

    name: str
    parent: str
    lon_min: float
    lat_min: float
    lon_step: float
    lat_step: float
    lon_shift: np.ndarray
    lat_shift: np.ndarray


def _byte_order(buf: bytes) -> str:
    if len(buf) < _RECORD_SIZE or buf[:8] != b"NUM_OREC":
        raise ValueError("Not an NTv2 file: missing NUM_OREC header record")
    if struct.unpack("<i", buf[8:12])[0] == 11:
        return "<"
    if struct.unpack(">i", buf[8:12])[0] == 11:
        return ">"
    raise ValueError("Not an NTv2 file: unexpected NUM_OREC value")


def _read_records(buf: bytes, offset: int, count: int) -> dict[str, bytes]:
    if offset + count * _RECORD_SIZE > len(buf):
        raise ValueError("Truncated NTv2 file: header runs past end of data")
    records: dict[str, bytes] = {}
    for k in range(count):
        start = offset + k * _RECORD_SIZE
        label = buf[start : start + 8].decode("ascii", errors="replace").strip()
        records[label] = buf[start + 8 : start + _RECORD_SIZE]
    return records


def _as_int(value: bytes, order: str) -> int:
    return struct.unpack(order + "i", value[:4])[0]


def _as_float(value: bytes, order: str) -> float:
    return struct.unpack(order + "d", value)[0]


def _as_str(value: bytes) -> str:
    return value.decode("ascii", errors="replace").strip()


def parse_ntv2_bytes(buf: bytes) -> list[NTv2Subgrid]:
    """Parse the contents of an NTv2 file.

    Args:
        buf: Raw file contents.

    Returns:
        Sub-grids in file order.

    Raises:
        ValueError: If the data is not a well-formed NTv2 file.
    """
    order = _byte_order(buf)
    overview = _read_records(buf, 0, 11)
    num_orec = _as_int(overview["NUM_OREC"], order)
    num_srec = _as_int(overview["NUM_SREC"], order)
    num_file = _as_int(overview["NUM_FILE"], order)
    gs_type = _as_str(overview.get("GS_TYPE", b"SECONDS "))
    if gs_type not in _UNIT_SECONDS:
        raise ValueError(f"Unsupported NTv2 GS_TYPE '{gs_type}'")
    to_rad = _UNIT_SECONDS[gs_type] * AS2RAD

    subgrids: list[NTv2Subgrid] = []
    offset = num_orec * _RECORD_SIZE
    for _ in range(num_file):
        header = _read_records(buf, offset, num_srec)
        offset += num_srec * _RECORD_SIZE

        try:
            s_lat = _as_float(header["S_LAT"], order)
            n_lat = _as_float(header["N_LAT"], order)
            e_long = _as_float(header["E_LONG"], order)
            w_long = _as_float(header["W_LONG"], order)
            lat_inc = _as_float(header["LAT_INC"], order)
            long_inc = _as_float(header["LONG_INC"], order)
            gs_count = _as_int(header["GS_COUNT"], order)
        except KeyError as err:
            raise ValueError(f"NTv2 sub-grid header missing record {err}") from err

        rows = int(round((n_lat - s_lat) / lat_inc)) + 1
        cols = int(round((w_long - e_long) / long_inc)) + 1
        if rows * cols != gs_count:
            raise ValueError(
                f"NTv2 sub-grid size mismatch: {rows}x{cols} nodes but GS_COUNT={gs_count}"
            )
        if offset + gs_count * _RECORD_SIZE > len(buf):
            raise ValueError("Truncated NTv2 file: shift records run past end of data")

        # Records: lat shift, lon shift (positive west), lat acc, lon acc
        data = np.frombuffer(
            buf, dtype=np.dtype(order + "f4"), count=gs_count * 4, offset=offset
        ).reshape(rows, cols, 4)
        offset += gs_count * _RECORD_SIZE

        # Rows run east to west; flip to west to east
        data = data[:, ::-1, :].astype(np.float64)

        subgrids.append(
            NTv2Subgrid(
                name=_as_str(header.get("SUB_NAME", b"")),
                parent=_as_str(header.get("PARENT", b"NONE")),
                lon_min=-w_long * to_rad,
                lat_min=s_lat * to_rad,
                lon_step=long_inc * to_rad,
                lat_step=lat_inc * to_rad,
                lon_shift=-data[:, :, 1] * to_rad,
                lat_shift=data[:, :, 0] * to_rad,
            )
        )

    if not subgrids:
        raise ValueError("NTv2 file contains no sub-grids")
    return subgrids


def parse_ntv2_file(filepath: str | Path) -> list[NTv2Subgrid]:
    """Parse an NTv2 grid-shift file from disk.

    Args:
        filepath: Path to the ``.gsb`` file.

    Returns:
        Sub-grids in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a well-formed NTv2 file.
    """
    with open(filepath, "rb") as f:
        return parse_ntv2_bytes(f.read())
