"""Axis-order bookkeeping.

An :class:`AxisOrder` describes how the three ordinates of a CRS map onto
the canonical east/north/up axes.  It is written as a three-letter string,
one letter per ordinate: ``e``/``w`` for east/west, ``n``/``s`` for
north/south and ``u``/``d`` for up/down.  ``"enu"`` is the identity,
``"neu"`` swaps the horizontal ordinates and ``"wsu"`` negates them.
"""

from __future__ import annotations

from dataclasses import dataclass

from jax.typing import ArrayLike

_AXIS_INDEX = {"e": 0, "w": 0, "n": 1, "s": 1, "u": 2, "d": 2}
_NEGATED = frozenset("wsd")


@dataclass(frozen=True)
class AxisOrder:
    """Signed permutation of the east/north/up axes.

    Args:
        axes: Three-letter axis string such as ``"enu"`` or ``"neu"``.

    Raises:
        ValueError: If *axes* is not a signed permutation of ``e, n, u``.
    """

    axes: str = "enu"

    def __post_init__(self) -> None:
        axes = self.axes.lower()
        if len(axes) != 3 or any(c not in _AXIS_INDEX for c in axes):
            raise ValueError(f"Invalid axis order '{self.axes}'")
        if sorted(_AXIS_INDEX[c] for c in axes) != [0, 1, 2]:
            raise ValueError(f"Axis order '{self.axes}' must name each axis exactly once")
        object.__setattr__(self, "axes", axes)

    @property
    def is_enu(self) -> bool:
        return self.axes == "enu"

    def to_enu(self, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> tuple:
        """Reorder native ordinates into ``(east, north, up)``."""
        if self.is_enu:
            return x, y, z
        enu = [None, None, None]
        for c, v in zip(self.axes, (x, y, z)):
            enu[_AXIS_INDEX[c]] = -v if c in _NEGATED else v
        return tuple(enu)

    def from_enu(self, e: ArrayLike, n: ArrayLike, u: ArrayLike) -> tuple:
        """Reorder ``(east, north, up)`` into native ordinates."""
        if self.is_enu:
            return e, n, u
        enu = (e, n, u)
        return tuple(
            -enu[_AXIS_INDEX[c]] if c in _NEGATED else enu[_AXIS_INDEX[c]]
            for c in self.axes
        )


ENU = AxisOrder("enu")
NEU = AxisOrder("neu")
