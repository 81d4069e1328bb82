"""Map projection families and their axis/meridian metadata.

Each projection exposes ``project_radians`` and ``inverse_project_radians``
returning ``(x, y, ok)``, plus the ``axis_order`` and ``prime_meridian``
consumed by the transform pipeline.  New families subclass
:class:`Projection` and implement ``project``/``project_inverse`` on the
unit ellipsoid.
"""

from projax.projections._axis import ENU, NEU, AxisOrder
from projax.projections._base import Projection
from projax.projections._meridian import GREENWICH, PRIME_MERIDIANS, PrimeMeridian
from projax.projections.lambert_conformal_conic import LambertConformalConicProjection
from projax.projections.longlat import LongLatProjection
from projax.projections.mercator import MercatorProjection
from projax.projections.transverse_mercator import TransverseMercatorProjection

__all__ = [
    "AxisOrder",
    "ENU",
    "GREENWICH",
    "LambertConformalConicProjection",
    "LongLatProjection",
    "MercatorProjection",
    "NEU",
    "PRIME_MERIDIANS",
    "PrimeMeridian",
    "Projection",
    "TransverseMercatorProjection",
]
