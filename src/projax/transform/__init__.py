"""Transform strategy, pipeline and the public transform object.

Typical usage::

    from projax.transform import create_transform
    t = create_transform(source_crs, target_crs)
    out = t.transform_array(points)
"""

from projax.transform._pipeline import PipelineStatus, create_pipeline
from projax.transform._strategy import TransformStrategy, compute_strategy
from projax.transform._transform import CoordinateTransform, create_transform

__all__ = [
    "CoordinateTransform",
    "PipelineStatus",
    "TransformStrategy",
    "compute_strategy",
    "create_pipeline",
    "create_transform",
]
