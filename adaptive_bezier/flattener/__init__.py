"""Adaptive cubic Bézier flattener.

Convenience imports:
    from adaptive_bezier.flattener import adaptive_bezier_curve, subdivide
"""

from .adaptive import (
    ANGLE_TOLERANCE,
    CURVE_ANGLE_TOLERANCE_EPSILON,
    CUSP_LIMIT,
    FLOAT_EPSILON,
    PATH_DISTANCE_EPSILON,
    RECURSION_LIMIT,
    adaptive_bezier_curve,
    bezier_cubic_polyline,
    flatten_curves,
    max_point_count,
    subdivide,
    tolerance_for_scale,
)

__all__ = [
    'ANGLE_TOLERANCE',
    'CURVE_ANGLE_TOLERANCE_EPSILON',
    'CUSP_LIMIT',
    'FLOAT_EPSILON',
    'PATH_DISTANCE_EPSILON',
    'RECURSION_LIMIT',
    'adaptive_bezier_curve',
    'bezier_cubic_polyline',
    'flatten_curves',
    'max_point_count',
    'subdivide',
    'tolerance_for_scale',
]
