"""Adaptive flattening of cubic Bézier curves into polylines.

Given four control points and a resolution scale, produces an ordered list of
points approximating the curve to within a device-space error budget:

    distance_tolerance = (distance_epsilon / scale) ** 2

so a larger scale (zoom) yields a tighter curve-space tolerance and more points.

Algorithm (recursive de Casteljau subdivision at t=0.5):
    - Level 0 always splits, so visually non-trivial curves with a flat chord
      never collapse to two points
    - Level > 0 classifies the segment by the deviation of p2/p3 from the chord
      p1→p4 (general, only p2 off-chord, only p3 off-chord, fully collinear)
      and stops as soon as the distance test passes
    - Levels beyond recursion_limit emit nothing (accepts a coarser result on
      near-cusps instead of recursing forever)

Output invariants:
    - First point is `start`, last point is `end`, both appended verbatim
    - Interior points are appended in curve-parameter order (left half first)
    - len(points) <= 2 + 2 ** (recursion_limit + 1)

Angle and cusp refinement is wired in but dormant under the default config
(angle_tolerance 0.0 is below angle_tolerance_epsilon, cusp_limit 0.0 is off).

Usage:
    from adaptive_bezier.flattener import adaptive_bezier_curve

    pts = adaptive_bezier_curve((20, 20), (100, 159), (50, 200), (200, 20), scale=2.0)
"""

import logging
import math
from typing import Iterable, List, Optional

import torch

from adaptive_bezier.utils import profiler
from adaptive_bezier.utils.geometry import (
    Point,
    PointLike,
    clamp_angle,
    midpoint,
    points_to_tensor,
)
from adaptive_bezier.utils.validators import (
    ANGLE_TOLERANCE,
    CURVE_ANGLE_TOLERANCE_EPSILON,
    CUSP_LIMIT,
    DEFAULT_FLATTEN_CONFIG,
    FLOAT_EPSILON,
    PATH_DISTANCE_EPSILON,
    RECURSION_LIMIT,
    CurveSpec,
    FlattenConfigV1,
)

logger = logging.getLogger(__name__)

__all__ = [
    'RECURSION_LIMIT',
    'FLOAT_EPSILON',
    'PATH_DISTANCE_EPSILON',
    'CURVE_ANGLE_TOLERANCE_EPSILON',
    'ANGLE_TOLERANCE',
    'CUSP_LIMIT',
    'tolerance_for_scale',
    'max_point_count',
    'adaptive_bezier_curve',
    'subdivide',
    'bezier_cubic_polyline',
    'flatten_curves',
]


def tolerance_for_scale(scale: float, config: Optional[FlattenConfigV1] = None) -> float:
    """Squared curve-space tolerance for a given scale.

    Raises
    ------
    ValueError
        If scale is not a finite positive number
    """
    cfg = config or DEFAULT_FLATTEN_CONFIG
    if not (math.isfinite(scale) and scale > 0.0):
        raise ValueError(f"scale must be a finite positive number, got {scale!r}")
    t = cfg.distance_epsilon / scale
    return t * t


def max_point_count(config: Optional[FlattenConfigV1] = None) -> int:
    """Upper bound on len(adaptive_bezier_curve(...)) for a config."""
    cfg = config or DEFAULT_FLATTEN_CONFIG
    return 2 + 2 ** (cfg.recursion_limit + 1)


def adaptive_bezier_curve(
    start: PointLike,
    c1: PointLike,
    c2: PointLike,
    end: PointLike,
    scale: float,
    config: Optional[FlattenConfigV1] = None
) -> List[Point]:
    """Flatten a cubic Bézier into an ordered list of points.

    Parameters
    ----------
    start, c1, c2, end : PointLike
        Control points (Point, (x, y) pair, numpy row or tensor of shape (2,)).
        Coordinates must be finite.
    scale : float
        Resolution / zoom factor, > 0
    config : FlattenConfigV1, optional
        Tuning knobs; defaults reproduce the reference behaviour

    Returns
    -------
    List[Point]
        Polyline vertices, len >= 2; [0] is start, [-1] is end

    Raises
    ------
    ValueError
        If scale is not a finite positive number
    """
    cfg = config or DEFAULT_FLATTEN_CONFIG
    tol = tolerance_for_scale(scale, cfg)

    start, c1, c2, end = Point.of(start), Point.of(c1), Point.of(c2), Point.of(end)

    points = [start]
    subdivide(start, c1, c2, end, points, tol, 0, cfg)
    points.append(end)

    logger.debug("Flattened cubic into %d points (scale=%g, tol=%g)", len(points), scale, tol)
    return points


def subdivide(
    p1: Point,
    p2: Point,
    p3: Point,
    p4: Point,
    points: List[Point],
    distance_tolerance: float,
    level: int,
    config: Optional[FlattenConfigV1] = None
) -> None:
    """Recursive subdivision step; appends interior points to `points`.

    Parameters
    ----------
    p1, p2, p3, p4 : Point
        Control quad of the current segment
    points : List[Point]
        Shared output list (append-only)
    distance_tolerance : float
        Squared curve-space tolerance, constant across the recursion
    level : int
        Recursion level, 0 at the root
    config : FlattenConfigV1, optional
        Tuning knobs

    Notes
    -----
    Only-p2 and only-p3 branches are asymmetric on success (p2 vs. p2 then p3).
    Anti-Grain Geometry's curve4_div emits p1234 in all three non-collinear
    branches; here the only-p2 branch emits the control point p2 itself, which
    need not lie on the curve (e.g. (0,0),(1,0),(2,1e-3),(3,0) at scale 1
    yields (0.5, 0.0)).
    """
    cfg = config or DEFAULT_FLATTEN_CONFIG
    if level > cfg.recursion_limit:
        return

    # de Casteljau at t=0.5
    p12 = midpoint(p1, p2)
    p23 = midpoint(p2, p3)
    p34 = midpoint(p3, p4)
    p123 = midpoint(p12, p23)
    p234 = midpoint(p23, p34)
    p1234 = midpoint(p123, p234)

    if level > 0 and _try_flat(p1, p2, p3, p4, p1234, points, distance_tolerance, cfg):
        return

    subdivide(p1, p12, p123, p1234, points, distance_tolerance, level + 1, cfg)
    subdivide(p1234, p234, p34, p4, points, distance_tolerance, level + 1, cfg)


def _try_flat(
    p1: Point,
    p2: Point,
    p3: Point,
    p4: Point,
    p1234: Point,
    points: List[Point],
    tol: float,
    cfg: FlattenConfigV1
) -> bool:
    """Append the flat approximation of a segment; False means split further."""
    eps = cfg.float_epsilon
    d = p4 - p1
    d2 = abs((p2 - p4).perp(d))
    d3 = abs((p3 - p4).perp(d))

    if d2 > eps and d3 > eps:
        # General case
        if (d2 + d3) * (d2 + d3) > tol * d.norm_squared():
            return False
        if not cfg.angle_refinement_enabled:
            points.append(p1234)
            return True

        a23 = (p3 - p2).angle()
        da1 = clamp_angle(abs(a23 - (p2 - p1).angle()))
        da2 = clamp_angle(abs((p4 - p3).angle() - a23))
        if da1 + da2 < cfg.angle_tolerance:
            points.append(p1234)
            return True
        if cfg.cusp_limit != 0.0:
            if da1 > cfg.cusp_limit:
                points.append(p2)
                return True
            if da2 > cfg.cusp_limit:
                points.append(p3)
                return True
        return False

    if d2 > eps:
        # p1, p3, p4 collinear
        if d2 * d2 > tol * d.norm_squared():
            return False
        if not cfg.angle_refinement_enabled:
            points.append(p2)
            return True

        da1 = clamp_angle(abs((p3 - p2).angle() - (p2 - p1).angle()))
        if da1 < cfg.angle_tolerance:
            points.append(p2)
            points.append(p3)
            return True
        if cfg.cusp_limit != 0.0 and da1 > cfg.cusp_limit:
            points.append(p2)
            return True
        return False

    if d3 > eps:
        # p1, p2, p4 collinear
        if d3 * d3 > tol * d.norm_squared():
            return False
        if not cfg.angle_refinement_enabled:
            points.append(p2)
            points.append(p3)
            return True

        da1 = clamp_angle(abs((p4 - p3).angle() - (p3 - p2).angle()))
        if da1 < cfg.angle_tolerance:
            points.append(p2)
            points.append(p3)
            return True
        if cfg.cusp_limit != 0.0 and da1 > cfg.cusp_limit:
            points.append(p3)
            return True
        return False

    # Fully collinear (includes zero-length chord)
    if (p1234 - midpoint(p1, p4)).norm_squared() < tol:
        points.append(p1234)
        return True
    return False


def bezier_cubic_polyline(
    p1: torch.Tensor,
    p2: torch.Tensor,
    p3: torch.Tensor,
    p4: torch.Tensor,
    scale: float = 1.0,
    config: Optional[FlattenConfigV1] = None
) -> torch.Tensor:
    """Tensor front end for adaptive_bezier_curve().

    Parameters
    ----------
    p1, p2, p3, p4 : torch.Tensor
        Control points, shape (2,)
    scale : float
        Resolution / zoom factor, > 0
    config : FlattenConfigV1, optional
        Tuning knobs

    Returns
    -------
    torch.Tensor
        Polyline vertices, shape (N, 2), N >= 2, on p1's device and dtype

    Notes
    -----
    Subdivision runs in float64 on CPU; only the result is cast back.
    """
    pts = adaptive_bezier_curve(p1, p2, p3, p4, scale, config)
    return points_to_tensor(pts, dtype=p1.dtype, device=p1.device)


def flatten_curves(
    curves: Iterable[CurveSpec],
    config: Optional[FlattenConfigV1] = None
) -> List[List[Point]]:
    """Flatten each curve independently, preserving input order."""
    cfg = config or DEFAULT_FLATTEN_CONFIG
    curves = list(curves)
    results = []

    def _log_elapsed(name: str, elapsed: float) -> None:
        logger.info(
            "%s: %d curve(s), %d point(s) in %.3f s",
            name, len(results), sum(len(r) for r in results), elapsed
        )

    with profiler.timer("flatten_curves", sink=_log_elapsed):
        for curve in curves:
            pts = adaptive_bezier_curve(curve.start, curve.c1, curve.c2, curve.end, curve.scale, cfg)
            logger.debug("Curve %s: %d points", curve.id, len(pts))
            results.append(pts)

    return results
