"""Adaptive Bézier flattening: cubic curves → scale-aware polylines.

This package converts cubic Bézier segments into ordered vertex lists for
rasterizers, stroke generators and hit-testing code that only understand
polylines.

Architecture layers (strict one-way dependency):
    scripts/ → adaptive_bezier/flattener/ → adaptive_bezier/utils/

Key invariants:
    - Error budget is defined in device units; curve-space tolerance shrinks as scale grows
    - Output starts at the start point and ends at the end point, verbatim
    - Interior points are emitted in curve-parameter order
    - Recursion depth is bounded (recursion_limit, default 8)
    - YAML-only configs
"""

__version__ = "1.0.0"
