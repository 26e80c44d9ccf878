"""Test the Point value type and polyline helpers.

Tests for adaptive_bezier.utils.geometry:
    - Point arithmetic: add/sub, scalar mul/div, perp, dot, norms, angle
    - Point immutability and coercion (tuple, numpy row, tensor)
    - Polyline length (incl. empty / single point)
    - Tensor and numpy conversions
    - clamp_angle folding

Run:
    pytest tests/test_geometry.py -v
"""

import dataclasses
import math

import numpy as np
import pytest
import torch

from adaptive_bezier.utils import geometry
from adaptive_bezier.utils.geometry import Point


def test_point_arithmetic():
    a = Point(1.0, 2.0)
    b = Point(4.0, -1.0)

    assert a + b == Point(5.0, 1.0)
    assert b - a == Point(3.0, -3.0)
    assert a * 2.0 == Point(2.0, 4.0)
    assert 2.0 * a == Point(2.0, 4.0)
    assert b / 2.0 == Point(2.0, -0.5)


def test_point_perp_and_dot():
    a = Point(1.0, 2.0)
    b = Point(3.0, 4.0)

    assert a.perp(b) == 1.0 * 4.0 - 2.0 * 3.0
    assert b.perp(a) == -a.perp(b)
    assert a.perp(a) == 0.0
    assert a.dot(b) == 11.0


def test_point_norms_and_angle():
    v = Point(3.0, 4.0)
    assert v.norm_squared() == 25.0
    assert v.norm() == 5.0
    assert Point(0.0, 1.0).angle() == pytest.approx(math.pi / 2)
    assert Point(-1.0, 0.0).angle() == pytest.approx(math.pi)


def test_point_is_immutable():
    p = Point(1.0, 2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.x = 3.0


def test_point_of_coercion():
    expected = Point(1.5, -2.0)
    assert Point.of(expected) is expected
    assert Point.of((1.5, -2.0)) == expected
    assert Point.of([1.5, -2.0]) == expected
    assert Point.of(np.array([1.5, -2.0])) == expected
    assert Point.of(torch.tensor([1.5, -2.0])) == expected


def test_point_of_rejects_wrong_arity():
    with pytest.raises(ValueError, match="2D point"):
        Point.of((1.0, 2.0, 3.0))


def test_midpoint():
    assert geometry.midpoint(Point(0.0, 0.0), Point(2.0, 4.0)) == Point(1.0, 2.0)


def test_clamp_angle():
    assert geometry.clamp_angle(0.5) == 0.5
    assert geometry.clamp_angle(math.pi) == pytest.approx(math.pi)
    assert geometry.clamp_angle(1.5 * math.pi) == pytest.approx(0.5 * math.pi)


def test_polyline_length():
    pts = [Point(0.0, 0.0), Point(3.0, 4.0), Point(3.0, 10.0)]
    assert geometry.polyline_length(pts) == pytest.approx(11.0)
    assert geometry.polyline_length(pts[:1]) == 0.0
    assert geometry.polyline_length([]) == 0.0


def test_points_to_tensor_keeps_float64():
    pts = [Point(0.1, 0.2), Point(1.0 / 3.0, 2.0 / 3.0)]
    t = geometry.points_to_tensor(pts)

    assert t.shape == (2, 2)
    assert t.dtype == torch.float64
    assert t[1, 0].item() == 1.0 / 3.0


def test_points_to_tensor_dtype():
    t = geometry.points_to_tensor([Point(1.0, 2.0)], dtype=torch.float32)
    assert t.dtype == torch.float32


def test_points_to_tensor_empty():
    t = geometry.points_to_tensor([])
    assert t.shape == (0, 2)


def test_points_to_array():
    arr = geometry.points_to_array([Point(1.0, 2.0), Point(3.0, 4.0)])
    assert arr.dtype == np.float64
    assert arr.shape == (2, 2)
    np.testing.assert_array_equal(arr, [[1.0, 2.0], [3.0, 4.0]])
    assert geometry.points_to_array([]).shape == (0, 2)
