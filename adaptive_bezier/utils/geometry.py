"""2D point value type and polyline helpers.

Provides:
    - Point: immutable (x, y) value with the vector operations the flattener needs
      (add/sub, scalar mul/div, perp product, squared norm, direction angle)
    - Polyline length
    - Conversions: list[Point] → torch.Tensor (N, 2), list[Point] → np.ndarray (N, 2)

Used by:
    - Flattener: de Casteljau midpoints and flatness classification
    - CLI: serialization and summary of flattened polylines
    - Hashing: float64 arrays for provenance digests

All arithmetic is IEEE double precision. Conversions to tensors default to
float64 so that flattened coordinates are not rounded on the way out.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

import numpy as np
import torch

TAU = 2.0 * math.pi


@dataclass(frozen=True)
class Point:
    """Immutable 2D point / vector."""
    x: float
    y: float

    @classmethod
    def of(cls, p: Union["Point", Sequence[float], np.ndarray, torch.Tensor]) -> "Point":
        """Coerce a Point, (x, y) pair, numpy row or tensor of shape (2,)."""
        if isinstance(p, Point):
            return p
        if isinstance(p, torch.Tensor):
            p = p.detach().cpu().tolist()
        if len(p) != 2:
            raise ValueError(f"Expected a 2D point, got {len(p)} components: {p!r}")
        return cls(float(p[0]), float(p[1]))

    def __add__(self, o: "Point") -> "Point":
        return Point(self.x + o.x, self.y + o.y)

    def __sub__(self, o: "Point") -> "Point":
        return Point(self.x - o.x, self.y - o.y)

    def __mul__(self, k: float) -> "Point":
        return Point(self.x * k, self.y * k)

    __rmul__ = __mul__

    def __truediv__(self, k: float) -> "Point":
        return Point(self.x / k, self.y / k)

    def perp(self, o: "Point") -> float:
        """Perpendicular (2D cross) product: x*o.y - y*o.x."""
        return self.x * o.y - self.y * o.x

    def dot(self, o: "Point") -> float:
        return self.x * o.x + self.y * o.y

    def norm_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def angle(self) -> float:
        """Direction angle atan2(y, x) in radians."""
        return math.atan2(self.y, self.x)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point, Sequence[float], np.ndarray, torch.Tensor]


def midpoint(a: Point, b: Point) -> Point:
    """(a + b) / 2, component-wise."""
    return (a + b) / 2.0


def clamp_angle(a: float) -> float:
    """Fold an absolute angle difference into [0, π]."""
    if a >= math.pi:
        return TAU - a
    return a


def polyline_length(points: Sequence[Point]) -> float:
    """Sum of Euclidean distances between consecutive points (0.0 if < 2 points)."""
    if len(points) < 2:
        return 0.0
    return sum((b - a).norm() for a, b in zip(points[:-1], points[1:]))


def points_to_tensor(
    points: Iterable[Point],
    dtype: torch.dtype = torch.float64,
    device=None
) -> torch.Tensor:
    """Stack points into a tensor of shape (N, 2)."""
    data = [p.as_tuple() for p in points]
    if not data:
        return torch.empty(0, 2, dtype=dtype, device=device)
    return torch.tensor(data, dtype=dtype, device=device)


def points_to_array(points: Iterable[Point]) -> np.ndarray:
    """Stack points into a float64 array of shape (N, 2)."""
    arr = np.array([p.as_tuple() for p in points], dtype=np.float64)
    return arr.reshape(-1, 2)
