"""SHA-256 hashing for polyline and config provenance.

Provides:
    - sha256_points(): Hash a flattened polyline (float64 bytes, row-major)
    - sha256_string(): Hash UTF-8 text
    - hash_dict(): Hash JSON-serializable dicts (sorted keys)

Flattening is a pure function, so equal inputs must produce equal hashes.
The polylines.v1 output records sha256_points() per curve and hash_dict() of the
flatten config, so two outputs can be compared without diffing coordinates.

Deterministic hashing:
    - Points converted to a (N, 2) float64 numpy array, then .tobytes()
    - Dicts serialized as JSON with sorted keys
    - Results are hex strings (64 chars)

Note: Module named `hashing.py` to avoid shadowing builtin `hash()`.
"""

import hashlib
import json
from typing import Iterable

from .geometry import Point, points_to_array


def sha256_points(points: Iterable[Point]) -> str:
    """Compute SHA-256 hash of a polyline.

    Parameters
    ----------
    points : Iterable[Point]
        Polyline vertices

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Examples
    --------
    >>> pts = adaptive_bezier_curve(start, c1, c2, end, 2.0)
    >>> assert sha256_points(pts) == sha256_points(adaptive_bezier_curve(start, c1, c2, end, 2.0))
    """
    arr = points_to_array(points)
    sha256 = hashlib.sha256()
    sha256.update(arr.tobytes())
    return sha256.hexdigest()


def sha256_string(s: str) -> str:
    """Compute SHA-256 hash of string."""
    sha256 = hashlib.sha256()
    sha256.update(s.encode('utf-8'))
    return sha256.hexdigest()


def hash_dict(d: dict) -> str:
    """Compute SHA-256 hash of dictionary (sorted keys).

    Notes
    -----
    Must be JSON-serializable. Used for config hashing.
    """
    json_str = json.dumps(d, sort_keys=True)
    return sha256_string(json_str)
