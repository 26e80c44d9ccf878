"""YAML schema validation and config loading.

Provides centralized validation for all configuration files using pydantic:
    - Flatten schema (flatten.v1.yaml): recursion limit, tolerances, angle/cusp knobs
    - Curves schema (curves.v1.yaml): cubic Bézier control points + scale per curve
    - Polylines schema (polylines.v1.yaml): flattened output with provenance hash

All modules must use these validators to load configs for fail-fast error detection
with actionable messages (offending keys, expected ranges).

Single source of truth: the flattening defaults below are the reference values;
flattener.adaptive re-exports them as module constants.

Usage:
    from adaptive_bezier.utils import validators

    cfg = validators.load_flatten_config("configs/flatten.v1.yaml")
    curves = validators.validate_curves_file("curves.yaml")
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# FLATTEN DEFAULTS
# ============================================================================

RECURSION_LIMIT = 8
FLOAT_EPSILON = 1.19209290e-7        # f32 machine epsilon, collinearity noise floor
PATH_DISTANCE_EPSILON = 1.0          # device-space error budget
CURVE_ANGLE_TOLERANCE_EPSILON = 0.01 # angle refinement is off below this
ANGLE_TOLERANCE = 0.0
CUSP_LIMIT = 0.0


# ============================================================================
# FLATTEN SCHEMA V1
# ============================================================================

class FlattenConfigV1(BaseModel):
    """Adaptive flattening configuration (flatten.v1.yaml schema).

    Defaults reproduce the reference behaviour: distance test only, angle and
    cusp refinement dormant.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    schema_version: str = Field("flatten.v1", alias="schema", description="Schema version")
    recursion_limit: int = Field(RECURSION_LIMIT, ge=0, le=16,
                                 description="Deepest subdivision level that may emit points")
    distance_epsilon: float = Field(PATH_DISTANCE_EPSILON, gt=0.0,
                                    description="Error budget in device units")
    float_epsilon: float = Field(FLOAT_EPSILON, gt=0.0,
                                 description="Noise floor for control point deviation")
    angle_tolerance: float = Field(ANGLE_TOLERANCE, ge=0.0,
                                   description="Angle refinement tolerance (radians)")
    angle_tolerance_epsilon: float = Field(CURVE_ANGLE_TOLERANCE_EPSILON, gt=0.0,
                                           description="angle_tolerance below this disables refinement")
    cusp_limit: float = Field(CUSP_LIMIT, ge=0.0, description="Cusp limit (radians), 0 = off")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "flatten.v1":
            raise ValueError(f"Expected schema 'flatten.v1', got '{v}'")
        return v

    @property
    def angle_refinement_enabled(self) -> bool:
        return self.angle_tolerance >= self.angle_tolerance_epsilon


DEFAULT_FLATTEN_CONFIG = FlattenConfigV1()


# ============================================================================
# CURVES SCHEMA V1
# ============================================================================

class CurveSpec(BaseModel):
    """Single cubic Bézier to flatten."""
    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(..., description="Curve identifier")
    start: Tuple[float, float] = Field(..., description="Start point (x, y)")
    c1: Tuple[float, float] = Field(..., description="First control point (x, y)")
    c2: Tuple[float, float] = Field(..., description="Second control point (x, y)")
    end: Tuple[float, float] = Field(..., description="End point (x, y)")
    scale: float = Field(1.0, gt=0.0, description="Resolution / zoom factor")

    @field_validator('id')
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Curve ID must be non-empty")
        return v


class CurvesFileV1(BaseModel):
    """Container for multiple curves (YAML file format)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("curves.v1", alias="schema", description="Schema version")
    curves: List[CurveSpec] = Field(..., description="List of curves")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "curves.v1":
            raise ValueError(f"Expected schema 'curves.v1', got '{v}'")
        return v

    @field_validator('curves')
    @classmethod
    def validate_unique_ids(cls, v: List[CurveSpec]) -> List[CurveSpec]:
        seen = set()
        for i, curve in enumerate(v):
            if curve.id in seen:
                raise ValueError(f"Duplicate curve id '{curve.id}' at index {i}")
            seen.add(curve.id)
        return v


# ============================================================================
# POLYLINES SCHEMA V1
# ============================================================================

class PolylineRecord(BaseModel):
    """Flattened curve."""
    id: str = Field(..., description="Source curve identifier")
    scale: float = Field(..., gt=0.0, description="Scale the curve was flattened at")
    points: List[Tuple[float, float]] = Field(..., description="Polyline vertices (x, y)")
    sha256: str = Field(..., description="Hash of the float64 point array")

    @field_validator('points')
    @classmethod
    def validate_points(cls, v: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        if len(v) < 2:
            raise ValueError(f"Polyline needs at least 2 points, got {len(v)}")
        return v

    @field_validator('sha256')
    @classmethod
    def validate_sha256(cls, v: str) -> str:
        if len(v) != 64:
            raise ValueError(f"sha256 must be 64 hex chars, got {len(v)}")
        return v


class PolylinesFileV1(BaseModel):
    """Container for flattened polylines (polylines.v1.yaml)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("polylines.v1", alias="schema", description="Schema version")
    config: FlattenConfigV1 = Field(default_factory=FlattenConfigV1)
    config_sha256: Optional[str] = Field(None, description="hash_dict() of the config as dumped by alias")
    polylines: List[PolylineRecord] = Field(..., description="Flattened curves")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "polylines.v1":
            raise ValueError(f"Expected schema 'polylines.v1', got '{v}'")
        return v

    @field_validator('config_sha256')
    @classmethod
    def validate_config_sha256(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) != 64:
            raise ValueError(f"config_sha256 must be 64 hex chars, got {len(v)}")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_flatten_config(path: Union[str, Path]) -> FlattenConfigV1:
    """Load and validate flattening config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to flatten.v1.yaml file

    Returns
    -------
    FlattenConfigV1
        Validated flattening configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Flatten config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return FlattenConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Flatten config validation failed at {path}: {e}") from e


def validate_curves_file(path: Union[str, Path]) -> CurvesFileV1:
    """Load and validate curves file from YAML.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (message includes the offending curve index)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Curves file not found: {path}")

    data = fs.load_yaml(path)
    try:
        return CurvesFileV1(**data)
    except Exception as e:
        raise ValueError(f"Curves file validation failed at {path}: {e}") from e


def load_polylines_file(path: Union[str, Path]) -> PolylinesFileV1:
    """Load and validate a polylines.v1 file written by the CLI."""
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Polylines file not found: {path}")

    data = fs.load_yaml(path)
    try:
        return PolylinesFileV1(**data)
    except Exception as e:
        raise ValueError(f"Polylines file validation failed at {path}: {e}") from e
