"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Point value type & polyline helpers (geometry)
    - Config validation (validators)
    - Atomic I/O and YAML (fs)
    - Hashing for provenance (hashing)
    - Unified logging (logging_config)
    - Profiling (profiler)

No module in utils/ may import from upper layers (flattener, scripts).

Convenience imports:
    from adaptive_bezier.utils import fs, geometry, validators
    from adaptive_bezier.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import hashing
from . import logging_config
from . import profiler
from . import validators

from .geometry import Point
from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'geometry',
    'hashing',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'Point',
    'setup_logging',
    'get_logger',
    'push_context',
]
