"""Golden test comparison script for CI.

Flattens the curve stored in each golden fixture and validates the output
against the recorded reference polyline:
    - Loads fixtures from ci/golden_tests/expected/*.yaml
    - Runs adaptive_bezier_curve() with the default (reference) config
    - Checks point count exactly and each coordinate within tolerance
    - Prints a pass/fail line per fixture and an overall summary

CLI:
    python ci/golden_tests/compare.py --golden ci/golden_tests/expected/simple.yaml
    python ci/golden_tests/compare.py --all

Expected format (ci/golden_tests/expected/simple.yaml):
    curve:
      id: simple
      start: [20.0, 20.0]
      c1: [100.0, 159.0]
      c2: [50.0, 200.0]
      end: [200.0, 20.0]
      scale: 2.0
    tolerance: 1.19209290e-7
    points:
      - [20.0, 20.0]
      - ...

Exit codes:
    0: All fixtures matched
    1: One or more fixtures failed
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from adaptive_bezier.flattener import adaptive_bezier_curve
from adaptive_bezier.utils import fs, logging_config, validators
from adaptive_bezier.utils.geometry import Point

logger = logging.getLogger(__name__)

EXPECTED_DIR = Path(__file__).parent / 'expected'


@dataclass
class GoldenResult:
    """Outcome of one fixture comparison."""
    name: str
    expected_count: int
    actual_count: int
    max_abs_err: float
    tolerance: float
    failures: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures


def compare_points(
    actual: List[Point],
    expected: List[Point],
    tolerance: float
) -> List[str]:
    """List human-readable mismatches (empty when the polylines agree)."""
    if len(actual) != len(expected):
        return [f"point count {len(actual)} != expected {len(expected)}"]

    failures = []
    for i, (a, e) in enumerate(zip(actual, expected)):
        if abs(a.x - e.x) >= tolerance or abs(a.y - e.y) >= tolerance:
            failures.append(
                f"point {i}: ({a.x!r}, {a.y!r}) != expected ({e.x!r}, {e.y!r})"
            )
    return failures


def run_golden(path: Path, config: Optional[validators.FlattenConfigV1] = None) -> GoldenResult:
    """Flatten one fixture and compare it to its recorded points."""
    data = fs.load_yaml(path)
    curve = validators.CurveSpec(**data['curve'])
    tolerance = float(data.get('tolerance', validators.FLOAT_EPSILON))
    expected = [Point.of(p) for p in data['points']]

    actual = adaptive_bezier_curve(curve.start, curve.c1, curve.c2, curve.end, curve.scale, config)

    max_err = 0.0
    if len(actual) == len(expected):
        max_err = max(
            (max(abs(a.x - e.x), abs(a.y - e.y)) for a, e in zip(actual, expected)),
            default=0.0
        )

    return GoldenResult(
        name=path.stem,
        expected_count=len(expected),
        actual_count=len(actual),
        max_abs_err=max_err,
        tolerance=tolerance,
        failures=compare_points(actual, expected, tolerance),
    )


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Compare flattener output against golden fixtures")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--golden', type=str, help='Single fixture YAML')
    group.add_argument('--all', action='store_true', help=f'All fixtures in {EXPECTED_DIR}')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging_config.setup_logging(
        log_level="DEBUG" if args.verbose else "INFO",
        context={"app": "golden"}
    )

    paths = [Path(args.golden)] if args.golden else sorted(EXPECTED_DIR.glob('*.yaml'))
    if not paths:
        logger.error(f"No golden fixtures found in {EXPECTED_DIR}")
        return 1

    results = []
    for p in paths:
        try:
            results.append(run_golden(p))
        except (FileNotFoundError, KeyError, TypeError, ValueError, yaml.YAMLError) as e:
            results.append(GoldenResult(
                name=p.stem, expected_count=0, actual_count=0, max_abs_err=0.0,
                tolerance=0.0, failures=[f"invalid fixture: {e!r}"]
            ))

    for r in results:
        status = "PASS" if r.passed else "FAIL"
        logger.info(
            f"[{status}] {r.name}: {r.actual_count}/{r.expected_count} points, "
            f"max |err| {r.max_abs_err:.3e} (tol {r.tolerance:.3e})"
        )
        for failure in r.failures:
            logger.error(f"  {r.name}: {failure}")

    n_failed = sum(not r.passed for r in results)
    logger.info(f"{len(results) - n_failed}/{len(results)} golden fixture(s) passed")
    return 1 if n_failed else 0


if __name__ == "__main__":
    sys.exit(main())
