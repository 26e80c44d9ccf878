#!/usr/bin/env python3
"""Flatten cubic Bézier curves into polylines.

CLI front end for adaptive_bezier.flattener: reads curves from a curves.v1
YAML file (or a single inline curve), flattens each one and writes a
polylines.v1 YAML file with a SHA-256 per polyline and one for the config.

Usage:
    # From YAML file
    python scripts/flatten_curve.py --curve_file curves.yaml --output outputs/polylines.yaml

    # Single curve with inline parameters
    python scripts/flatten_curve.py --inline \
        --x1 20 --y1 20 --x2 100 --y2 159 --x3 50 --y3 200 --x4 200 --y4 20 \
        --scale 2.0

    # Custom tuning
    python scripts/flatten_curve.py --curve_file curves.yaml --config configs/flatten.v1.yaml

Input format (curves.v1):
    schema: curves.v1
    curves:
      - {id: arch, start: [20, 20], c1: [100, 159], c2: [50, 200], end: [200, 20], scale: 2.0}

Exit codes:
    0: All curves flattened
    1: Invalid input or config
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from adaptive_bezier.flattener import flatten_curves
from adaptive_bezier.utils import fs, hashing, logging_config, validators
from adaptive_bezier.utils.geometry import Point, polyline_length

logger = logging.getLogger(__name__)

INLINE_COORDS = ('x1', 'y1', 'x2', 'y2', 'x3', 'y3', 'x4', 'y4')


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Flatten cubic Bézier curves into polylines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        '--curve_file',
        type=str,
        help='Path to curves.v1 YAML file'
    )
    input_group.add_argument(
        '--inline',
        action='store_true',
        help='Use inline control points (see --x1, --y1, etc.)'
    )

    parser.add_argument('--x1', type=float, help='Start point x')
    parser.add_argument('--y1', type=float, help='Start point y')
    parser.add_argument('--x2', type=float, help='Control point 1 x')
    parser.add_argument('--y2', type=float, help='Control point 1 y')
    parser.add_argument('--x3', type=float, help='Control point 2 x')
    parser.add_argument('--y3', type=float, help='Control point 2 y')
    parser.add_argument('--x4', type=float, help='End point x')
    parser.add_argument('--y4', type=float, help='End point y')
    parser.add_argument(
        '--scale',
        type=float,
        default=1.0,
        help='Resolution / zoom factor for the inline curve, default: 1.0'
    )
    parser.add_argument(
        '--id',
        type=str,
        default='inline',
        help='Identifier for the inline curve, default: inline'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to flatten.v1 YAML config (default: built-in reference values)'
    )
    parser.add_argument(
        '--output',
        type=str,
        default=None,
        help='Write polylines.v1 YAML here (default: summary on stdout)'
    )
    parser.add_argument(
        '--log_file',
        type=str,
        default=None,
        help='Optional log file path'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def create_inline_curve(args) -> validators.CurveSpec:
    """Build a CurveSpec from --x1..--y4 and --scale."""
    missing = [name for name in INLINE_COORDS if getattr(args, name) is None]
    if missing:
        raise ValueError(f"--inline requires {', '.join('--' + m for m in missing)}")

    return validators.CurveSpec(
        id=args.id,
        start=(args.x1, args.y1),
        c1=(args.x2, args.y2),
        c2=(args.x3, args.y3),
        end=(args.x4, args.y4),
        scale=args.scale,
    )


def build_polylines_doc(
    curves: List[validators.CurveSpec],
    polylines: List[List[Point]],
    cfg: validators.FlattenConfigV1
) -> dict:
    """Assemble a polylines.v1 document (validated before it is returned)."""
    records = [
        validators.PolylineRecord(
            id=curve.id,
            scale=curve.scale,
            points=[p.as_tuple() for p in pts],
            sha256=hashing.sha256_points(pts),
        )
        for curve, pts in zip(curves, polylines)
    ]
    doc = validators.PolylinesFileV1(
        config=cfg,
        config_sha256=hashing.hash_dict(cfg.model_dump(mode='json', by_alias=True)),
        polylines=records,
    )
    return doc.model_dump(mode='json', by_alias=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = "DEBUG" if args.verbose else "INFO"
    logging_config.setup_logging(
        log_level=log_level,
        log_file=args.log_file,
        context={"app": "flatten"}
    )

    try:
        if args.config:
            logger.info(f"Loading config from: {args.config}")
            cfg = validators.load_flatten_config(args.config)
        else:
            cfg = validators.DEFAULT_FLATTEN_CONFIG

        if args.curve_file:
            logger.info(f"Loading curves from: {args.curve_file}")
            curves = validators.validate_curves_file(args.curve_file).curves
        else:
            curves = [create_inline_curve(args)]
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"Flattening {len(curves)} curve(s)")
    polylines = flatten_curves(curves, cfg)
    doc = build_polylines_doc(curves, polylines, cfg)

    if args.output:
        output = Path(args.output)
        fs.atomic_yaml_dump(doc, output)
        logger.info(f"Wrote {len(polylines)} polyline(s) to {output}")
    else:
        for record, pts in zip(doc['polylines'], polylines):
            print(
                f"{record['id']}: {len(pts)} points "
                f"length={polyline_length(pts):.3f} sha256={record['sha256'][:16]}"
            )

    return 0


if __name__ == "__main__":
    sys.exit(main())
