#!/usr/bin/env python3
"""
Estimate the similarity transform between two point sets stored in a file.

The input file (JSON or YAML) holds two nested lists:

    src: [[x1, x2, ...], [y1, y2, ...]]
    dst: [[...], [...]]

one inner list per dimension (D x N). With --points-as-rows each inner list is
one point instead (N x D).

Usage:
    kabsch-umeyama pairs.yaml --scale
    kabsch-umeyama pairs.json --svd jacobi --out report.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from kabsch_umeyama.config import EstimatorConfig
from kabsch_umeyama.errors import KabschUmeyamaError
from kabsch_umeyama.estimator import estimate_detailed
from kabsch_umeyama.point_set import PointSet
from kabsch_umeyama.svd import available_solvers

logger = logging.getLogger(__name__)


def load_pairs(path: Path, points_as_rows: bool = False):
    """Read (src, dst) PointSets from a JSON or YAML file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if not isinstance(data, dict) or "src" not in data or "dst" not in data:
        raise ValueError(f"{path} must contain 'src' and 'dst' entries")

    build = PointSet.from_points if points_as_rows else PointSet.from_rows
    return build(data["src"]), build(data["dst"])


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Kabsch-Umeyama alignment of two point sets")
    ap.add_argument("input", help="JSON/YAML file with 'src' and 'dst' point sets")
    ap.add_argument("--scale", action="store_true", help="Estimate a uniform scale")
    ap.add_argument("--points-as-rows", action="store_true", help="Input lists are N x D (one point per row)")
    ap.add_argument("--svd", choices=available_solvers(), default=None, help="SVD backend (overrides --config)")
    ap.add_argument("--config", default=None, help="YAML estimator config")
    ap.add_argument("--out", default=None, help="Output JSON report path")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = EstimatorConfig.from_yaml(args.config) if args.config else EstimatorConfig()
        if args.svd:
            config.svd_backend = args.svd
        src, dst = load_pairs(Path(args.input), args.points_as_rows)
        result = estimate_detailed(src, dst, args.scale, config=config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # KabschUmeyamaError and pydantic ValidationError are both ValueErrors
        kind = type(exc).__name__ if isinstance(exc, KabschUmeyamaError) else "InputError"
        logger.error("%s: %s", kind, exc)
        return 2

    report = json.dumps(result.to_dict(), indent=2, sort_keys=True)
    if args.out:
        Path(args.out).write_text(report, encoding="utf-8")

    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
