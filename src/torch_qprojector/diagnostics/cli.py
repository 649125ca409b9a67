"""Command line entry point for the projection trace.

Argument parsing only; the trace itself lives in `harness.py`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import TraceConfig
from .harness import run_trace

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="torch-qprojector-trace",
        description="Print projected quadrature points for the reference hypercube.",
    )
    parser.add_argument("--precision", type=int, default=None,
                        help="significant digits of printed numbers")
    parser.add_argument("--rules", nargs="+", default=None,
                        help="1D base rules in trace order, e.g. none midpoint gauss3")
    parser.add_argument("--dimensions", nargs="+", type=int, default=None,
                        help="cell dimensions for the line and face checks")
    parser.add_argument("--all-face-dimensions", nargs="+", type=int, default=None,
                        help="cell dimensions for the all-faces check")
    parser.add_argument("--dtype", choices=["float64", "float32"], default=None)
    parser.add_argument("--output", "-o", default=None,
                        help="write the trace to this file instead of stdout")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def config_from_args(args: argparse.Namespace) -> TraceConfig:
    """Build a validated `TraceConfig`; unset options keep their defaults."""
    overrides = {
        "precision": args.precision,
        "rules": args.rules,
        "dimensions": args.dimensions,
        "all_face_dimensions": args.all_face_dimensions,
        "dtype": args.dtype,
    }
    return TraceConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ValidationError as e:
        logger.error("invalid trace configuration:\n%s", e)
        return 2

    if args.output:
        with open(args.output, "w", encoding="utf-8") as stream:
            run_trace(config, stream)
        logger.info("trace written to %s", args.output)
    else:
        run_trace(config, sys.stdout)
    return 0
