"""
Command line script to solve for the offsets between two pose sets
"""

import argparse
import logging
import sys

from pose_offsets import io
from pose_offsets.config import (
    DEFAULT_OUTPUT_NAME,
    DEFAULT_TOLERANCE,
    SolverConfig,
)
from pose_offsets.logging_config import setup_logging
from pose_offsets.solver import solve_config

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Find the offsets that map the model poses onto the "
        "space poses"
    )
    parser.add_argument("model", help="JSON array of model matrices")
    parser.add_argument("space", help="JSON array of space matrices")
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT_NAME,
        help="path to the output JSON file",
    )
    parser.add_argument(
        "--csv", default=None, help="also write an offset table to this file"
    )
    parser.add_argument(
        "-t",
        "--tolerance",
        type=float,
        default=DEFAULT_TOLERANCE,
        help="pose equality threshold",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="fail if the first model pose is not invertible",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        default=False,
        help="overwrite files",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="debug logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        io.check_output_path(args.output, args.force)
        if args.csv is not None:
            io.check_output_path(args.csv, args.force)
        config = SolverConfig.from_files(
            args.model, args.space, tolerance=args.tolerance, strict=args.strict
        )
        offsets = solve_config(config)
        io.export_offsets(offsets, args.output, force=args.force)
        if args.csv is not None:
            io.export_offsets_csv(offsets, args.csv, force=args.force)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    print(f"Found {len(offsets)} offsets")
    return 0


if __name__ == "__main__":
    sys.exit(main())
