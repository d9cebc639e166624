"""
Command line entry point.

Usage:
    wallshear-tawss <case>
    wallshear-tawss <case> --compressible --turbulence nut
    wallshear-tawss <case> --time 0.1:0.5 --no-zero --vtk
    wallshear-tawss <case> --config tawss.yaml --region fluid
"""

import sys
import argparse
from typing import List, Optional

from loguru import logger

from wallshear.config import CaseConfig, load_yaml, apply_cli_overrides
from wallshear.errors import WallShearError
from wallshear.solvers import run_case
from wallshear.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallshear-tawss",
        description="Calculate the time average of wall shear stress on all patches "
                    "for the selected times. Incompressible by default.",
    )
    parser.add_argument("case", nargs="?", default=None,
                        help="Case directory (default: current directory)")
    parser.add_argument("--config", help="YAML configuration file")

    # Time selection
    parser.add_argument("--time", default=None,
                        help="Times and ranges to process, e.g. '0.1,0.5:1.0'")
    parser.add_argument("--latest-time", dest="latest_time", action="store_true", default=None,
                        help="Process only the latest time")
    parser.add_argument("--no-zero", dest="no_zero", action="store_true", default=None,
                        help="Exclude the 0 time directory")

    # Regime
    parser.add_argument("--region", default=None, help="Mesh region")
    parser.add_argument("--compressible", action="store_true", default=None,
                        help="Compressible case (density field rho)")
    parser.add_argument("--turbulence", choices=["laminar", "nut"], default=None,
                        help="Effective stress closure")

    # Output
    parser.add_argument("--vtk", action="store_true", default=None,
                        help="Also write boundary VTK files")
    parser.add_argument("--log-level", dest="log_level", default=None,
                        help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the post-processor; returns the process exit code."""
    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level or "INFO", show_time=False)

    try:
        config = load_yaml(args.config) if args.config else CaseConfig()
        config = apply_cli_overrides(config, args)
        setup_logging(level=config.logging.level, show_time=config.logging.show_time)
        run_case(config)
    except (WallShearError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
