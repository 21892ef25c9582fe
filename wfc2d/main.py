#!/usr/bin/env python3
"""
wfc2d - solve a tile grid from a rule file.
"""

import argparse
import logging
import sys

from . import __version__
from .core import (
    ConfigurationError, GridState, Heuristic, RulesLoader, SolveStatus,
    SolverSettings, WaveFunctionCollapse2D, save_grid, validate_ruleset
)
from .logging_config import get_logger, setup_logging
from .utils import export_grid_to_png, render_text

logger = get_logger(__name__)

EXIT_SOLVED = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wfc2d",
        description="Generate a tile grid with Wave Function Collapse."
    )
    parser.add_argument("rules", help="rule file with [TILE_n] sections")
    parser.add_argument("--rows", type=int, required=True)
    parser.add_argument("--cols", type=int, required=True)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-iterations", type=int, default=None)
    parser.add_argument("--time-limit", type=float, default=None, help="seconds")
    parser.add_argument("--heuristic", choices=[h.value for h in Heuristic], default=None)
    parser.add_argument("--backtrack", action="store_true", help="roll back on contradiction")
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--png", help="write the grid to this PNG file")
    parser.add_argument("--tile-size", type=int, default=16)
    parser.add_argument("--save", help="write the grid to this JSON map file")
    parser.add_argument("--log-dir", help="also write a debug log here")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(args: argparse.Namespace) -> SolverSettings:
    """File settings first, then command-line flags on top."""
    settings = SolverSettings.load(args.settings) if args.settings else SolverSettings()
    if args.heuristic is not None:
        settings.heuristic = Heuristic(args.heuristic)
    if args.backtrack:
        settings.backtracking = True
    if args.max_iterations is not None:
        settings.max_iterations = args.max_iterations
    if args.time_limit is not None:
        settings.time_limit = args.time_limit
    return settings


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        log_dir=args.log_dir,
        console_level=logging.INFO if args.verbose else logging.WARNING
    )

    try:
        settings = load_settings(args)
        ruleset = RulesLoader.load(args.rules)
        report = validate_ruleset(ruleset)
        for tile_id in report.get_tiles_with_issues():
            logger.warning(f"Tile {tile_id}: {report.tile_results[tile_id]}")

        solver = WaveFunctionCollapse2D(settings)
        solver.initialize(args.rows, args.cols)
        if args.verbose:
            solver.progress_updated.connect(
                lambda done, total: logger.debug(f"progress {done}/{total}")
            )
        result = solver.run(ruleset, seed=args.seed)
    except (OSError, ValueError, ConfigurationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    grid = list(solver)
    if args.save:
        save_grid(args.save, GridState.from_wave(solver.wave, source_rules=args.rules))
    if args.png:
        export_grid_to_png(args.png, grid, args.cols, tile_size=args.tile_size)

    if result.status is SolveStatus.SOLVED:
        print(render_text(grid, args.cols))
        return EXIT_SOLVED

    if result.status is SolveStatus.CONTRADICTED:
        print(f"contradiction at cell {result.index} after {result.iterations} iterations",
              file=sys.stderr)
    else:
        print(f"gave up after {result.iterations} iterations", file=sys.stderr)
    return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
