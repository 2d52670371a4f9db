"""Main entry point for the convsplit planner."""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from convsplit.hardware.hardware_catalog import HardwareCatalog
from convsplit.models.cost_model import estimate_breakdown
from convsplit.models.problem import ProblemSpec, PerfProfile
from convsplit.optimizer.split_search import (
    EXHAUSTIVE_SEARCH_THRESHOLD,
    is_unimodal,
    plan_split,
    sweep_cost_curve,
)
from convsplit.reports.report_writer import ReportWriter, build_report
from convsplit.utils.logger import setup_logger
from configs import HARDWARE_CATALOG_PATH, load_config, load_default_config, merge_configs


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="convsplit: CPU/GPU row-split planner for 2D convolution"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (merged over the bundled defaults)",
    )
    parser.add_argument("--M", type=int, default=None, help="Input matrix rows")
    parser.add_argument("--N", type=int, default=None, help="Input matrix columns")
    parser.add_argument("--K", type=int, default=None, help="Kernel size")
    parser.add_argument("--cpu-ops", type=int, default=None, help="CPU operations per time unit")
    parser.add_argument("--gpu-ops", type=int, default=None, help="GPU operations per time unit")
    parser.add_argument("--bandwidth", type=int, default=None, help="Transfer bytes per time unit")
    parser.add_argument(
        "--method",
        choices=["fast", "exhaustive"],
        default=None,
        help="Search method",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Rows below which the fast search scans exhaustively",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to save the plan",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Plot the full cost curve",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def args_to_overrides(args) -> Dict[str, Any]:
    """Turn explicitly given command line values into a config override."""
    sections = {
        'problem': {'M': args.M, 'N': args.N, 'K': args.K},
        'perf': {'cpu_ops': args.cpu_ops, 'gpu_ops': args.gpu_ops, 'bandwidth': args.bandwidth},
        'search': {'method': args.method, 'exhaustive_threshold': args.threshold},
        'output': {'dir': args.output_dir, 'visualize': args.visualize or None},
    }
    overrides = {}
    for section, values in sections.items():
        given = {k: v for k, v in values.items() if v is not None}
        if given:
            overrides[section] = given
    return overrides


def resolve_inputs(config: Dict[str, Any]) -> Tuple[ProblemSpec, PerfProfile]:
    """Build the problem and calibration constants from a merged config.

    When a `hardware` section is present its catalog entries provide the
    rates, and any keys under `perf` override them individually.
    """
    if 'problem' not in config:
        raise KeyError("Missing required key 'problem'")
    spec = ProblemSpec.from_dict(config['problem'])

    perf_config = dict(config.get('perf') or {})
    hardware = config.get('hardware')
    if hardware:
        catalog_path = hardware.get('catalog', str(HARDWARE_CATALOG_PATH))
        if not os.path.exists(catalog_path):
            setup_logger("convsplit").warning(
                f"Hardware catalog {catalog_path} not found; using the built-in catalog"
            )
        catalog = HardwareCatalog(catalog_path)
        catalog_perf = catalog.get_perf_profile(
            hardware['cpu'], hardware['gpu'], hardware['link'],
            time_unit=hardware.get('time_unit', 'us'),
        )
        perf_config = merge_configs(catalog_perf.to_dict(), perf_config)
    perf = PerfProfile.from_dict(perf_config)
    return spec, perf


def run_plan(config: Dict[str, Any], logger=None) -> Dict[str, Any]:
    """Search the best split for a config and return the report."""
    logger = logger or setup_logger("convsplit")
    spec, perf = resolve_inputs(config)

    search_cfg = config.get('search', {})
    method = search_cfg.get('method', 'fast')
    threshold = search_cfg.get('exhaustive_threshold', EXHAUSTIVE_SEARCH_THRESHOLD)

    logger.info(f"Problem: M={spec.M}, N={spec.N}, K={spec.K}")
    logger.info(f"Calibration: {perf}")
    if spec.is_degenerate:
        logger.warning("Kernel is larger than the input; there is no output to split")

    result = plan_split(spec, perf, method=method, exhaustive_threshold=threshold)
    breakdown = estimate_breakdown(spec, perf, result.num_offloaded_rows)

    output_cfg = config.get('output', {})
    unimodal = None
    curve_minimum = None
    costs = None
    if output_cfg.get('visualize'):
        costs = sweep_cost_curve(spec, perf)
        unimodal = is_unimodal(costs)
        best_rows = int(np.argmin(costs))
        curve_minimum = {
            'num_offloaded_rows': best_rows,
            'estimated_time': int(costs[best_rows]),
        }
        if not unimodal and result.method == 'ternary':
            logger.warning("Cost curve has several local minima; the ternary result may be suboptimal")
        if result.estimated_time > curve_minimum['estimated_time']:
            logger.warning(
                f"{result.method} search chose {result.num_offloaded_rows} rows "
                f"(time {result.estimated_time}) but {best_rows} rows give "
                f"{curve_minimum['estimated_time']}; the cost curve has flat stretches"
            )

    report = build_report(spec, perf, result, breakdown, unimodal=unimodal,
                          curve_minimum=curve_minimum)

    output_dir = output_cfg.get('dir')
    if output_dir:
        writer = ReportWriter(output_dir)
        path = writer.write(report, fmt=output_cfg.get('format', 'yaml'))
        logger.info(f"Plan saved to {path}")
        if costs is not None:
            from convsplit.utils.visualization import plot_cost_curve
            plot_path = Path(output_dir) / "cost_curve.png"
            plot_cost_curve(costs, plot_path, best_rows=result.num_offloaded_rows)
            logger.info(f"Cost curve saved to {plot_path}")

    return report


def main(argv: Optional[Sequence[str]] = None):
    """Main function."""
    args = parse_args(argv)

    # Setup logging
    log_level = "DEBUG" if args.verbose else "INFO"
    logger = setup_logger("convsplit", level=log_level)
    setup_logger("TernarySplitOptimizer", level=log_level)

    try:
        config = load_default_config()
        user_config = {}
        if args.config:
            logger.info(f"Loading configuration from {args.config}")
            user_config = load_config(args.config)
        if 'hardware' in user_config:
            # Catalog rates replace the bundled perf defaults
            config.pop('perf', None)
        config = merge_configs(config, user_config)
        config = merge_configs(config, args_to_overrides(args))

        report = run_plan(config, logger)
        print(ReportWriter().generate_summary(report))
        return 0

    except Exception as e:
        logger.error(f"Planning failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
