"""Basic split planning example."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from convsplit import HardwareCatalog, ProblemSpec, estimate_breakdown, plan_split
from convsplit.utils.logger import setup_logger
from configs import HARDWARE_CATALOG_PATH


def main():
    """Plan splits for a few input sizes on every GPU in the catalog."""
    logger = setup_logger("BasicSplit")

    logger.info("=== Convolution Row-Split Planning ===")

    catalog = HardwareCatalog(str(HARDWARE_CATALOG_PATH))
    shapes = [(512, 512, 3), (4096, 4096, 5), (16384, 8192, 7)]

    for gpu in catalog.list_gpus():
        perf = catalog.get_perf_profile('xeon-8380', gpu, 'pcie4-x16', time_unit='us')
        logger.info(f"\n{gpu}: {perf}")

        for M, N, K in shapes:
            spec = ProblemSpec(M, N, K)
            result = plan_split(spec, perf)
            breakdown = estimate_breakdown(spec, perf, result.num_offloaded_rows)
            share = result.num_offloaded_rows / M

            logger.info(
                f"  {M}x{N} k={K}: offload {result.num_offloaded_rows} rows ({share:.0%}), "
                f"~{result.estimated_time} us, bound by {breakdown.bottleneck.upper()}, "
                f"{result.evaluations} evaluations"
            )

    logger.info("\nPlanning complete!")


if __name__ == "__main__":
    main()
