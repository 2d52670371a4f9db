"""Analytical execution-time model for a row-split CPU/GPU convolution.

The output rows of the convolution are divided between the two devices.
The GPU receives the input rows its output rows depend on (the kernel
overlap included), computes, and sends its results back; the CPU computes
the remaining output rows at the same time. The estimate is the slower of
the two paths:

    cpu_time = cpu_positions * ops_per_position / cpu_ops
    gpu_time = in_bytes / bandwidth + gpu_positions * ops_per_position / gpu_ops
               + out_bytes / bandwidth
    time     = ceil(max(cpu_time, gpu_time))

Times are in whatever unit the supplied rates imply (rates per second give
seconds).
"""

import math
import operator
from dataclasses import dataclass, asdict
from typing import Any, Dict

from .problem import ProblemSpec, PerfProfile

ELEMENT_SIZE_BYTES = 4  # float32


@dataclass(frozen=True)
class CostBreakdown:
    """Every intermediate quantity behind one estimate."""

    num_offloaded_rows: int
    output_height: int
    output_width: int
    gpu_output_rows: int
    cpu_output_rows: int
    gpu_positions: int
    cpu_positions: int
    gpu_total_ops: int
    cpu_total_ops: int
    rows_to_transfer: int
    transfer_in_bytes: int
    transfer_out_bytes: int
    cpu_time: float
    gpu_transfer_in_time: float
    gpu_compute_time: float
    gpu_transfer_out_time: float
    gpu_time: float
    total_time: int

    @property
    def bottleneck(self) -> str:
        """Which path bounds the estimate ('gpu' wins ties)."""
        return 'cpu' if self.cpu_time > self.gpu_time else 'gpu'

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['bottleneck'] = self.bottleneck
        return data


def gpu_output_rows_for(spec: ProblemSpec, num_offloaded_rows: int) -> int:
    """Output rows computable from the first `num_offloaded_rows` input rows."""
    return max(0, min(num_offloaded_rows - spec.K + 1, spec.output_height))


def estimate_breakdown(spec: ProblemSpec, perf: PerfProfile,
                       num_offloaded_rows: int) -> CostBreakdown:
    """Estimate execution time for a split and keep the intermediate terms.

    Args:
        spec: Convolution shape
        perf: Calibration constants
        num_offloaded_rows: Leading input rows given to the GPU; any integer,
            values outside [0, M] are clamped through the derived row counts

    Returns:
        CostBreakdown whose total_time is the estimate
    """
    if isinstance(num_offloaded_rows, bool):
        raise ValueError(f"num_offloaded_rows must be an integer, got {num_offloaded_rows!r}")
    num_offloaded_rows = operator.index(num_offloaded_rows)

    output_height = spec.output_height
    output_width = spec.output_width
    ops_per_position = spec.ops_per_position

    gpu_output_rows = gpu_output_rows_for(spec, num_offloaded_rows)
    cpu_output_rows = output_height - gpu_output_rows
    gpu_positions = gpu_output_rows * output_width
    cpu_positions = cpu_output_rows * output_width

    gpu_total_ops = gpu_positions * ops_per_position
    cpu_total_ops = cpu_positions * ops_per_position

    cpu_time = cpu_total_ops / perf.cpu_ops

    # The first GPU output row needs K input rows, each further one adds a row
    rows_to_transfer = min(gpu_output_rows + spec.K - 1, spec.M)
    transfer_in_bytes = rows_to_transfer * spec.N * ELEMENT_SIZE_BYTES
    transfer_out_bytes = gpu_positions * ELEMENT_SIZE_BYTES

    gpu_transfer_in_time = transfer_in_bytes / perf.bandwidth
    gpu_compute_time = gpu_total_ops / perf.gpu_ops
    gpu_transfer_out_time = transfer_out_bytes / perf.bandwidth
    gpu_time = gpu_transfer_in_time + gpu_compute_time + gpu_transfer_out_time

    total_time = int(math.ceil(max(cpu_time, gpu_time)))

    return CostBreakdown(
        num_offloaded_rows=num_offloaded_rows,
        output_height=output_height,
        output_width=output_width,
        gpu_output_rows=gpu_output_rows,
        cpu_output_rows=cpu_output_rows,
        gpu_positions=gpu_positions,
        cpu_positions=cpu_positions,
        gpu_total_ops=gpu_total_ops,
        cpu_total_ops=cpu_total_ops,
        rows_to_transfer=rows_to_transfer,
        transfer_in_bytes=transfer_in_bytes,
        transfer_out_bytes=transfer_out_bytes,
        cpu_time=cpu_time,
        gpu_transfer_in_time=gpu_transfer_in_time,
        gpu_compute_time=gpu_compute_time,
        gpu_transfer_out_time=gpu_transfer_out_time,
        gpu_time=gpu_time,
        total_time=total_time,
    )


def estimate_cost(spec: ProblemSpec, perf: PerfProfile, num_offloaded_rows: int) -> int:
    """Estimated execution time for a split of an already validated problem."""
    return estimate_breakdown(spec, perf, num_offloaded_rows).total_time


def estimate_exec_time(M: int, N: int, K: int, cpu_ops: int, gpu_ops: int,
                       bandwidth: int, num_offloaded_rows: int) -> int:
    """Estimated execution time of an M x N convolution with a K x K kernel.

    Args:
        M, N: Input matrix rows and columns
        K: Kernel size
        cpu_ops: CPU operations per second
        gpu_ops: GPU operations per second
        bandwidth: Transfer bytes per second
        num_offloaded_rows: Leading input rows given to the GPU

    Returns:
        Non-negative integer time estimate

    Raises:
        ValueError: If K or any rate is non-positive, or M/N is negative
    """
    spec = ProblemSpec(M, N, K)
    perf = PerfProfile(cpu_ops, gpu_ops, bandwidth)
    return estimate_cost(spec, perf, num_offloaded_rows)
