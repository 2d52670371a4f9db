# convsplit/optimizer/split_search.py
"""
Row-split search: exhaustive scan for small matrices, ternary search over the
cost curve for large ones, and helpers to sweep and inspect the curve.
"""
from typing import Sequence

import numpy as np

from .optimizer_base import SplitOptimizer, SearchResult
from ..models.cost_model import estimate_cost
from ..models.problem import ProblemSpec, PerfProfile

# Below this many rows a full scan is cheaper than bracketing
EXHAUSTIVE_SEARCH_THRESHOLD = 100


class ExhaustiveSplitOptimizer(SplitOptimizer):
    """Evaluate every row count in [0, M]. O(M) cost evaluations."""

    method = 'exhaustive'

    def _search(self, spec: ProblemSpec, perf: PerfProfile) -> SearchResult:
        best_rows, best_time = self.scan(spec, perf, 0, spec.M)
        return SearchResult(
            num_offloaded_rows=best_rows,
            estimated_time=best_time,
            method=self.method,
            evaluations=len(self.history),
            bracket=(0, spec.M),
        )


class TernarySplitOptimizer(SplitOptimizer):
    """Ternary search over [0, M] followed by a scan of the final bracket.

    Precondition: the cost curve is unimodal in the number of offloaded
    rows, strictly falling up to its minimum and non-decreasing after it.
    The built-in model is only weakly unimodal: rounding estimates up to
    whole time units leaves flat stretches on the falling side, and rows
    below K all give the same estimate. When both probes land on one flat
    stretch the tie rule drops the bracket's right part, minimum included,
    so the result can cost more than the exhaustive answer. Use
    `sweep_cost_curve` to check a particular problem.
    """

    method = 'ternary'

    def __init__(self, exhaustive_threshold: int = EXHAUSTIVE_SEARCH_THRESHOLD):
        super().__init__()
        self.exhaustive_threshold = exhaustive_threshold

    def _search(self, spec: ProblemSpec, perf: PerfProfile) -> SearchResult:
        if spec.M < self.exhaustive_threshold:
            best_rows, best_time = self.scan(spec, perf, 0, spec.M)
            return SearchResult(
                num_offloaded_rows=best_rows,
                estimated_time=best_time,
                method=ExhaustiveSplitOptimizer.method,
                evaluations=len(self.history),
                bracket=(0, spec.M),
            )

        left, right = 0, spec.M
        while right - left > 2:
            third = (right - left) // 3
            mid1 = left + third
            mid2 = right - third

            time1 = self.evaluate(spec, perf, mid1)
            time2 = self.evaluate(spec, perf, mid2)

            # On ties keep the left side so the smallest minimizer survives
            if time1 <= time2:
                right = mid2
            else:
                left = mid1
            self.logger.debug(f"t({mid1})={time1} t({mid2})={time2} -> [{left}, {right}]")

        best_rows, best_time = self.scan(spec, perf, left, right)
        self.logger.debug(
            f"M={spec.M}: best rows {best_rows} after {len(self.history)} evaluations"
        )
        return SearchResult(
            num_offloaded_rows=best_rows,
            estimated_time=best_time,
            method=self.method,
            evaluations=len(self.history),
            bracket=(left, right),
        )


def get_optimizer(method: str, exhaustive_threshold: int = EXHAUSTIVE_SEARCH_THRESHOLD) -> SplitOptimizer:
    """Create an optimizer by name ('exhaustive', or 'fast'/'ternary')."""
    if method == 'exhaustive':
        return ExhaustiveSplitOptimizer()
    if method in ('fast', 'ternary'):
        return TernarySplitOptimizer(exhaustive_threshold)
    raise ValueError(f"Unknown search method: {method}")


def plan_split(spec: ProblemSpec, perf: PerfProfile, method: str = 'fast',
               exhaustive_threshold: int = EXHAUSTIVE_SEARCH_THRESHOLD) -> SearchResult:
    """Search for the best split of a validated problem.

    Args:
        spec: Convolution shape
        perf: Calibration constants
        method: 'fast' (ternary above the threshold) or 'exhaustive'
        exhaustive_threshold: Row count below which 'fast' scans everything

    Returns:
        SearchResult
    """
    return get_optimizer(method, exhaustive_threshold).search(spec, perf)


def best_split_exhaustive(M: int, N: int, K: int, cpu_ops: int, gpu_ops: int,
                          bandwidth: int) -> int:
    """Row count in [0, M] with the lowest estimate, smallest on ties.

    Returns 0 when M < K.
    """
    spec = ProblemSpec(M, N, K)
    perf = PerfProfile(cpu_ops, gpu_ops, bandwidth)
    return plan_split(spec, perf, method='exhaustive').num_offloaded_rows


def best_split_fast(M: int, N: int, K: int, cpu_ops: int, gpu_ops: int, bandwidth: int,
                    exhaustive_threshold: int = EXHAUSTIVE_SEARCH_THRESHOLD) -> int:
    """Same answer as best_split_exhaustive in O(log M) evaluations when the
    cost curve has no flat stretch before its minimum.

    Returns 0 when M < K and falls back to the exhaustive scan when
    M < exhaustive_threshold.
    """
    spec = ProblemSpec(M, N, K)
    perf = PerfProfile(cpu_ops, gpu_ops, bandwidth)
    return plan_split(spec, perf, method='fast',
                      exhaustive_threshold=exhaustive_threshold).num_offloaded_rows


def sweep_cost_curve(spec: ProblemSpec, perf: PerfProfile) -> np.ndarray:
    """Estimated time for every row count 0..M, as an int64 array."""
    return np.fromiter(
        (estimate_cost(spec, perf, rows) for rows in range(spec.M + 1)),
        dtype=np.int64,
        count=spec.M + 1,
    )


def is_unimodal(costs: Sequence[int]) -> bool:
    """True if costs never decrease again once they have started increasing.

    Flat stretches are accepted, so a True result does not guarantee that
    ternary search finds the minimum; compare against `costs.min()` for that.
    """
    diffs = np.diff(np.asarray(costs, dtype=np.int64))
    rising = np.flatnonzero(diffs > 0)
    if rising.size == 0:
        return True
    return not np.any(diffs[rising[0]:] < 0)
