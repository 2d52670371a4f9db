# convsplit/optimizer/optimizer_base.py
"""
Abstract base class for split optimizers (exhaustive, ternary).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

from ..models.cost_model import estimate_cost
from ..models.problem import ProblemSpec, PerfProfile
from ..utils.logger import setup_logger


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a split search."""

    num_offloaded_rows: int
    estimated_time: int
    method: str
    evaluations: int
    bracket: Optional[Tuple[int, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.bracket is not None:
            data['bracket'] = list(self.bracket)
        return data


class SplitOptimizer(ABC):
    """Base class for searches over the number of offloaded rows.

    Every cost evaluation goes through `evaluate`, which records it in
    `history` for the current search.
    """

    method = 'base'

    def __init__(self):
        self.history: List[Tuple[int, int]] = []
        self.logger = setup_logger(self.__class__.__name__)

    def evaluate(self, spec: ProblemSpec, perf: PerfProfile, rows: int) -> int:
        time = estimate_cost(spec, perf, rows)
        self.history.append((rows, time))
        return time

    def scan(self, spec: ProblemSpec, perf: PerfProfile, lo: int, hi: int) -> Tuple[int, int]:
        """Linear scan of [lo, hi]; the first (smallest) minimum wins.

        Returns:
            (best_rows, best_time)
        """
        best_rows = lo
        best_time = self.evaluate(spec, perf, lo)
        for rows in range(lo + 1, hi + 1):
            time = self.evaluate(spec, perf, rows)
            if time < best_time:
                best_time = time
                best_rows = rows
        return best_rows, best_time

    def _no_offload(self, spec: ProblemSpec, perf: PerfProfile) -> SearchResult:
        return SearchResult(
            num_offloaded_rows=0,
            estimated_time=estimate_cost(spec, perf, 0),
            method=self.method,
            evaluations=0,
        )

    def search(self, spec: ProblemSpec, perf: PerfProfile) -> SearchResult:
        """Find the row count minimizing the estimated time.

        A matrix shorter than the kernel gives the GPU nothing to compute,
        so 0 is returned without searching.
        """
        self.history = []
        if spec.M < spec.K:
            return self._no_offload(spec, perf)
        return self._search(spec, perf)

    @abstractmethod
    def _search(self, spec: ProblemSpec, perf: PerfProfile) -> SearchResult:
        """Search a problem with M >= K."""
        pass
