"""Problem description and the analytical cost model."""

from .problem import ProblemSpec, PerfProfile
from .cost_model import (
    CostBreakdown,
    ELEMENT_SIZE_BYTES,
    estimate_breakdown,
    estimate_cost,
    estimate_exec_time,
)

__all__ = [
    "ProblemSpec",
    "PerfProfile",
    "CostBreakdown",
    "ELEMENT_SIZE_BYTES",
    "estimate_breakdown",
    "estimate_cost",
    "estimate_exec_time",
]
