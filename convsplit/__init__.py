"""convsplit: CPU/GPU row-split planner for 2D convolution."""

from .models.problem import ProblemSpec, PerfProfile
from .models.cost_model import CostBreakdown, estimate_breakdown, estimate_exec_time
from .optimizer.optimizer_base import SearchResult
from .optimizer.split_search import (
    best_split_exhaustive,
    best_split_fast,
    plan_split,
    sweep_cost_curve,
)
from .hardware.hardware_catalog import HardwareCatalog
from .utils.logger import setup_logger

__version__ = "0.1.0"
__all__ = [
    "ProblemSpec",
    "PerfProfile",
    "CostBreakdown",
    "SearchResult",
    "estimate_breakdown",
    "estimate_exec_time",
    "best_split_exhaustive",
    "best_split_fast",
    "plan_split",
    "sweep_cost_curve",
    "HardwareCatalog",
    "setup_logger",
]
