# convsplit/optimizer/__init__.py
"""Search for the row split minimizing the estimated time."""

from .optimizer_base import SplitOptimizer, SearchResult
from .split_search import (
    EXHAUSTIVE_SEARCH_THRESHOLD,
    ExhaustiveSplitOptimizer,
    TernarySplitOptimizer,
    best_split_exhaustive,
    best_split_fast,
    get_optimizer,
    is_unimodal,
    plan_split,
    sweep_cost_curve,
)

__all__ = [
    "SplitOptimizer",
    "SearchResult",
    "EXHAUSTIVE_SEARCH_THRESHOLD",
    "ExhaustiveSplitOptimizer",
    "TernarySplitOptimizer",
    "best_split_exhaustive",
    "best_split_fast",
    "get_optimizer",
    "is_unimodal",
    "plan_split",
    "sweep_cost_curve",
]
