"""Visualization utilities for cost curves."""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from pathlib import Path
from typing import Optional, Sequence

sns.set_style("whitegrid")


def plot_cost_curve(costs: Sequence[int], output_path: Path,
                    best_rows: Optional[int] = None, title: Optional[str] = None) -> None:
    """Plot estimated time against the number of offloaded rows.

    Args:
        costs: Estimated time for rows 0..M (index is the row count)
        output_path: Output file path
        best_rows: Recommended split to mark on the curve
        title: Plot title
    """
    costs = np.asarray(costs)
    rows = np.arange(len(costs))

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(rows, costs, linewidth=2, color='steelblue', label='Estimated time')

    if best_rows is not None and 0 <= best_rows < len(costs):
        ax.axvline(best_rows, color='coral', linestyle='--', alpha=0.8)
        ax.scatter([best_rows], [costs[best_rows]], color='coral', zorder=3,
                   label=f'Recommended ({best_rows} rows)')

    ax.set_xlabel('Offloaded rows')
    ax.set_ylabel('Estimated time')
    ax.set_title(title or 'Execution Time vs. GPU Row Split')
    ax.legend()
    ax.grid(alpha=0.3)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
