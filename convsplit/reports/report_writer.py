"""
Split plan reports: a plain-dict report, a human-readable summary, and
YAML/JSON output.
"""
import json
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from ..models.cost_model import CostBreakdown
from ..models.problem import ProblemSpec, PerfProfile
from ..optimizer.optimizer_base import SearchResult


def build_report(spec: ProblemSpec, perf: PerfProfile, result: SearchResult,
                 breakdown: CostBreakdown, unimodal: Optional[bool] = None,
                 curve_minimum: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
    """Collect everything about a recommendation into a serializable dict.

    `unimodal` and `curve_minimum` come from a full cost-curve sweep and are
    left out when no sweep was made.
    """
    report = {
        'problem': spec.to_dict(),
        'perf': perf.to_dict(),
        'recommendation': result.to_dict(),
        'breakdown': breakdown.to_dict(),
    }
    if unimodal is not None:
        report['cost_curve_unimodal'] = unimodal
    if curve_minimum is not None:
        report['cost_curve_minimum'] = dict(curve_minimum)
    return report


class ReportWriter:
    """Writes split plan reports to an output directory."""

    def __init__(self, output_dir: str = "results"):
        self.output_dir = Path(output_dir)

    def write(self, report: Dict[str, Any], fmt: str = "yaml", name: str = "plan") -> Path:
        """Write a report file.

        Args:
            report: Report from build_report
            fmt: 'yaml' or 'json'
            name: File stem

        Returns:
            Path of the written file
        """
        if fmt not in ('yaml', 'json'):
            raise ValueError(f"Unsupported report format: {fmt}")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{name}.{fmt}"
        with open(path, 'w') as f:
            if fmt == 'yaml':
                yaml.safe_dump(report, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(report, f, indent=2)
        return path

    def generate_summary(self, report: Dict[str, Any]) -> str:
        """Generate human-readable summary from a report."""
        problem = report['problem']
        rec = report['recommendation']
        bd = report['breakdown']
        output_height = bd['output_height']

        lines = []
        lines.append("=" * 60)
        lines.append("   CONVOLUTION SPLIT PLAN")
        lines.append(f"   Input {problem['M']}x{problem['N']}, kernel {problem['K']}x{problem['K']}")
        lines.append("=" * 60)
        lines.append("")

        lines.append("RECOMMENDATION")
        lines.append("━" * 60)
        lines.append(f"Offloaded rows:     {rec['num_offloaded_rows']} of {problem['M']}")
        lines.append(f"GPU output rows:    {bd['gpu_output_rows']} of {output_height}")
        lines.append(f"Estimated time:     {rec['estimated_time']}")
        lines.append(f"Search:             {rec['method']} ({rec['evaluations']} evaluations)")
        lines.append("")

        lines.append("TIME BREAKDOWN")
        lines.append("━" * 60)
        lines.append(f"CPU compute:        {bd['cpu_time']:.3f}")
        lines.append(f"GPU transfer in:    {bd['gpu_transfer_in_time']:.3f}")
        lines.append(f"GPU compute:        {bd['gpu_compute_time']:.3f}")
        lines.append(f"GPU transfer out:   {bd['gpu_transfer_out_time']:.3f}")
        lines.append(f"Bottleneck:         {bd['bottleneck'].upper()}")

        if report.get('cost_curve_unimodal') is False:
            lines.append("")
            lines.append("WARNING: cost curve is not unimodal; ternary search may be suboptimal")

        minimum = report.get('cost_curve_minimum')
        if minimum and minimum['estimated_time'] < rec['estimated_time']:
            lines.append("")
            lines.append(f"WARNING: {minimum['num_offloaded_rows']} rows give {minimum['estimated_time']}, "
                         f"below the recommended split's {rec['estimated_time']}")

        return "\n".join(lines)
