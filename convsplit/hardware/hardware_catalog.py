# convsplit/hardware/hardware_catalog.py
"""
Calibration catalog for CPUs, GPUs and host/device links.
YAML-driven loader returning PerfProfile instances.
"""
from typing import Dict, Any, List
import os

import yaml

from ..models.problem import PerfProfile

# Catalog rates are per second; dividing by the scale gives rates per unit
TIME_UNITS = {
    's': 1,
    'ms': 1_000,
    'us': 1_000_000,
    'ns': 1_000_000_000,
}


class HardwareCatalog:
    def __init__(self, yaml_path: str = None):
        self.catalog = {}
        if yaml_path and os.path.exists(yaml_path):
            self.load_catalog(yaml_path)
        else:
            self._load_default_catalog()

    def load_catalog(self, yaml_path: str):
        with open(yaml_path, "r", encoding="utf-8") as f:
            self.catalog = yaml.safe_load(f) or {}

    def _load_default_catalog(self):
        """Load default calibration catalog (FP32 peak rates)."""
        self.catalog = {
            'cpus': {
                'epyc-7763': {'ops_per_sec': 2_500_000_000_000},
                'xeon-8380': {'ops_per_sec': 2_400_000_000_000},
                'desktop-8c': {'ops_per_sec': 500_000_000_000},
            },
            'gpus': {
                'A100': {'ops_per_sec': 19_500_000_000_000},
                'H100': {'ops_per_sec': 51_000_000_000_000},
                'A10G': {'ops_per_sec': 31_200_000_000_000},
                'T4': {'ops_per_sec': 8_100_000_000_000},
            },
            'links': {
                'pcie3-x16': {'bandwidth_bytes_per_sec': 16_000_000_000},
                'pcie4-x16': {'bandwidth_bytes_per_sec': 32_000_000_000},
                'pcie5-x16': {'bandwidth_bytes_per_sec': 64_000_000_000},
            },
        }

    def _entry(self, section: str, name: str) -> Dict[str, Any]:
        entries = self.catalog.get(section, {})
        if name not in entries:
            raise KeyError(f"Unknown {section[:-1]} '{name}' (known: {sorted(entries)})")
        return entries[name]

    def get_cpu(self, name: str) -> Dict[str, Any]:
        return self._entry('cpus', name)

    def get_gpu(self, name: str) -> Dict[str, Any]:
        return self._entry('gpus', name)

    def get_link(self, name: str) -> Dict[str, Any]:
        return self._entry('links', name)

    def list_cpus(self) -> List[str]:
        return list(self.catalog.get('cpus', {}).keys())

    def list_gpus(self) -> List[str]:
        return list(self.catalog.get('gpus', {}).keys())

    def list_links(self) -> List[str]:
        return list(self.catalog.get('links', {}).keys())

    def get_perf_profile(self, cpu: str, gpu: str, link: str, time_unit: str = 'us') -> PerfProfile:
        """Build calibration constants for a CPU/GPU/link combination.

        Args:
            cpu: CPU entry name
            gpu: GPU entry name
            link: Link entry name
            time_unit: Unit the cost model should report in ('s', 'ms', 'us', 'ns')

        Returns:
            PerfProfile with rates per time unit
        """
        if time_unit not in TIME_UNITS:
            raise ValueError(f"Unknown time unit '{time_unit}'")
        scale = TIME_UNITS[time_unit]

        def per_unit(rate) -> int:
            # Keep at least 1 so a slow device never becomes a zero rate
            return max(1, int(round(rate / scale)))

        return PerfProfile(
            cpu_ops=per_unit(self.get_cpu(cpu)['ops_per_sec']),
            gpu_ops=per_unit(self.get_gpu(gpu)['ops_per_sec']),
            bandwidth=per_unit(self.get_link(link)['bandwidth_bytes_per_sec']),
        )
