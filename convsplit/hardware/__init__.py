"""Calibration catalog for CPU/GPU throughput and link bandwidth."""

from .hardware_catalog import HardwareCatalog, TIME_UNITS

__all__ = ["HardwareCatalog", "TIME_UNITS"]
