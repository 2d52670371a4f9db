"""Problem shape and calibration value types."""

import numbers
from dataclasses import dataclass, asdict
from typing import Any, Dict


def _coerce_int(obj: Any, name: str) -> int:
    """Validate an integral field and store it as a Python int.

    numpy integers are accepted but converted so later products cannot wrap.
    """
    value = getattr(obj, name)
    # bool is Integral but never a meaningful size or rate
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    object.__setattr__(obj, name, value)
    return value


def _lookup(config: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in config:
            return config[key]
    raise KeyError(f"Missing required key '{keys[0]}'")


@dataclass(frozen=True)
class ProblemSpec:
    """Shape of a 2D convolution: an M x N input and a square K x K kernel.

    M < K (or N < K) is accepted and describes a convolution with no output
    positions.
    """

    M: int
    N: int
    K: int

    def __post_init__(self):
        for name in ('M', 'N', 'K'):
            _coerce_int(self, name)
        if self.M < 0:
            raise ValueError(f"M must be non-negative, got {self.M}")
        if self.N < 0:
            raise ValueError(f"N must be non-negative, got {self.N}")
        if self.K <= 0:
            raise ValueError(f"K must be positive, got {self.K}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ProblemSpec':
        """Build from a config section.

        Args:
            config: Mapping with M/N/K (or rows/cols/kernel_size)

        Returns:
            ProblemSpec instance
        """
        return cls(
            M=_lookup(config, 'M', 'rows'),
            N=_lookup(config, 'N', 'cols'),
            K=_lookup(config, 'K', 'kernel_size'),
        )

    @property
    def output_height(self) -> int:
        return max(0, self.M - self.K + 1)

    @property
    def output_width(self) -> int:
        return max(0, self.N - self.K + 1)

    @property
    def ops_per_position(self) -> int:
        """K*K multiplications plus K*K - 1 additions."""
        return 2 * self.K * self.K - 1

    @property
    def is_degenerate(self) -> bool:
        return self.M < self.K or self.N < self.K

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class PerfProfile:
    """Calibration constants for one CPU/GPU pair and the link between them.

    Attributes:
        cpu_ops: CPU operations per time unit
        gpu_ops: GPU operations per time unit
        bandwidth: Host/device transfer bytes per time unit

    The time unit is whatever the rates are expressed in; the cost model
    reports estimates in that unit.
    """

    cpu_ops: int
    gpu_ops: int
    bandwidth: int

    def __post_init__(self):
        for name in ('cpu_ops', 'gpu_ops', 'bandwidth'):
            value = _coerce_int(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'PerfProfile':
        return cls(
            cpu_ops=_lookup(config, 'cpu_ops'),
            gpu_ops=_lookup(config, 'gpu_ops'),
            bandwidth=_lookup(config, 'bandwidth'),
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def __repr__(self) -> str:
        return (f"PerfProfile(cpu_ops={self.cpu_ops:,}, gpu_ops={self.gpu_ops:,}, "
                f"bandwidth={self.bandwidth:,})")
