"""Run-time constants for a simulation run, fixed at process start."""

from dataclasses import dataclass

import numpy as np

from .core.kernels import KernelType
from .errors import ConfigurationError


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters shared read-only by every tick of a run.

    Attributes:
        dt: Fixed time increment per tick
        smoothing_h: Kernel support radius h
        density_kernel: Kernel used for the density sum
        color_normalization: Density divisor D for the default color map
        backend: 'cpu', 'numba' or 'auto'
        use_spatial_index: Evaluate density through the uniform grid instead
            of all pairs (same result, fewer kernel evaluations)
    """
    dt: float = 0.01
    smoothing_h: float = 1.0
    density_kernel: KernelType = KernelType.POLY6
    color_normalization: float = 150.0
    backend: str = "auto"
    use_spatial_index: bool = False

    def __post_init__(self):
        try:
            object.__setattr__(self, 'density_kernel', KernelType(self.density_kernel))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown kernel: {self.density_kernel}") from exc
        self.validate()

    def validate(self):
        """Raise ConfigurationError for non-physical parameters."""
        if not np.isfinite(self.dt) or self.dt <= 0.0:
            raise ConfigurationError(f"Time step must be positive, got {self.dt}")
        if not np.isfinite(self.smoothing_h) or self.smoothing_h <= 0.0:
            raise ConfigurationError(f"Smoothing radius must be positive, got {self.smoothing_h}")
        if not np.isfinite(self.color_normalization) or self.color_normalization <= 0.0:
            raise ConfigurationError(
                f"Color normalization must be positive, got {self.color_normalization}")
        if self.backend not in ("auto", "cpu", "numba"):
            raise ConfigurationError(f"Invalid backend: {self.backend}. Choose from: auto, cpu, numba")
