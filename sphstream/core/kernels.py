"""
Vectorized SPH smoothing kernels (3D).

Implements the two compact-support kernels of Müller et al.:
- Spiky: W(r, h) = 15 / (π h⁶) · (h - |r|)³
- Poly6: W(r, h) = 315 / (64 π h⁹) · (h² - |r|²)³

Both accept a single separation vector (3,) or a batch (M, 3) and return a
float or an (M,) float32 array. Evaluation never raises for degenerate
(zero-length) separations.
"""

import enum

import numpy as np
from typing import Union

ArrayLike = Union[np.ndarray, list, tuple]


def _squared_norm(r: ArrayLike) -> np.ndarray:
    r = np.asarray(r, dtype=np.float32)
    return np.sum(r * r, axis=-1)


def _finish(values: np.ndarray, scalar: bool):
    if scalar:
        return float(values)
    return values.astype(np.float32, copy=False)


class SpikyKernel:
    """Spiky kernel, steep near the origin; used for pressure-like terms.

    Support is the closed ball 0 ≤ |r| ≤ h. The kernel is finite at r = 0
    (value 15 / (π h³)).
    """

    name = "spiky"

    def value_r(self, r_mag: ArrayLike, h: float) -> np.ndarray:
        """Kernel value from separation magnitudes |r|."""
        r_mag = np.asarray(r_mag, dtype=np.float32)
        c = 15.0 / (np.pi * h**6)
        inside = (r_mag >= 0.0) & (r_mag <= h)
        h_sub_r = np.where(inside, h - r_mag, 0.0)
        return np.where(inside, c * h_sub_r * h_sub_r * h_sub_r, 0.0).astype(np.float32)

    def value_r2(self, r2: ArrayLike, h: float) -> np.ndarray:
        """Kernel value from squared separation magnitudes |r|²."""
        return self.value_r(np.sqrt(np.asarray(r2, dtype=np.float32)), h)

    def gradient_r(self, r_mag: ArrayLike, h: float) -> np.ndarray:
        """dW/d|r| from separation magnitudes."""
        r_mag = np.asarray(r_mag, dtype=np.float32)
        c = -45.0 / (np.pi * h**6)
        inside = (r_mag >= 0.0) & (r_mag <= h)
        h_sub_r = np.where(inside, h - r_mag, 0.0)
        return np.where(inside, c * h_sub_r * h_sub_r, 0.0).astype(np.float32)

    def value(self, r: ArrayLike, h: float):
        """Kernel value for separation vector(s) r."""
        r2 = _squared_norm(r)
        return _finish(self.value_r2(r2, h), r2.ndim == 0)

    def gradient_mag(self, r: ArrayLike, h: float):
        """Derivative of the kernel with respect to |r| (≤ 0 inside support)."""
        r2 = _squared_norm(r)
        return _finish(self.gradient_r(np.sqrt(r2), h), r2.ndim == 0)


class Poly6Kernel:
    """Poly6 kernel, smooth everywhere; used for density estimation.

    Support is 0 < |r|² ≤ h². Note the self term: at r = 0 the kernel
    returns exactly 0 rather than its limit 315 / (64 π h³). Density sums
    therefore carry no self-contribution.
    """

    name = "poly6"

    def value_r2(self, r2: ArrayLike, h: float) -> np.ndarray:
        """Kernel value from squared separation magnitudes |r|²."""
        r2 = np.asarray(r2, dtype=np.float32)
        c = 315.0 / (64.0 * np.pi * h**9)
        h2 = h * h
        inside = (r2 <= h2) & (r2 > 0.0)
        diff = np.where(inside, h2 - r2, 0.0)
        return np.where(inside, c * diff * diff * diff, 0.0).astype(np.float32)

    def value_r(self, r_mag: ArrayLike, h: float) -> np.ndarray:
        """Kernel value from separation magnitudes |r|."""
        r_mag = np.asarray(r_mag, dtype=np.float32)
        return self.value_r2(r_mag * r_mag, h)

    def gradient_r2(self, r2: ArrayLike, h: float) -> np.ndarray:
        """dW/d|r| from squared separation magnitudes.

        d/d|r| (h² - |r|²)³ = -6 |r| (h² - |r|²)²
        """
        r2 = np.asarray(r2, dtype=np.float32)
        c = 315.0 / (64.0 * np.pi * h**9)
        h2 = h * h
        inside = (r2 <= h2) & (r2 > 0.0)
        diff = np.where(inside, h2 - r2, 0.0)
        r_mag = np.sqrt(np.where(inside, r2, 0.0))
        return np.where(inside, c * 3.0 * -2.0 * r_mag * diff * diff, 0.0).astype(np.float32)

    def value(self, r: ArrayLike, h: float):
        """Kernel value for separation vector(s) r."""
        r2 = _squared_norm(r)
        return _finish(self.value_r2(r2, h), r2.ndim == 0)

    def gradient_mag(self, r: ArrayLike, h: float):
        """Derivative of the kernel with respect to |r| (≤ 0 inside support)."""
        r2 = _squared_norm(r)
        return _finish(self.gradient_r2(r2, h), r2.ndim == 0)


class KernelType(enum.Enum):
    """Kernel variants. The choice is fixed when a simulation is built."""
    SPIKY = "spiky"
    POLY6 = "poly6"


_KERNELS = {
    KernelType.SPIKY: SpikyKernel(),
    KernelType.POLY6: Poly6Kernel(),
}


def get_kernel(kind: Union[KernelType, str]):
    """Return the (stateless) kernel instance for a variant.

    Args:
        kind: KernelType or its string value ('spiky', 'poly6')

    Raises:
        ValueError: Unknown kernel name
    """
    return _KERNELS[KernelType(kind)]


def validate_normalization(kernel, h: float, n_samples: int = 20000) -> float:
    """Integrate W over the support sphere (midpoint rule in |r|).

    ∫ W dV = ∫₀ʰ 4π r² W(r, h) dr, which should be ≈ 1 for both kernels.

    Returns:
        The integral
    """
    dr = h / n_samples
    r = (np.arange(n_samples, dtype=np.float64) + 0.5) * dr
    w = kernel.value_r(r, h).astype(np.float64)
    return float(np.sum(4.0 * np.pi * r * r * w) * dr)
