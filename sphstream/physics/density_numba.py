"""
Numba-optimized density computation for SPH.

Same all-pairs sum as the NumPy path, without the (batch, N) temporaries.
Serial on purpose: the simulation owns a single thread.
"""

import numpy as np
import numba as nb

from ..core.kernels import KernelType
from ..core.particles import ParticleArrays

SPIKY_ID = 0
POLY6_ID = 1


@nb.njit(cache=True)
def spiky_kernel(r2: float, h: float) -> float:
    """Spiky kernel from squared distance (support 0 ≤ r ≤ h)."""
    r = np.sqrt(r2)
    if r >= 0.0 and r <= h:
        c = 15.0 / (np.pi * h ** 6)
        h_sub_r = h - r
        return c * h_sub_r * h_sub_r * h_sub_r
    return 0.0


@nb.njit(cache=True)
def poly6_kernel(r2: float, h: float) -> float:
    """Poly6 kernel from squared distance; exactly 0 at r = 0."""
    h2 = h * h
    if r2 <= h2 and r2 > 0.0:
        c = 315.0 / (64.0 * np.pi * h ** 9)
        diff = h2 - r2
        return c * diff * diff * diff
    return 0.0


@nb.njit(cache=True)
def compute_density_numba(position_x: np.ndarray, position_y: np.ndarray,
                          position_z: np.ndarray, mass: np.ndarray,
                          density: np.ndarray, h: float, kernel_id: int):
    """All-pairs density ρᵢ = Σⱼ mⱼ W(rᵢ - rⱼ, h), j over every particle."""
    n = position_x.shape[0]
    for i in range(n):
        xi = position_x[i]
        yi = position_y[i]
        zi = position_z[i]
        rho = 0.0
        for j in range(n):
            dx = xi - position_x[j]
            dy = yi - position_y[j]
            dz = zi - position_z[j]
            r2 = dx * dx + dy * dy + dz * dz
            if kernel_id == POLY6_ID:
                rho += mass[j] * poly6_kernel(r2, h)
            else:
                rho += mass[j] * spiky_kernel(r2, h)
        density[i] = rho


def compute_density_numba_wrapper(particles: ParticleArrays, kernel_type: KernelType, h: float):
    """Wrapper for Numba density computation that matches standard interface."""
    kernel_id = POLY6_ID if kernel_type == KernelType.POLY6 else SPIKY_ID
    compute_density_numba(
        particles.position_x, particles.position_y, particles.position_z,
        particles.mass, particles.density,
        float(h), kernel_id
    )
