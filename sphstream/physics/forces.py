"""
Force initialization and the per-tick force hook.

The base model keeps forces static for the whole run: they are set once at
construction and the integrator reuses them every tick. A force model is a
callable ``model(particles, h)`` run at the start of each tick that may
overwrite ``force_x/y/z``; interaction-derived forces plug in there.
"""

import numpy as np
from typing import Callable

from ..core.particles import ParticleArrays

ForceModel = Callable[[ParticleArrays, float], None]


def restoring_force(positions: np.ndarray, stiffness: float = 0.1) -> np.ndarray:
    """Linear pull toward the origin, F = -k x.

    Args:
        positions: (N, 3) positions
        stiffness: Spring constant k

    Returns:
        (N, 3) float32 forces
    """
    return (-stiffness * np.asarray(positions, dtype=np.float32)).astype(np.float32)


class RestoringForceModel:
    """Recompute F = -k x from the current positions every tick.

    Unlike the static base force this follows the particles, giving a
    harmonic trap.
    """

    def __init__(self, stiffness: float = 0.1):
        self.stiffness = stiffness

    def __call__(self, particles: ParticleArrays, h: float):
        k = np.float32(self.stiffness)
        particles.force_x[:] = -k * particles.position_x
        particles.force_y[:] = -k * particles.position_y
        particles.force_z[:] = -k * particles.position_z
