"""
Initial conditions: particles scattered in a cube around the origin.

Both builders return validated ParticleArrays with zero velocity and the
static restoring force F = -k x.
"""

import numpy as np
from typing import Optional

from ..core.particles import ParticleArrays
from ..physics.forces import restoring_force


def create_random_cube(n_particles: int = 1000, half_width: float = 1.0,
                       mass: float = 1.0, stiffness: float = 0.1,
                       seed: Optional[int] = None) -> ParticleArrays:
    """Uniformly random positions in [-half_width, half_width]³.

    Args:
        n_particles: Number of particles
        half_width: Half edge length of the cube
        mass: Mass of every particle
        stiffness: Restoring force constant k
        seed: RNG seed; None draws fresh entropy

    Returns:
        ParticleArrays
    """
    rng = np.random.default_rng(seed)
    positions = rng.uniform(-half_width, half_width, size=(n_particles, 3)).astype(np.float32)
    masses = np.full(n_particles, mass, dtype=np.float32)
    return ParticleArrays.from_arrays(masses, positions,
                                      forces=restoring_force(positions, stiffness))


def create_lattice(n_per_side: int = 10, spacing: float = 0.1,
                   mass: float = 1.0, stiffness: float = 0.1) -> ParticleArrays:
    """Regular cubic lattice centered on the origin.

    Useful for reproducible density checks: interior particles all see the
    same neighborhood.
    """
    axis = (np.arange(n_per_side, dtype=np.float32) - (n_per_side - 1) / 2.0) * spacing
    gx, gy, gz = np.meshgrid(axis, axis, axis, indexing='ij')
    positions = np.column_stack((gx.ravel(), gy.ravel(), gz.ravel())).astype(np.float32)
    masses = np.full(positions.shape[0], mass, dtype=np.float32)
    return ParticleArrays.from_arrays(masses, positions,
                                      forces=restoring_force(positions, stiffness))
