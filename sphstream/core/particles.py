"""
Particle data structure using the Structure-of-Arrays (SoA) pattern.

One contiguous float32 array per component keeps the integrator and the
density loops vectorizable (NumPy) and directly usable from Numba kernels.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError


@dataclass
class ParticleArrays:
    """Mutable particle state owned by the simulation thread.

    Mass is fixed for the run: the array is flagged read-only after
    construction so an accidental write raises instead of silently
    changing the system.
    """
    mass: np.ndarray            # shape: (N,) float32, read-only

    position_x: np.ndarray      # shape: (N,) float32
    position_y: np.ndarray
    position_z: np.ndarray

    velocity_x: np.ndarray      # shape: (N,) float32
    velocity_y: np.ndarray
    velocity_z: np.ndarray

    # Net force acting on each particle; static unless a force model updates it
    force_x: np.ndarray         # shape: (N,) float32
    force_y: np.ndarray
    force_z: np.ndarray

    # Output of the latest density pass
    density: np.ndarray         # shape: (N,) float32

    @staticmethod
    def from_arrays(mass, positions, velocities=None, forces=None) -> 'ParticleArrays':
        """Validate and copy initial state into a new ParticleArrays.

        Args:
            mass: Per-particle masses, shape (N,), all positive and finite
            positions: Initial positions, shape (N, 3)
            velocities: Initial velocities, shape (N, 3); zeros if None
            forces: Net forces, shape (N, 3); zeros if None

        Raises:
            ConfigurationError: Empty system, bad shapes or invalid masses
        """
        mass = np.array(mass, dtype=np.float32).reshape(-1)
        n = mass.shape[0]
        if n == 0:
            raise ConfigurationError("Particle count must be positive")
        if not np.all(np.isfinite(mass)) or np.any(mass <= 0.0):
            raise ConfigurationError("All particle masses must be positive and finite")

        positions = _as_vectors(positions, n, "positions")
        velocities = (np.zeros((n, 3), dtype=np.float32) if velocities is None
                      else _as_vectors(velocities, n, "velocities"))
        forces = (np.zeros((n, 3), dtype=np.float32) if forces is None
                  else _as_vectors(forces, n, "forces"))

        mass.flags.writeable = False

        return ParticleArrays(
            mass=mass,
            position_x=positions[:, 0].copy(),
            position_y=positions[:, 1].copy(),
            position_z=positions[:, 2].copy(),
            velocity_x=velocities[:, 0].copy(),
            velocity_y=velocities[:, 1].copy(),
            velocity_z=velocities[:, 2].copy(),
            force_x=forces[:, 0].copy(),
            force_y=forces[:, 1].copy(),
            force_z=forces[:, 2].copy(),
            density=np.zeros(n, dtype=np.float32),
        )

    @property
    def n_particles(self) -> int:
        return self.mass.shape[0]

    def get_positions(self, indices: Optional[np.ndarray] = None) -> np.ndarray:
        """Get particle positions as (N, 3) array."""
        if indices is None:
            return np.column_stack((self.position_x, self.position_y, self.position_z))
        return np.column_stack((self.position_x[indices], self.position_y[indices],
                                self.position_z[indices]))

    def get_velocities(self, indices: Optional[np.ndarray] = None) -> np.ndarray:
        """Get particle velocities as (N, 3) array."""
        if indices is None:
            return np.column_stack((self.velocity_x, self.velocity_y, self.velocity_z))
        return np.column_stack((self.velocity_x[indices], self.velocity_y[indices],
                                self.velocity_z[indices]))

    def get_forces(self) -> np.ndarray:
        """Get net forces as (N, 3) array."""
        return np.column_stack((self.force_x, self.force_y, self.force_z))

    def set_forces(self, forces: np.ndarray):
        """Overwrite the force accumulators from an (N, 3) array."""
        forces = _as_vectors(forces, self.n_particles, "forces")
        self.force_x[:] = forces[:, 0]
        self.force_y[:] = forces[:, 1]
        self.force_z[:] = forces[:, 2]

    def total_mass(self) -> float:
        return float(np.sum(self.mass, dtype=np.float64))


def _as_vectors(values, n: int, name: str) -> np.ndarray:
    values = np.asarray(values, dtype=np.float32)
    if values.shape != (n, 3):
        raise ConfigurationError(f"{name} must have shape ({n}, 3), got {values.shape}")
    if not np.all(np.isfinite(values)):
        raise ConfigurationError(f"{name} must be finite")
    return values
