"""
Render snapshots: immutable per-tick copies of particle positions and colors.

A snapshot never aliases live particle state. Its arrays are copies flagged
read-only, so handing one to another thread needs no locking.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable

from .particles import ParticleArrays

# One render record per particle
VERTEX_DTYPE = np.dtype([
    ('position', np.float32, (3,)),
    ('color', np.float32, (3,)),
])

ColorMap = Callable[[np.ndarray], np.ndarray]


class DensityColorMap:
    """Map density d to (d/D, 1, d/D).

    Values are not clamped; dense regions exceed 1.0 and consumers are
    expected to clamp or tone-map.
    """

    def __init__(self, normalization: float = 150.0):
        self.normalization = normalization

    def __call__(self, density: np.ndarray) -> np.ndarray:
        scaled = np.asarray(density, dtype=np.float32) / np.float32(self.normalization)
        colors = np.ones((scaled.shape[0], 3), dtype=np.float32)
        colors[:, 0] = scaled
        colors[:, 2] = scaled
        return colors


@dataclass(frozen=True, eq=False)
class RenderSnapshot:
    """Output of one tick: N records in particle index order."""
    tick: int
    records: np.ndarray     # shape: (N,) VERTEX_DTYPE, read-only
    density: np.ndarray     # shape: (N,) float32, read-only

    @staticmethod
    def capture(tick: int, particles: ParticleArrays,
                color_map: ColorMap) -> 'RenderSnapshot':
        """Copy positions and density out of live state and color them."""
        n = particles.n_particles
        records = np.empty(n, dtype=VERTEX_DTYPE)
        records['position'][:, 0] = particles.position_x
        records['position'][:, 1] = particles.position_y
        records['position'][:, 2] = particles.position_z
        records['color'] = color_map(particles.density)

        density = particles.density.copy()
        records.flags.writeable = False
        density.flags.writeable = False
        return RenderSnapshot(tick=tick, records=records, density=density)

    def __len__(self) -> int:
        return self.records.shape[0]

    @property
    def positions(self) -> np.ndarray:
        """(N, 3) read-only view of record positions."""
        return self.records['position']

    @property
    def colors(self) -> np.ndarray:
        """(N, 3) read-only view of record colors."""
        return self.records['color']
