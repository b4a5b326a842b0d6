"""
Step function tying particles, kernels and the density pass together.

Each tick:
1. optional force model refreshes the forces
2. semi-implicit Euler advances velocities, then positions
3. density is summed over all particles at the advanced positions
4. a render snapshot is copied out
"""

import logging
from typing import List, Optional

from .api import compute_density, compute_density_indexed
from .config import SimulationConfig
from .core.backend import resolve_backend
from .core.integrator import integrate_semi_implicit_euler
from .core.particles import ParticleArrays
from .core.snapshot import ColorMap, DensityColorMap, RenderSnapshot
from .physics.forces import ForceModel

logger = logging.getLogger(__name__)


class Simulation:
    """Single-threaded SPH system advanced one fixed dt per step().

    The instance owns its ParticleArrays; nothing outside the simulation
    thread should read or write them while the loop is running. Consumers
    get RenderSnapshot copies instead.
    """

    def __init__(self, particles: ParticleArrays,
                 config: Optional[SimulationConfig] = None,
                 force_model: Optional[ForceModel] = None,
                 color_map: Optional[ColorMap] = None):
        self.config = config if config is not None else SimulationConfig()
        self.particles = particles
        self.backend = resolve_backend(self.config.backend, particles.n_particles)
        self.force_model = force_model
        self.color_map = color_map or DensityColorMap(self.config.color_normalization)
        self.tick = 0

    @classmethod
    def from_arrays(cls, mass, positions, velocities=None, forces=None,
                    config: Optional[SimulationConfig] = None, **kwargs) -> 'Simulation':
        """Validate raw arrays and build a simulation from them."""
        return cls(ParticleArrays.from_arrays(mass, positions, velocities, forces),
                   config=config, **kwargs)

    @property
    def n_particles(self) -> int:
        return self.particles.n_particles

    @property
    def density(self):
        """Density from the latest tick (live array, do not share)."""
        return self.particles.density

    def compute_density(self):
        h = self.config.smoothing_h
        if self.config.use_spatial_index:
            compute_density_indexed(self.particles, self.config.density_kernel, h)
        else:
            compute_density(self.particles, self.config.density_kernel, h,
                            backend=self.backend.value)

    def step(self) -> RenderSnapshot:
        """Advance one tick and return its snapshot."""
        if self.force_model is not None:
            self.force_model(self.particles, self.config.smoothing_h)

        integrate_semi_implicit_euler(self.particles, self.config.dt)
        # Density must see this tick's positions
        self.compute_density()

        self.tick += 1
        snapshot = RenderSnapshot.capture(self.tick, self.particles, self.color_map)
        logger.debug("tick %d done", self.tick)
        return snapshot

    def run(self, n_ticks: int) -> List[RenderSnapshot]:
        """Step n_ticks times and collect the snapshots."""
        return [self.step() for _ in range(n_ticks)]
