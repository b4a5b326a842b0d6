"""
Vectorized time integration for SPH particles.

Semi-implicit (symplectic) Euler with the current force:
    v ← v + (dt / m) F
    x ← x + dt v
The position update uses the velocity just computed.
"""

import numpy as np

from .particles import ParticleArrays


def integrate_semi_implicit_euler(particles: ParticleArrays, dt: float):
    """Advance every particle by one time step, in place.

    Args:
        particles: Particle arrays with forces set
        dt: Time step
    """
    dt = np.float32(dt)
    dt_over_mass = dt / particles.mass

    particles.velocity_x += dt_over_mass * particles.force_x
    particles.velocity_y += dt_over_mass * particles.force_y
    particles.velocity_z += dt_over_mass * particles.force_z

    particles.position_x += dt * particles.velocity_x
    particles.position_y += dt * particles.velocity_y
    particles.position_z += dt * particles.velocity_z


def kinetic_energy(particles: ParticleArrays) -> float:
    """Total kinetic energy ½ Σ m |v|²."""
    v2 = (particles.velocity_x.astype(np.float64)**2 +
          particles.velocity_y.astype(np.float64)**2 +
          particles.velocity_z.astype(np.float64)**2)
    return float(0.5 * np.sum(particles.mass * v2))
