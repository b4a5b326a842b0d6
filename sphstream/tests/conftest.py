"""Pytest configuration for sphstream tests."""
import os
import sys
from pathlib import Path

import numpy as np
import pytest


def pytest_configure(config):
    """Configure pytest environment for sphstream tests."""
    # Add workspace root to Python path for sphstream package imports
    workspace_root = Path(__file__).parent.parent.parent
    if str(workspace_root) not in sys.path:
        sys.path.insert(0, str(workspace_root))

    # Set SDL to use dummy video driver for headless operation
    os.environ['SDL_VIDEODRIVER'] = 'dummy'
    os.environ['SDL_AUDIODRIVER'] = 'dummy'


@pytest.fixture
def two_particles():
    """Two resting unit masses half a smoothing radius apart."""
    from sphstream.core.particles import ParticleArrays
    return ParticleArrays.from_arrays(
        mass=[1.0, 1.0],
        positions=[[0.0, 0.0, 0.0], [0.5, 0.0, 0.0]],
        velocities=[[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]],
        forces=[[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]],
    )


@pytest.fixture
def cube_particles():
    """Seeded random cube, 200 particles."""
    from sphstream.scenarios import create_random_cube
    return create_random_cube(200, seed=7)


@pytest.fixture
def make_snapshot():
    """Factory for small standalone snapshots (channel tests)."""
    from sphstream.core.particles import ParticleArrays
    from sphstream.core.snapshot import DensityColorMap, RenderSnapshot

    def _make(tick: int, n: int = 4):
        particles = ParticleArrays.from_arrays(np.ones(n), np.full((n, 3), float(tick)))
        return RenderSnapshot.capture(tick, particles, DensityColorMap())
    return _make
