"""Physics passes: density summation and force models."""

from .density_vectorized import compute_density_vectorized, compute_density_grid, density_statistics
from .forces import restoring_force, RestoringForceModel, ForceModel

__all__ = [
    'compute_density_vectorized',
    'compute_density_grid',
    'density_statistics',
    'restoring_force',
    'RestoringForceModel',
    'ForceModel'
]
