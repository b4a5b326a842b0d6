"""
Unified API for the density pass with automatic backend dispatch.

Importing this module registers the CPU implementation and, when Numba can
be imported, the JIT implementation.
"""

from typing import Optional, Union

from .core.backend import dispatch, backend_function, for_backend, Backend
from .core.backend import set_backend, get_backend, list_backends, auto_select_backend, print_backend_info
from .core.kernels import KernelType, get_kernel
from .core.particles import ParticleArrays
from .physics.density_vectorized import compute_density_vectorized, compute_density_grid


@backend_function("compute_density")
@for_backend(Backend.CPU)
def _compute_density_cpu(particles: ParticleArrays, kernel_type: KernelType, h: float):
    compute_density_vectorized(particles, get_kernel(kernel_type), h)


# Try to import and register Numba implementations
try:
    from .physics.density_numba import compute_density_numba_wrapper

    @backend_function("compute_density")
    @for_backend(Backend.NUMBA)
    def _compute_density_numba(particles: ParticleArrays, kernel_type: KernelType, h: float):
        compute_density_numba_wrapper(particles, kernel_type, h)

except ImportError:
    pass


def compute_density(particles: ParticleArrays,
                    kernel_type: Union[KernelType, str] = KernelType.POLY6,
                    h: float = 1.0, backend: Optional[str] = None):
    """Fill particles.density by all-pairs kernel summation.

    Args:
        particles: Particle arrays
        kernel_type: Kernel variant for W
        h: Smoothing radius
        backend: 'cpu' or 'numba'; None uses the global selection
    """
    dispatch("compute_density", particles, KernelType(kernel_type), h, backend=backend)


def compute_density_indexed(particles: ParticleArrays,
                            kernel_type: Union[KernelType, str] = KernelType.POLY6,
                            h: float = 1.0):
    """Same result as compute_density, evaluated through a uniform grid."""
    compute_density_grid(particles, get_kernel(kernel_type), h)


__all__ = [
    'compute_density',
    'compute_density_indexed',
    'set_backend',
    'get_backend',
    'list_backends',
    'auto_select_backend',
    'print_backend_info',
]
