"""Core SPH components: particles, kernels, integration, snapshots and the handoff channel."""

from .particles import ParticleArrays
from .kernels import SpikyKernel, Poly6Kernel, KernelType, get_kernel, validate_normalization
from .integrator import integrate_semi_implicit_euler, kinetic_energy
from .spatial_hash import UniformGridIndex
from .snapshot import RenderSnapshot, DensityColorMap, VERTEX_DTYPE
from .channel import SnapshotChannel, OverflowPolicy
from .runner import SimulationThread, run_simulation_loop

__all__ = [
    'ParticleArrays',
    'SpikyKernel',
    'Poly6Kernel',
    'KernelType',
    'get_kernel',
    'validate_normalization',
    'integrate_semi_implicit_euler',
    'kinetic_energy',
    'UniformGridIndex',
    'RenderSnapshot',
    'DensityColorMap',
    'VERTEX_DTYPE',
    'SnapshotChannel',
    'OverflowPolicy',
    'SimulationThread',
    'run_simulation_loop'
]
