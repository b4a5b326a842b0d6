"""sphstream: SPH simulation core streaming per-tick render snapshots to a consumer thread."""

from . import core
from . import physics
from . import scenarios

# Import API to trigger backend registration
from . import api

from .api import (
    compute_density,
    compute_density_indexed,
    set_backend,
    get_backend,
    list_backends,
    auto_select_backend,
    print_backend_info,
)
from .config import SimulationConfig
from .errors import SPHError, ConfigurationError, ChannelClosed
from .core import (
    ParticleArrays,
    SpikyKernel,
    Poly6Kernel,
    KernelType,
    get_kernel,
    RenderSnapshot,
    DensityColorMap,
    SnapshotChannel,
    OverflowPolicy,
    SimulationThread,
    run_simulation_loop,
)
from .simulation import Simulation
from .logging_utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Modules
    'core',
    'physics',
    'scenarios',

    # API functions
    'compute_density',
    'compute_density_indexed',
    'set_backend',
    'get_backend',
    'list_backends',
    'auto_select_backend',
    'print_backend_info',
    'configure_logging',

    # Core classes
    'Simulation',
    'SimulationConfig',
    'ParticleArrays',
    'SpikyKernel',
    'Poly6Kernel',
    'KernelType',
    'get_kernel',
    'RenderSnapshot',
    'DensityColorMap',
    'SnapshotChannel',
    'OverflowPolicy',
    'SimulationThread',
    'run_simulation_loop',

    # Errors
    'SPHError',
    'ConfigurationError',
    'ChannelClosed'
]
