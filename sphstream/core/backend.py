"""
Backend registry for the density pass.

Two backends:
1. CPU (NumPy) - always present, batched all-pairs evaluation
2. Numba - JIT-compiled double loop, no (batch, N) temporaries

Implementations register themselves under a function name with the
@backend_function / @for_backend decorators; callers go through dispatch().
A backend without an implementation falls back to CPU with a warning.
The Numba kernels are serial since the simulation runs on one thread.
"""

import enum
import logging
import warnings
from typing import Optional, Dict, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class Backend(enum.Enum):
    """Computation backends for the density sum."""
    CPU = "cpu"      # NumPy
    NUMBA = "numba"  # Numba JIT


@dataclass
class BackendInfo:
    """Availability record for one backend."""
    backend: Backend
    available: bool
    device_name: str = "CPU"


class BackendManager:
    """Holds the selected backend and the per-function implementation table."""

    def __init__(self):
        self._current_backend = Backend.CPU
        self._available_backends = {}
        self._implementations = {}
        self._detect_backends()

    def _detect_backends(self):
        self._available_backends[Backend.CPU] = BackendInfo(
            backend=Backend.CPU,
            available=True,
            device_name="CPU (NumPy)"
        )

        try:
            import numba
            numba_info = BackendInfo(backend=Backend.NUMBA, available=True,
                                     device_name=f"CPU (Numba {numba.__version__})")
        except ImportError:
            numba_info = BackendInfo(backend=Backend.NUMBA, available=False,
                                     device_name="Numba not installed")
        self._available_backends[Backend.NUMBA] = numba_info

    @property
    def current_backend(self) -> Backend:
        return self._current_backend

    def is_available(self, backend: Backend) -> bool:
        return self._available_backends[backend].available

    def set_backend(self, backend: Backend) -> bool:
        """Make ``backend`` the global default.

        Returns:
            False (and a warning) when the backend is not installed
        """
        if not self.is_available(backend):
            warnings.warn(f"Backend {backend.value} not available, keeping {self._current_backend.value}")
            return False

        self._current_backend = backend
        logger.info("Backend set to: %s", self._available_backends[backend].device_name)
        return True

    def auto_select_backend(self, n_particles: int) -> Backend:
        """Numba once the O(N²) sum outweighs its ~1 s compile, else CPU."""
        if self.is_available(Backend.NUMBA) and n_particles > 500:
            return Backend.NUMBA
        return Backend.CPU

    def register_implementation(self, function_name: str, backend: Backend,
                                implementation: Callable):
        self._implementations.setdefault(function_name, {})[backend] = implementation

    def get_implementation(self, function_name: str,
                           backend: Optional[Backend] = None) -> Callable:
        """Look up the implementation of ``function_name`` for a backend.

        Raises:
            ValueError: Nothing registered under that name
        """
        if backend is None:
            backend = self._current_backend

        registered = self._implementations.get(function_name)
        if not registered:
            raise ValueError(f"No implementations registered for {function_name}")

        if backend in registered:
            return registered[backend]

        if Backend.CPU in registered:
            warnings.warn(f"No {backend.value} implementation for {function_name}, using CPU")
            return registered[Backend.CPU]

        raise ValueError(f"No implementation found for {function_name}")

    def dispatch(self, function_name: str, *args, backend: Optional[Backend] = None, **kwargs):
        return self.get_implementation(function_name, backend)(*args, **kwargs)

    def print_info(self):
        """Print a backend availability table."""
        print("\nSPH Backend Information")
        print("=" * 60)
        for backend, info in self._available_backends.items():
            status = "✓" if info.available else "✗"
            print(f"{status} {backend.value:6s}: {info.device_name}")
        print(f"\nCurrent backend: {self._current_backend.value}")
        print("=" * 60)


# Process-wide registry
_backend_manager = BackendManager()


def set_backend(backend: str) -> bool:
    """Select the global backend by name ('cpu' or 'numba')."""
    try:
        backend_enum = Backend(backend.lower())
    except ValueError:
        warnings.warn(f"Invalid backend: {backend}. Choose from: cpu, numba")
        return False
    return _backend_manager.set_backend(backend_enum)


def get_backend() -> str:
    return _backend_manager.current_backend.value


def list_backends() -> Dict[str, bool]:
    """Backend name -> installed."""
    return {b.value: _backend_manager.is_available(b) for b in Backend}


def auto_select_backend(n_particles: int) -> str:
    """Pick and set the global backend for a particle count."""
    backend = _backend_manager.auto_select_backend(n_particles)
    _backend_manager.set_backend(backend)
    return backend.value


def resolve_backend(name: str, n_particles: int) -> Backend:
    """Turn a configured name ('auto', 'cpu', 'numba') into a usable Backend.

    Does not change the global selection. An uninstalled choice degrades to
    CPU with a warning.
    """
    if name == "auto":
        return _backend_manager.auto_select_backend(n_particles)
    backend = Backend(name)
    if not _backend_manager.is_available(backend):
        warnings.warn(f"Backend {backend.value} not available, using cpu")
        return Backend.CPU
    return backend


def print_backend_info():
    _backend_manager.print_info()


def backend_function(function_name: str):
    """Register the decorated function as ``function_name`` for its backend.

    Usage:
        @backend_function("compute_density")
        @for_backend(Backend.NUMBA)
        def compute_density_numba(...):
            ...
    """
    def decorator(func):
        if hasattr(func, '_backend'):
            _backend_manager.register_implementation(function_name, func._backend, func)
        return func
    return decorator


def for_backend(backend: Backend):
    """Tag a function with the backend it implements."""
    def decorator(func):
        func._backend = backend
        return func
    return decorator


def dispatch(function_name: str, *args, backend: Optional[str] = None, **kwargs):
    """Call ``function_name`` on the named backend (None: global selection)."""
    backend_enum = Backend(backend) if backend else None
    return _backend_manager.dispatch(function_name, *args, backend=backend_enum, **kwargs)
