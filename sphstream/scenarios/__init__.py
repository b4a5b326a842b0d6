"""Initial particle distributions."""

from .random_cube import create_random_cube, create_lattice

__all__ = ['create_random_cube', 'create_lattice']
