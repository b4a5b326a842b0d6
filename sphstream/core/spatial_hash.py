"""
Uniform-grid spatial index for the density query.

Particles are binned into cubic cells of edge ``cell_size`` (≥ h) and sorted
by cell, so every particle within distance h of a point lies in the 3x3x3
block of cells around it. Restricting the density sum to that block gives
the same result as the all-pairs sum, because the kernel is zero beyond h.
"""

import numpy as np
from typing import Iterator, Tuple

_OFFSETS = np.array([(dx, dy, dz)
                     for dx in (-1, 0, 1)
                     for dy in (-1, 0, 1)
                     for dz in (-1, 0, 1)], dtype=np.int64)


class UniformGridIndex:
    """Cell list rebuilt from scratch every tick.

    Cells are stored implicitly: particle indices sorted by linear cell key
    plus a searchsorted lookup, so memory is O(N) regardless of domain size.
    """

    def __init__(self, cell_size: float):
        if cell_size <= 0.0:
            raise ValueError(f"Cell size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self.sorted_indices = np.empty(0, dtype=np.int64)
        self.sorted_keys = np.empty(0, dtype=np.int64)
        self.cell_coords = np.empty((0, 3), dtype=np.int64)
        self.dims = np.ones(3, dtype=np.int64)

    def build(self, positions: np.ndarray):
        """Bin (N, 3) positions into cells."""
        positions = np.asarray(positions, dtype=np.float64)
        origin = positions.min(axis=0)
        coords = np.floor((positions - origin) / self.cell_size).astype(np.int64)
        self.dims = coords.max(axis=0) + 1
        keys = self._linear_key(coords)

        self.sorted_indices = np.argsort(keys, kind='stable')
        self.sorted_keys = keys[self.sorted_indices]
        self.cell_coords = coords

    def _linear_key(self, coords: np.ndarray) -> np.ndarray:
        return (coords[..., 0] * self.dims[1] + coords[..., 1]) * self.dims[2] + coords[..., 2]

    def cell_members(self, key: int) -> np.ndarray:
        start = np.searchsorted(self.sorted_keys, key, side='left')
        end = np.searchsorted(self.sorted_keys, key, side='right')
        return self.sorted_indices[start:end]

    def occupied_cells(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Yield (members, candidates) for every non-empty cell.

        candidates holds every particle in the surrounding 3x3x3 block,
        members included.
        """
        _, starts, counts = np.unique(self.sorted_keys, return_index=True,
                                      return_counts=True)
        for start, count in zip(starts, counts):
            members = self.sorted_indices[start:start + count]
            yield members, self.neighbor_candidates(self.cell_coords[members[0]])

    def neighbor_candidates(self, cell: np.ndarray) -> np.ndarray:
        """Indices of all particles in the 27 cells around ``cell``."""
        around = cell[np.newaxis, :] + _OFFSETS
        in_bounds = np.all((around >= 0) & (around < self.dims), axis=1)
        keys = self._linear_key(around[in_bounds])
        parts = [self.cell_members(k) for k in keys]
        return np.sort(np.concatenate(parts))

    def get_statistics(self) -> dict:
        """Occupancy statistics for debugging."""
        _, counts = np.unique(self.sorted_keys, return_counts=True)
        return {
            'occupied_cells': int(counts.size),
            'grid_dims': tuple(int(d) for d in self.dims),
            'max_per_cell': int(counts.max()) if counts.size else 0,
            'mean_per_cell': float(counts.mean()) if counts.size else 0.0,
        }
