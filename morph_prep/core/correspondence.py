#!/usr/bin/env python3
"""
Greedy nearest-neighbor correspondence between two equal-size point clouds

Reference points are visited in ascending index order; each takes the closest
still-available target point, found through a spatial hash grid with an
exhaustive scan as fallback. The result is a bijection, not a global optimum:
changing the visiting order changes the matching.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .mesh_normalizer import as_points
from .spatial_grid import SpatialHashGrid, union_bounds

DEFAULT_GRID_DIVISIONS = 20
DEFAULT_MAX_RING_RADIUS = 2


@dataclass
class CorrespondenceStats:
    """Counters gathered while building one correspondence"""
    vertex_count: int = 0
    grid_matches: int = 0
    fallback_matches: int = 0
    total_squared_distance: float = 0.0
    cell_size: float = 0.0

    @property
    def mean_squared_distance(self) -> float:
        if self.vertex_count == 0:
            return 0.0
        return self.total_squared_distance / self.vertex_count

    def to_dict(self):
        return {
            'vertex_count': self.vertex_count,
            'grid_matches': self.grid_matches,
            'fallback_matches': self.fallback_matches,
            'mean_squared_distance': self.mean_squared_distance,
            'cell_size': self.cell_size,
        }


class CorrespondenceBuilder:
    """Aligns target clouds to a reference cloud index by index"""

    def __init__(self, grid_divisions: int = DEFAULT_GRID_DIVISIONS,
                 max_ring_radius: int = DEFAULT_MAX_RING_RADIUS):
        if grid_divisions < 1:
            raise ValueError(f"grid_divisions must be at least 1, got {grid_divisions}")
        if max_ring_radius < 0:
            raise ValueError(f"max_ring_radius must be non-negative, got {max_ring_radius}")
        self.grid_divisions = grid_divisions
        self.max_ring_radius = max_ring_radius
        self.last_stats: Optional[CorrespondenceStats] = None

    @classmethod
    def from_config(cls, config):
        """Build from a ConfigManager's correspondence section"""
        return cls(
            grid_divisions=config.get('correspondence.grid_divisions', DEFAULT_GRID_DIVISIONS),
            max_ring_radius=config.get('correspondence.max_ring_radius', DEFAULT_MAX_RING_RADIUS),
        )

    def build(self, reference: Any, target: Any) -> np.ndarray:
        """
        Pick a distinct target index for every reference index

        Args:
            reference: (N, 3) reference cloud
            target: (N, 3) cloud to align

        Returns:
            int64 array where entry i is the target index matched to reference i

        Raises:
            ValueError: If the clouds differ in length
        """
        ref = as_points(reference).astype(np.float64)
        tgt = as_points(target)
        if len(ref) != len(tgt):
            raise ValueError(
                f"Correspondence requires equal-length clouds ({len(ref)} != {len(tgt)})"
            )

        stats = CorrespondenceStats(vertex_count=len(ref))
        self.last_stats = stats
        mapping = np.full(len(ref), -1, dtype=np.int64)
        if len(ref) == 0:
            return mapping

        min_corner, max_corner = union_bounds(ref, tgt)
        grid = SpatialHashGrid.from_bounds(tgt, min_corner, max_corner, self.grid_divisions)
        stats.cell_size = grid.cell_size

        for i, point in enumerate(ref):
            nearest = grid.nearest(point, self.max_ring_radius)
            if nearest == -1:
                nearest = grid.nearest_exhaustive(point)
                stats.fallback_matches += 1
            else:
                stats.grid_matches += 1

            grid.remove(nearest)
            mapping[i] = nearest
            stats.total_squared_distance += grid.squared_distance(nearest, point)

        return mapping

    def reorder(self, reference: Any, target: Any) -> np.ndarray:
        """Target cloud permuted so index i holds the point matched to reference i"""
        tgt = as_points(target)
        mapping = self.build(reference, tgt)
        return tgt[mapping].copy()


def reorder_to_nearest(reference: Any, target: Any,
                       grid_divisions: int = DEFAULT_GRID_DIVISIONS,
                       max_ring_radius: int = DEFAULT_MAX_RING_RADIUS) -> np.ndarray:
    """Functional form of CorrespondenceBuilder.reorder"""
    return CorrespondenceBuilder(grid_divisions, max_ring_radius).reorder(reference, target)
