#!/usr/bin/env python3
"""
Uniform spatial hash grid with consumable entries

Indices are bucketed by the integer cell their point falls into. Once an
index is removed it is never re-added, so the grid only moves from "all
points available" toward "fully consumed".
"""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

CellKey = Tuple[int, int, int]


def union_bounds(*clouds: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Axis-aligned bounding box enclosing every point of every cloud"""
    stacked = np.concatenate([np.asarray(c, dtype=np.float64).reshape(-1, 3) for c in clouds])
    return stacked.min(axis=0), stacked.max(axis=0)


class SpatialHashGrid:
    """Bucketed index over a fixed point set supporting removal and ring queries"""

    def __init__(self, points: Any, cell_size: float, origin: Sequence[float] = (0.0, 0.0, 0.0),
                 populate: bool = True):
        if cell_size <= 0:
            raise ValueError(f"Cell size must be positive, got {cell_size}")

        self.points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        self.cell_size = float(cell_size)
        self.origin = np.asarray(origin, dtype=np.float64)
        self.buckets: Dict[CellKey, List[int]] = {}
        self.available = np.zeros(len(self.points), dtype=bool)
        self.consumed = np.zeros(len(self.points), dtype=bool)
        self._cells = np.floor((self.points - self.origin) / self.cell_size).astype(np.int64)

        if populate:
            for index in range(len(self.points)):
                self.insert(index)

    @classmethod
    def from_bounds(cls, points: Any, min_corner, max_corner, divisions: int = 20):
        """
        Build a grid whose cell size is the largest box dimension / divisions

        Args:
            points: Points to index
            min_corner: Lower corner of the bounding box (also the grid origin)
            max_corner: Upper corner of the bounding box
            divisions: Cells along the largest dimension

        Returns:
            Populated grid
        """
        min_corner = np.asarray(min_corner, dtype=np.float64)
        max_corner = np.asarray(max_corner, dtype=np.float64)
        max_dim = float(np.max(max_corner - min_corner))
        cell_size = max_dim / divisions if max_dim > 0 else 1.0
        return cls(points, cell_size, origin=min_corner)

    def __len__(self):
        return self.available_count

    @property
    def available_count(self) -> int:
        return int(np.count_nonzero(self.available))

    def is_available(self, index: int) -> bool:
        return bool(self.available[index])

    def cell_of(self, point: Sequence[float]) -> CellKey:
        """Integer cell coordinate of an arbitrary point"""
        return (
            math.floor((point[0] - self.origin[0]) / self.cell_size),
            math.floor((point[1] - self.origin[1]) / self.cell_size),
            math.floor((point[2] - self.origin[2]) / self.cell_size),
        )

    def insert(self, index: int) -> None:
        """Make a point index available"""
        if self.consumed[index]:
            raise ValueError(f"Index {index} was already consumed")
        if self.available[index]:
            return
        key = tuple(int(c) for c in self._cells[index])
        self.buckets.setdefault(key, []).append(index)
        self.available[index] = True

    def remove(self, index: int) -> None:
        """Consume a point index"""
        if not self.available[index]:
            return
        self.available[index] = False
        self.consumed[index] = True
        key = tuple(int(c) for c in self._cells[index])
        bucket = self.buckets.get(key)
        if bucket is not None:
            bucket.remove(index)
            if not bucket:
                del self.buckets[key]

    def _closest(self, candidates: List[int], point: Sequence[float]) -> Tuple[int, float]:
        # np.argmin keeps the first minimum, so earlier candidates win ties
        idx = np.asarray(candidates, dtype=np.int64)
        diff = self.points[idx] - np.asarray(point, dtype=np.float64)
        dist2 = diff[:, 0] ** 2 + diff[:, 1] ** 2 + diff[:, 2] ** 2
        best = int(np.argmin(dist2))
        return int(idx[best]), float(dist2[best])

    def query_ring(self, point: Sequence[float], radius: int) -> List[int]:
        """
        Available indices in the (2r+1)^3 block of cells around a point

        Cells are visited in dx, dy, dz order and buckets in insertion order.
        """
        cx, cy, cz = self.cell_of(point)
        found = []
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                for dz in range(-radius, radius + 1):
                    bucket = self.buckets.get((cx + dx, cy + dy, cz + dz))
                    if bucket:
                        found.extend(bucket)
        return found

    def nearest(self, point: Sequence[float], max_ring_radius: int = 2) -> int:
        """
        Closest available index found in the first non-empty ring

        Rings expand from radius 0 up to max_ring_radius. Within that ring the
        candidate with the smallest squared distance wins, earliest on ties.

        Returns:
            Point index, or -1 if nothing is available within max_ring_radius
        """
        for radius in range(max_ring_radius + 1):
            candidates = self.query_ring(point, radius)
            if candidates:
                return self._closest(candidates, point)[0]
        return -1

    def nearest_exhaustive(self, point: Sequence[float]) -> int:
        """Closest available index by linear scan in ascending index order, or -1"""
        candidates = np.flatnonzero(self.available)
        if len(candidates) == 0:
            return -1
        return self._closest(candidates.tolist(), point)[0]

    def squared_distance(self, index: int, point: Sequence[float]) -> float:
        diff = self.points[index] - np.asarray(point, dtype=np.float64)
        return float(diff[0] ** 2 + diff[1] ** 2 + diff[2] ** 2)

    def occupancy(self) -> Dict[str, Optional[float]]:
        """Bucket statistics for diagnostics"""
        sizes = [len(b) for b in self.buckets.values()]
        return {
            'cells': len(sizes),
            'available': self.available_count,
            'max_bucket': max(sizes) if sizes else 0,
            'mean_bucket': float(np.mean(sizes)) if sizes else None,
        }
