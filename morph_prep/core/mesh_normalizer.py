#!/usr/bin/env python3
"""
Point cloud normalization and vertex count equalization

Every step takes and returns an (N, 3) float32 array and never mutates its input.
"""

import math
from typing import Any, Optional

import numpy as np

DEFAULT_TARGET_SIZE = 3.0
DEFAULT_TRIM_FRACTION = 0.01
DEFAULT_MAX_VERTEX_COUNT = 20000


def as_points(positions: Any) -> np.ndarray:
    """
    View flat or (N, 3) coordinates as an (N, 3) float32 array

    Raises:
        ValueError: If the coordinate count is not a multiple of 3
    """
    points = np.asarray(positions, dtype=np.float32)
    if points.ndim == 1:
        if points.size % 3 != 0:
            raise ValueError(f"Flat positions length {points.size} is not a multiple of 3")
        return points.reshape(-1, 3)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Point cloud must have shape (N, 3), got {points.shape}")
    return points


def normalize_positions(positions: Any, target_size: float = DEFAULT_TARGET_SIZE) -> np.ndarray:
    """
    Center the bounding box at the origin and scale uniformly

    The largest bounding box dimension becomes target_size. A degenerate
    (zero-size) box is only centered.

    Args:
        positions: Input point cloud
        target_size: Edge length of the largest box dimension after scaling

    Returns:
        Normalized point cloud
    """
    points = as_points(positions)
    if len(points) == 0:
        return points.copy()

    pts = points.astype(np.float64)
    min_corner = pts.min(axis=0)
    max_corner = pts.max(axis=0)
    center = (min_corner + max_corner) / 2
    max_dim = float(np.max(max_corner - min_corner))
    scale = target_size / max_dim if max_dim > 0 else 1.0

    return ((pts - center) * scale).astype(np.float32)


def trim_bottom(positions: Any, fraction: float = DEFAULT_TRIM_FRACTION) -> np.ndarray:
    """
    Drop points within the lowest fraction of the Y range

    Points with y <= min_y + fraction * height are removed. If that would
    remove every point, the cloud is returned untrimmed.
    """
    points = as_points(positions)
    if len(points) == 0:
        return points

    heights = points[:, 1].astype(np.float64)
    min_y = heights.min()
    max_y = heights.max()
    threshold = min_y + (max_y - min_y) * fraction

    kept = points[heights > threshold]
    return kept if len(kept) >= 1 else points


def clamp_positions(positions: Any, max_vertices: int = DEFAULT_MAX_VERTEX_COUNT) -> np.ndarray:
    """
    Decimate a cloud that exceeds max_vertices

    Keeps every stride-th point in order, stride = ceil(count / max_vertices),
    for floor(count / stride) points. Clouds at or under the cap pass through.
    """
    points = as_points(positions)
    vert_count = len(points)
    if vert_count <= max_vertices:
        return points

    stride = math.ceil(vert_count / max_vertices)
    kept_vertices = vert_count // stride
    return points[::stride][:kept_vertices].copy()


def adjust_vertex_count(positions: Any, target_count: int) -> np.ndarray:
    """
    Pad or truncate a cloud to exactly target_count points

    Missing points repeat the cloud's final point; an empty cloud pads with
    the origin.

    Args:
        positions: Input point cloud
        target_count: Required number of points

    Returns:
        (target_count, 3) float32 array
    """
    if target_count < 0:
        raise ValueError(f"Target vertex count must be non-negative, got {target_count}")

    points = as_points(positions)
    adjusted = np.zeros((target_count, 3), dtype=np.float32)

    copy_count = min(len(points), target_count)
    adjusted[:copy_count] = points[:copy_count]

    if copy_count < target_count and copy_count > 0:
        adjusted[copy_count:] = adjusted[copy_count - 1]

    return adjusted


class MeshNormalizer:
    """Normalize, trim and downsample raw point clouds"""

    def __init__(self,
                 target_size: float = DEFAULT_TARGET_SIZE,
                 trim_fraction: float = DEFAULT_TRIM_FRACTION,
                 max_vertex_count: Optional[int] = DEFAULT_MAX_VERTEX_COUNT):
        self.target_size = target_size
        self.trim_fraction = trim_fraction
        self.max_vertex_count = max_vertex_count

    @classmethod
    def from_config(cls, config):
        """Build from a ConfigManager's geometry section"""
        return cls(
            target_size=config.get('geometry.target_size', DEFAULT_TARGET_SIZE),
            trim_fraction=config.get('geometry.trim_fraction', DEFAULT_TRIM_FRACTION),
            max_vertex_count=config.get('geometry.max_vertex_count', DEFAULT_MAX_VERTEX_COUNT),
        )

    def process(self, positions: Any) -> np.ndarray:
        """Normalize, trim bottom and clamp, in that order"""
        points = normalize_positions(positions, self.target_size)
        if self.trim_fraction:
            points = trim_bottom(points, self.trim_fraction)
        if self.max_vertex_count:
            points = clamp_positions(points, self.max_vertex_count)
        return points


def prepare_cloud(positions: Any,
                  target_size: float = DEFAULT_TARGET_SIZE,
                  trim_fraction: float = DEFAULT_TRIM_FRACTION,
                  max_vertex_count: Optional[int] = DEFAULT_MAX_VERTEX_COUNT) -> np.ndarray:
    """Functional form of MeshNormalizer.process"""
    return MeshNormalizer(target_size, trim_fraction, max_vertex_count).process(positions)
