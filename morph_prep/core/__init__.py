#!/usr/bin/env python3
"""
Core geometry and color algorithms for morph-prep
"""

from .color_space import RGB, Lab, rgb_to_lab, lab_to_rgb
from .color_matching import (
    color_distance,
    find_closest_color,
    find_closest_color_index,
    find_closest_color_index_ab,
    find_closest_color_index_l,
)
from .palette import (
    create_distance_matrix,
    solve_assignment,
    sort_colors_by_pairing,
    interpolate_palette,
)
from .mesh_normalizer import MeshNormalizer, adjust_vertex_count
from .spatial_grid import SpatialHashGrid
from .correspondence import CorrespondenceBuilder, reorder_to_nearest
from .pipeline import Manifest, build_manifest

__all__ = [
    "RGB",
    "Lab",
    "rgb_to_lab",
    "lab_to_rgb",
    "color_distance",
    "find_closest_color",
    "find_closest_color_index",
    "find_closest_color_index_ab",
    "find_closest_color_index_l",
    "create_distance_matrix",
    "solve_assignment",
    "sort_colors_by_pairing",
    "interpolate_palette",
    "MeshNormalizer",
    "adjust_vertex_count",
    "SpatialHashGrid",
    "CorrespondenceBuilder",
    "reorder_to_nearest",
    "Manifest",
    "build_manifest",
]
