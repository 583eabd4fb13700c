#!/usr/bin/env python3
"""
morph-prep

Offline preparation of morph-ready point clouds and blendable color palettes.

Features:
- Mesh normalization (center, scale, bottom trim, decimation)
- Vertex count equalization across models
- Greedy nearest-neighbor correspondence backed by a spatial hash grid
- Lab color conversion and perceptual nearest-color matching
- Optimal palette pairing via the assignment problem
- Palette interpolation
"""

__version__ = "1.0.0"
__author__ = "Advanced Mesh Processing"
__email__ = "contact@meshprocessing.com"

# Core classes
from .core.color_space import RGB, Lab, rgb_to_lab, lab_to_rgb
from .core.palette import sort_colors_by_pairing, interpolate_palette
from .core.mesh_normalizer import MeshNormalizer, adjust_vertex_count
from .core.spatial_grid import SpatialHashGrid
from .core.correspondence import CorrespondenceBuilder, reorder_to_nearest
from .core.pipeline import Manifest, build_manifest
from .config.settings import ConfigManager

# Utility functions
from .utils.performance import PerformanceMonitor
from .utils.validation import validate_point_cloud, validate_palette, validate_config

__all__ = [
    "RGB",
    "Lab",
    "rgb_to_lab",
    "lab_to_rgb",
    "sort_colors_by_pairing",
    "interpolate_palette",
    "MeshNormalizer",
    "adjust_vertex_count",
    "SpatialHashGrid",
    "CorrespondenceBuilder",
    "reorder_to_nearest",
    "Manifest",
    "build_manifest",
    "ConfigManager",
    "PerformanceMonitor",
    "validate_point_cloud",
    "validate_palette",
    "validate_config",
    "__version__",
    "__author__",
    "__email__",
]

import os
CPU_CORES = os.cpu_count()


def print_info():
    """Print library information"""
    print(f"morph-prep v{__version__}")
    print(f"CPU cores: {CPU_CORES}")


if __name__ == "__main__":
    print_info()
