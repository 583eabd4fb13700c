#!/usr/bin/env python3
"""
Validation utilities for morph-prep
"""

import os
import sys
import numpy as np
from typing import Tuple, Dict, Any, Sequence


def validate_point_cloud(points: Any) -> Tuple[bool, str]:
    """
    Validate a point cloud for the geometry pipeline

    Args:
        points: Flat or (N, 3) coordinates

    Returns:
        (is_valid, error_message)
    """
    try:
        array = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        return False, f"Point cloud is not numeric: {e}"

    if array.ndim == 1:
        if array.size % 3 != 0:
            return False, "Flat positions length must be a multiple of 3"
        array = array.reshape(-1, 3)

    if array.ndim != 2 or array.shape[1] != 3:
        return False, f"Point cloud must have shape (N, 3), got {array.shape}"

    if len(array) == 0:
        return False, "Point cloud has no vertices"

    if not np.all(np.isfinite(array)):
        return False, "Point cloud contains NaN or infinite coordinates"

    return True, "Point cloud is valid"


def validate_cloud_pair(reference: Any, target: Any) -> Tuple[bool, str]:
    """
    Validate a reference/target pair for correspondence

    Returns:
        (is_valid, error_message)
    """
    ref_valid, ref_msg = validate_point_cloud(reference)
    if not ref_valid:
        return False, f"Reference validation failed: {ref_msg}"

    target_valid, target_msg = validate_point_cloud(target)
    if not target_valid:
        return False, f"Target validation failed: {target_msg}"

    ref_count = np.asarray(reference).size // 3
    target_count = np.asarray(target).size // 3
    if ref_count != target_count:
        return False, f"Clouds differ in length ({ref_count} != {target_count})"

    return True, "Cloud pair is valid for correspondence"


def validate_palette(palette: Sequence[Any]) -> Tuple[bool, str]:
    """
    Validate a palette of RGB colors

    Args:
        palette: Sequence of RGB tuples, dicts or 3-sequences

    Returns:
        (is_valid, error_message)
    """
    if len(palette) == 0:
        return False, "Palette is empty"

    for i, color in enumerate(palette):
        if isinstance(color, dict):
            try:
                channels = (color['r'], color['g'], color['b'])
            except KeyError:
                return False, f"Color {i} is missing an r/g/b channel"
        else:
            channels = tuple(color)
            if len(channels) != 3:
                return False, f"Color {i} must have 3 channels"

        for value in channels:
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                return False, f"Color {i} has a non-integer channel: {value!r}"
            if not (0 <= value <= 255):
                return False, f"Color {i} has a channel outside [0, 255]: {value}"

    return True, "Palette is valid"


def validate_config(config: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Validate configuration settings

    Args:
        config: Configuration dictionary

    Returns:
        (is_valid, error_message)
    """
    try:
        if 'geometry' in config:
            geo = config['geometry']

            for param in ['target_size', 'trim_fraction', 'max_vertex_count']:
                if param not in geo:
                    return False, f"Missing geometry parameter: {param}"

            if not (0.0 < geo['target_size'] <= 1000.0):
                return False, "target_size must be between 0.0 and 1000.0"

            if not (0.0 <= geo['trim_fraction'] < 1.0):
                return False, "trim_fraction must be between 0.0 and 1.0"

            if not isinstance(geo['max_vertex_count'], int) or geo['max_vertex_count'] < 1:
                return False, "max_vertex_count must be a positive integer"

        if 'correspondence' in config:
            corr = config['correspondence']

            for param in ['grid_divisions', 'max_ring_radius']:
                if param not in corr:
                    return False, f"Missing correspondence parameter: {param}"

            if not isinstance(corr['grid_divisions'], int) or not (1 <= corr['grid_divisions'] <= 1000):
                return False, "grid_divisions must be an integer between 1 and 1000"

            if not isinstance(corr['max_ring_radius'], int) or not (0 <= corr['max_ring_radius'] <= 10):
                return False, "max_ring_radius must be an integer between 0 and 10"

        if 'palette' in config:
            pal = config['palette']

            if not isinstance(pal.get('color_count'), int) or not (1 <= pal['color_count'] <= 256):
                return False, "color_count must be an integer between 1 and 256"

        if 'performance' in config:
            perf = config['performance']

            if not isinstance(perf.get('parallel_processing'), bool):
                return False, "parallel_processing must be a boolean"

            if not isinstance(perf.get('n_workers'), int) or not (1 <= perf['n_workers'] <= 256):
                return False, "n_workers must be an integer between 1 and 256"

        return True, "Configuration is valid"

    except (TypeError, AttributeError) as e:
        return False, f"Configuration validation error: {str(e)}"


def validate_output_directory(directory: str) -> Tuple[bool, str]:
    """
    Validate output directory

    Args:
        directory: Directory path to validate

    Returns:
        (is_valid, error_message)
    """
    if not directory:
        return False, "Output directory is empty"

    try:
        # Check if directory exists, create if not
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        return False, f"Output directory validation error: {str(e)}"

    if not os.access(directory, os.W_OK):
        return False, f"Directory is not writable: {directory}"

    return True, "Output directory is valid"


def check_system_requirements() -> Tuple[bool, str]:
    """
    Check if system meets requirements

    Returns:
        (meets_requirements, message)
    """
    try:
        import scipy
        import sklearn
        import psutil

        if sys.version_info < (3, 8):
            return False, "Python 3.8 or higher is required"

        available_memory_gb = psutil.virtual_memory().available / (1024**3)
        return True, (
            f"System meets requirements (numpy {np.__version__}, scipy {scipy.__version__}, "
            f"scikit-learn {sklearn.__version__}, Memory: {available_memory_gb:.1f} GB, "
            f"CPU: {os.cpu_count()} cores)"
        )

    except ImportError as e:
        return False, f"Missing required dependency: {str(e)}"
