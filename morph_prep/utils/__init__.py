#!/usr/bin/env python3
"""
Utility functions for morph-prep
"""

from .performance import PerformanceMonitor, performance_monitor
from .validation import (
    validate_point_cloud,
    validate_cloud_pair,
    validate_palette,
    validate_config,
)

__all__ = [
    "PerformanceMonitor",
    "performance_monitor",
    "validate_point_cloud",
    "validate_cloud_pair",
    "validate_palette",
    "validate_config",
]
