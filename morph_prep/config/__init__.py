#!/usr/bin/env python3
"""
Configuration management for morph-prep
"""

from .settings import ConfigManager

__all__ = [
    "ConfigManager",
]
