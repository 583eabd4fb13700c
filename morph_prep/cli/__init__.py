#!/usr/bin/env python3
"""
Command line interface for morph-prep
"""

from .cli_app import main

__all__ = [
    "main",
]
