#!/usr/bin/env python3
"""
File input and output for the precompute drivers
"""
