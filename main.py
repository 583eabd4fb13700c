#!/usr/bin/env python3
"""
Main entry point for morph-prep.
Runs the command line interface.
"""

from morph_prep.cli import main

if __name__ == "__main__":
    main()
