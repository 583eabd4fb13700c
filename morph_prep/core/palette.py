#!/usr/bin/env python3
"""
Palette pairing and blending

Pairing solves the rectangular assignment problem over Lab distances so that
perceptually similar colors of two palettes end up at matching indices.
"""

from typing import Any, List, Sequence, Tuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from .color_space import RGB, as_rgb, rgb_to_lab, round_half_up


def create_distance_matrix(colors1: Sequence[Any], colors2: Sequence[Any]) -> np.ndarray:
    """
    Build the M x N matrix of Lab distances between two RGB palettes

    Args:
        colors1: Palette of M colors (rows)
        colors2: Palette of N colors (columns)

    Returns:
        Array of shape (M, N)
    """
    lab1 = np.array([rgb_to_lab(c) for c in colors1], dtype=np.float64).reshape(-1, 3)
    lab2 = np.array([rgb_to_lab(c) for c in colors2], dtype=np.float64).reshape(-1, 3)

    diff = lab1[:, None, :] - lab2[None, :, :]
    return np.sqrt(np.sum(diff ** 2, axis=2))


def solve_assignment(cost_matrix) -> List[Tuple[int, int]]:
    """
    Minimum-cost one-to-one matching between rows and columns

    Every row is matched to at most one column (and vice versa); exactly
    min(M, N) pairs are returned, ordered by row.

    Args:
        cost_matrix: 2D array-like of finite costs

    Returns:
        List of (row, column) pairs

    Raises:
        ValueError: If the matrix is empty, not 2D or holds non-finite costs
    """
    cost = np.asarray(cost_matrix, dtype=np.float64)
    if cost.ndim != 2:
        raise ValueError(f"Cost matrix must be 2D, got shape {cost.shape}")
    if cost.size == 0:
        raise ValueError("Cost matrix is empty")
    if not np.all(np.isfinite(cost)):
        raise ValueError("Cost matrix contains non-finite values")

    rows, cols = linear_sum_assignment(cost)
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


def sort_colors_by_pairing(colors1: Sequence[Any], colors2: Sequence[Any]) -> List[RGB]:
    """
    Reorder colors2 so index i holds the partner of the i-th paired colors1 entry

    When colors2 is at least as long as colors1 the result has len(colors1)
    entries; otherwise only the len(colors2) best-paired rows survive.
    """
    pairs = solve_assignment(create_distance_matrix(colors1, colors2))
    return [as_rgb(colors2[col]) for _, col in pairs]


def pairing_cost(colors1: Sequence[Any], colors2: Sequence[Any]) -> float:
    """Total Lab distance of the optimal pairing"""
    cost = create_distance_matrix(colors1, colors2)
    return float(sum(cost[r, c] for r, c in solve_assignment(cost)))


def interpolate_palette(palette1: Sequence[Any], palette2: Sequence[Any], t: float) -> List[RGB]:
    """
    Blend two index-aligned palettes channel by channel

    t is not clamped; values outside [0, 1] extrapolate.

    Args:
        palette1: Palette at t = 0
        palette2: Palette at t = 1
        t: Blend factor

    Returns:
        Blended palette
    """
    if len(palette1) != len(palette2):
        raise ValueError(
            f"Palettes must have equal length to interpolate ({len(palette1)} != {len(palette2)})"
        )

    blended = []
    for color1, color2 in zip(palette1, palette2):
        c1 = as_rgb(color1)
        c2 = as_rgb(color2)
        blended.append(RGB(
            r=round_half_up(c1.r + (c2.r - c1.r) * t),
            g=round_half_up(c1.g + (c2.g - c1.g) * t),
            b=round_half_up(c1.b + (c2.b - c1.b) * t),
        ))
    return blended
