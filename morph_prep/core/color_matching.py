#!/usr/bin/env python3
"""
Perceptual color distances and nearest-color lookup in Lab space
"""

import math
from typing import Any, Callable, Dict, Sequence, Tuple

from .color_space import as_lab, rgb_to_lab


def lab_distance(color1: Any, color2: Any) -> float:
    """Euclidean distance between two Lab colors"""
    c1 = as_lab(color1)
    c2 = as_lab(color2)
    return math.sqrt(
        (c1.l - c2.l) ** 2 + (c1.a - c2.a) ** 2 + (c1.b - c2.b) ** 2
    )


def chroma_distance(color1: Any, color2: Any) -> float:
    """Distance biased toward hue/chroma similarity"""
    c1 = as_lab(color1)
    c2 = as_lab(color2)
    ab = math.sqrt((c1.a - c2.a) ** 2 + (c1.b - c2.b) ** 2)
    return lab_distance(c1, c2) * 0.5 + 2 * ab


def lightness_distance(color1: Any, color2: Any) -> float:
    """Distance biased toward matching brightness"""
    c1 = as_lab(color1)
    c2 = as_lab(color2)
    return lab_distance(c1, c2) * 0.5 + abs(c1.l - c2.l)


def color_distance(color1: Any, color2: Any) -> float:
    """Lab distance between two sRGB colors"""
    return lab_distance(rgb_to_lab(color1), rgb_to_lab(color2))


DISTANCE_METRICS: Dict[str, Callable[[Any, Any], float]] = {
    'full': lab_distance,
    'chroma': chroma_distance,
    'lightness': lightness_distance,
}


def find_closest_color(lab_color: Any, palette_lab: Sequence[Any],
                       metric: str = 'full') -> Tuple[int, float]:
    """
    Find the palette entry closest to a Lab color

    Ties keep the earliest index.

    Args:
        lab_color: Query color in Lab
        palette_lab: Candidate colors in Lab
        metric: One of 'full', 'chroma' or 'lightness'

    Returns:
        (index, distance) of the closest candidate

    Raises:
        ValueError: If the candidate list is empty or the metric is unknown
    """
    if metric not in DISTANCE_METRICS:
        raise ValueError(f"Unknown distance metric: {metric}")
    if len(palette_lab) == 0:
        raise ValueError("Cannot match against an empty palette")

    distance_fn = DISTANCE_METRICS[metric]
    query = as_lab(lab_color)

    closest_index = 0
    smallest_distance = float('inf')
    for i, candidate in enumerate(palette_lab):
        distance = distance_fn(query, candidate)
        if distance < smallest_distance:
            smallest_distance = distance
            closest_index = i

    return closest_index, smallest_distance


def find_closest_color_index(lab_color: Any, palette_lab: Sequence[Any]) -> int:
    """Index of the closest color by plain Lab distance"""
    return find_closest_color(lab_color, palette_lab, 'full')[0]


def find_closest_color_index_ab(lab_color: Any, palette_lab: Sequence[Any]) -> int:
    """Index of the closest color, weighting the a/b chroma axes"""
    return find_closest_color(lab_color, palette_lab, 'chroma')[0]


def find_closest_color_index_l(lab_color: Any, palette_lab: Sequence[Any]) -> int:
    """Index of the closest color, weighting lightness"""
    return find_closest_color(lab_color, palette_lab, 'lightness')[0]


def palette_to_lab(palette: Sequence[Any]):
    """Convert a whole RGB palette to Lab"""
    return [rgb_to_lab(color) for color in palette]
