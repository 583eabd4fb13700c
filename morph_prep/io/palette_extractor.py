#!/usr/bin/env python3
"""
Palette extraction from reference images and palette JSON output
"""

import json
import os
from collections import Counter
from typing import Dict, List, Optional, Sequence

import numpy as np
from PIL import Image
from sklearn.cluster import KMeans

from ..core.color_space import RGB, as_rgb, round_half_up
from ..core.palette import sort_colors_by_pairing


class PaletteExtractor:
    """Extract dominant colors from images using KMeans clustering"""

    def __init__(self, color_count: int = 64, sample_size: Optional[int] = 20000,
                 random_state: int = 42):
        if color_count < 1:
            raise ValueError(f"color_count must be at least 1, got {color_count}")
        self.color_count = color_count
        self.sample_size = sample_size
        self.random_state = random_state

    @classmethod
    def from_config(cls, config):
        return cls(
            color_count=config.get('palette.color_count', 64),
            sample_size=config.get('palette.sample_size', 20000),
            random_state=config.get('palette.random_state', 42),
        )

    def load_pixels(self, image_path: str) -> np.ndarray:
        """Decode an image into an (N, 3) uint8 pixel array"""
        with Image.open(image_path) as image:
            pixels = np.asarray(image.convert('RGB'), dtype=np.uint8)
        return pixels.reshape(-1, 3)

    def extract_from_pixels(self, pixels: np.ndarray) -> List[RGB]:
        """
        Cluster pixels and return cluster centers ordered by population

        Args:
            pixels: (N, 3) array of 0-255 RGB values

        Returns:
            Up to color_count colors, most frequent first
        """
        pixels = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)
        if len(pixels) == 0:
            raise ValueError("Image has no pixels")

        if self.sample_size and len(pixels) > self.sample_size:
            rng = np.random.default_rng(self.random_state)
            pixels = pixels[rng.choice(len(pixels), self.sample_size, replace=False)]

        n_clusters = min(self.color_count, len(np.unique(pixels, axis=0)))
        kmeans = KMeans(n_clusters=n_clusters, random_state=self.random_state, n_init=10)
        labels = kmeans.fit_predict(pixels)
        counts = Counter(labels.tolist())

        # Most populated clusters first, ties by cluster id
        ordered = sorted(counts, key=lambda label: (-counts[label], label))
        centers = kmeans.cluster_centers_
        return [
            RGB(*(min(255, max(0, round_half_up(c))) for c in centers[label]))
            for label in ordered
        ]

    def extract(self, image_path: str) -> List[RGB]:
        """Extract the palette of one image file"""
        return self.extract_from_pixels(self.load_pixels(image_path))


def list_images(image_dir: str, extensions: Sequence[str] = ('.jpg', '.jpeg')) -> List[str]:
    """Sorted file names in image_dir with a matching extension"""
    extensions = tuple(ext.lower() for ext in extensions)
    return sorted(
        name for name in os.listdir(image_dir)
        if os.path.isfile(os.path.join(image_dir, name)) and name.lower().endswith(extensions)
    )


def extract_palettes(image_dir: str, extractor: Optional[PaletteExtractor] = None,
                     extensions: Sequence[str] = ('.jpg', '.jpeg'),
                     verbose: bool = True) -> Dict[str, List[RGB]]:
    """
    Extract palettes for every image in a directory

    An image that fails to load or cluster is reported and left out; the
    remaining images are still processed.

    Returns:
        Mapping of file name to palette, in sorted file name order
    """
    extractor = extractor or PaletteExtractor()
    result = {}

    for filename in list_images(image_dir, extensions):
        full_path = os.path.join(image_dir, filename)
        try:
            palette = extractor.extract(full_path)
        except Exception as e:
            print(f"Warning: Failed to extract palette for {filename}: {e}")
            continue
        result[filename] = palette
        if verbose:
            print(f"Extracted palette for {filename} ({len(palette)} colors)")

    return result


def pair_palettes(palettes: Dict[str, Sequence], reference_name: str) -> Dict[str, List[RGB]]:
    """
    Reorder every palette so its colors line up with the reference palette

    Raises:
        ValueError: If reference_name is not among the palettes
    """
    if reference_name not in palettes:
        raise ValueError(f"Reference palette not found: {reference_name}")

    reference = [as_rgb(c) for c in palettes[reference_name]]
    paired = {}
    for name, palette in palettes.items():
        if name == reference_name:
            paired[name] = reference
        else:
            if len(palette) != len(reference):
                print(f"Warning: {name} has {len(palette)} colors, reference {reference_name} "
                      f"has {len(reference)}; paired palette keeps {min(len(palette), len(reference))}")
            paired[name] = sort_colors_by_pairing(reference, palette)
    return paired


def palettes_to_json(palettes: Dict[str, Sequence]) -> Dict[str, List[Dict[str, int]]]:
    return {
        name: [as_rgb(color).to_dict() for color in palette]
        for name, palette in palettes.items()
    }


def write_palettes(palettes: Dict[str, Sequence], output_path: str) -> None:
    """Write palettes as {name: [{"r", "g", "b"}, ...]} JSON"""
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(palettes_to_json(palettes), f, indent=2)


def read_palettes(path: str) -> Dict[str, List[RGB]]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return {name: [as_rgb(c) for c in colors] for name, colors in data.items()}
