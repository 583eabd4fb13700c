#!/usr/bin/env python3
"""
Batch entry points: model manifest precompute and palette generation
"""

import os
from typing import Any, Callable, Dict, List, Optional

from .config.settings import ConfigManager
from .core.correspondence import CorrespondenceBuilder
from .core.mesh_normalizer import MeshNormalizer
from .core.pipeline import Manifest, build_manifest
from .io.manifest_writer import write_manifest
from .io.mesh_utils import MeshUtils, is_model_file, load_model_points
from .io.palette_extractor import (
    PaletteExtractor,
    extract_palettes,
    pair_palettes,
    write_palettes,
)
from .utils.performance import (
    PerformanceMonitor,
    check_memory_available,
    estimate_memory_requirement,
)
from .utils.validation import validate_point_cloud


def find_model_files(input_dir: str, supported_formats: Optional[List[str]] = None) -> List[str]:
    """Sorted model file names in input_dir"""
    if not os.path.isdir(input_dir):
        return []
    names = sorted(os.listdir(input_dir))
    if supported_formats:
        formats = tuple(ext.lower() for ext in supported_formats)
        return [n for n in names if n.lower().endswith(formats)
                and os.path.isfile(os.path.join(input_dir, n))]
    return [n for n in names if is_model_file(n) and os.path.isfile(os.path.join(input_dir, n))]


def load_models(input_dir: str, file_names: List[str],
                verbose: bool = True) -> Dict[str, Any]:
    """
    Load every model file, keyed by base name

    Raises:
        ValueError: On the first file that fails to load; nothing is returned
    """
    loaded = {}
    for file_name in file_names:
        base = os.path.splitext(file_name)[0]
        if verbose:
            print(f"Loading {file_name}...")
        if base in loaded:
            raise ValueError(f"Duplicate model name: {base}")
        try:
            loaded[base] = load_model_points(os.path.join(input_dir, file_name))
        except ValueError as e:
            raise ValueError(f"Failed to load {file_name}: {e}")
        is_valid, message = validate_point_cloud(loaded[base])
        if not is_valid:
            raise ValueError(f"Failed to load {file_name}: {message}")
        if verbose:
            info = MeshUtils.get_model_info(loaded[base])
            dims = ", ".join(f"{d:.3f}" for d in info['dimensions'])
            print(f"  {info['vertices']:,} vertices, size ({dims})")
    return loaded


def precompute_models(input_dir: str, output_dir: str,
                      config: Optional[ConfigManager] = None,
                      progress_callback: Optional[Callable[[str, float], None]] = None,
                      monitor: Optional[PerformanceMonitor] = None,
                      verbose: bool = True) -> Manifest:
    """
    Load models, build the morph manifest and write it to output_dir

    Every model is loaded and processed before anything is written, so a
    failure leaves no partial manifest behind.

    Args:
        input_dir: Directory holding model files
        output_dir: Destination of manifest.json and per-model files
        config: Settings (defaults if omitted)
        progress_callback: Called with (message, progress in [0, 1])
        monitor: Optional monitor receiving per-stage timings
        verbose: Print loading and writing progress

    Returns:
        The written manifest

    Raises:
        FileNotFoundError: If input_dir holds no model files
        ValueError: If any model fails to load or process
    """
    config = config or ConfigManager(verbose=False)
    monitor = monitor or PerformanceMonitor()

    file_names = find_model_files(input_dir, config.get('files.supported_formats'))
    if not file_names:
        raise FileNotFoundError(f"No model files found in {input_dir}")

    with monitor.stage("load"):
        clouds = load_models(input_dir, file_names, verbose=verbose)

    required_mb = estimate_memory_requirement(
        config.get('geometry.max_vertex_count', 20000), len(clouds))
    if not check_memory_available(required_mb):
        print(f"Warning: alignment may need about {required_mb:.0f} MB, "
              f"more than is currently available")

    with monitor.stage("build"):
        manifest = build_manifest(
            clouds,
            normalizer=MeshNormalizer.from_config(config),
            builder=CorrespondenceBuilder.from_config(config),
            progress_callback=progress_callback,
            parallel=config.get('performance.parallel_processing', False),
            n_workers=config.get('performance.n_workers'),
        )

    for name, stats in manifest.stats.items():
        monitor.record_metric("fallback_matches", stats['fallback_matches'])
        monitor.record_metric("mean_squared_distance", stats['mean_squared_distance'])
        if verbose:
            print(f"Aligned {name}: {stats['grid_matches']:,} grid matches, "
                  f"{stats['fallback_matches']:,} fallback scans")

    with monitor.stage("write"):
        write_manifest(manifest, output_dir, verbose=verbose)

    if verbose:
        print(f"Precomputed {len(manifest.models)} models to {output_dir} "
              f"(vertexCount={manifest.vertex_count})")

    return manifest


def generate_palettes(image_dir: str, output_path: str,
                      config: Optional[ConfigManager] = None,
                      pair_with: Optional[str] = None,
                      verbose: bool = True) -> Dict[str, Any]:
    """
    Extract palettes for every image in image_dir and write them as JSON

    Images that fail are skipped. With pair_with, every palette is reordered
    to line up with that image's palette.

    Raises:
        FileNotFoundError: If image_dir does not exist
        ValueError: If pair_with names an image with no palette
    """
    if not os.path.isdir(image_dir):
        raise FileNotFoundError(f"Image directory not found: {image_dir}")

    config = config or ConfigManager(verbose=False)
    palettes = extract_palettes(
        image_dir,
        extractor=PaletteExtractor.from_config(config),
        extensions=config.get('palette.image_extensions', ['.jpg', '.jpeg']),
        verbose=verbose,
    )

    if pair_with:
        palettes = pair_palettes(palettes, pair_with)

    write_palettes(palettes, output_path)
    if verbose:
        print(f"Wrote palettes for {len(palettes)} images to {output_path}")

    return palettes
