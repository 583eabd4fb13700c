#!/usr/bin/env python3
"""
Geometry pipeline: raw clouds -> normalized, equal-size, index-aligned clouds
"""

import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from .correspondence import CorrespondenceBuilder
from .mesh_normalizer import MeshNormalizer, adjust_vertex_count


@dataclass
class Manifest:
    """Shared vertex count plus one index-correspondent cloud per model"""
    vertex_count: int
    models: Dict[str, np.ndarray] = field(default_factory=dict)
    stats: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def reference_name(self) -> Optional[str]:
        return next(iter(self.models), None)

    def names(self) -> List[str]:
        return list(self.models)

    def to_dict(self) -> Dict[str, Any]:
        """Top-level index mapping each model to its blob and metadata files"""
        return {
            'vertexCount': self.vertex_count,
            'models': [
                {'name': name, 'bin': f"{name}.bin", 'meta': f"{name}.json"}
                for name in self.models
            ],
        }


def _align_to_reference(args):
    reference, positions, vertex_count, builder = args
    adjusted = adjust_vertex_count(positions, vertex_count)
    aligned = builder.reorder(reference, adjusted)
    return aligned, builder.last_stats.to_dict()


def build_manifest(clouds: Mapping[str, Any],
                   normalizer: Optional[MeshNormalizer] = None,
                   builder: Optional[CorrespondenceBuilder] = None,
                   progress_callback: Optional[Callable[[str, float], None]] = None,
                   parallel: bool = False,
                   n_workers: Optional[int] = None) -> Manifest:
    """
    Run the geometry pipeline over named raw point clouds

    Each cloud is normalized on its own. The shared vertex count is the largest
    prepared count; the first cloud becomes the reference and every other cloud
    is padded/truncated and reordered against it.

    Args:
        clouds: Ordered mapping of model name to raw (N, 3) or flat positions
        normalizer: Normalization settings (defaults if omitted)
        builder: Correspondence settings (defaults if omitted)
        progress_callback: Called with (message, progress in [0, 1])
        parallel: Align non-reference clouds in a process pool
        n_workers: Pool size when parallel (defaults to CPU count)

    Returns:
        Manifest with every cloud at the shared vertex count

    Raises:
        ValueError: If no clouds are given, or any cloud is empty or has
            non-finite coordinates
    """
    if not clouds:
        raise ValueError("No point clouds to process")

    normalizer = normalizer or MeshNormalizer()
    builder = builder or CorrespondenceBuilder()
    names = list(clouds)

    prepared = {}
    for i, name in enumerate(names):
        if progress_callback:
            progress_callback(f"Normalizing {name}...", 0.4 * i / len(names))
        raw = np.asarray(clouds[name], dtype=np.float64)
        if not np.all(np.isfinite(raw)):
            raise ValueError(f"Point cloud {name} contains NaN or infinite coordinates")
        points = normalizer.process(clouds[name])
        if len(points) == 0:
            raise ValueError(f"No vertices found in {name}")
        prepared[name] = points

    vertex_count = max(len(points) for points in prepared.values())
    reference = adjust_vertex_count(prepared[names[0]], vertex_count)

    manifest = Manifest(vertex_count=vertex_count)
    manifest.models[names[0]] = reference

    jobs = [(reference, prepared[name], vertex_count, builder) for name in names[1:]]
    if parallel and len(jobs) > 1:
        if progress_callback:
            progress_callback(f"Aligning {len(jobs)} models in parallel...", 0.4)
        workers = n_workers or os.cpu_count() or 1
        with ProcessPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(_align_to_reference, jobs))
    else:
        results = []
        for i, job in enumerate(jobs):
            if progress_callback:
                progress_callback(f"Aligning {names[i + 1]} to {names[0]}...",
                                  0.4 + 0.6 * i / len(jobs))
            results.append(_align_to_reference(job))

    for name, (aligned, stats) in zip(names[1:], results):
        manifest.models[name] = aligned
        manifest.stats[name] = stats

    if progress_callback:
        progress_callback("Manifest ready", 1.0)

    return manifest
