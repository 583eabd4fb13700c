#!/usr/bin/env python3
"""
Manifest output: one float32 blob and one metadata record per model
"""

import json
import os
from typing import Any, Dict

import numpy as np

from ..core.pipeline import Manifest

MANIFEST_FILENAME = "manifest.json"


def write_manifest(manifest: Manifest, output_dir: str, verbose: bool = False) -> Dict[str, Any]:
    """
    Write the manifest, blobs and per-model metadata

    Blobs hold vertex_count x 3 little-endian float32 values (x, y, z interleaved).

    Args:
        manifest: Manifest to write
        output_dir: Destination directory (created if missing)
        verbose: Print each file written

    Returns:
        The manifest index as written to manifest.json
    """
    blobs = {}
    for name, positions in manifest.models.items():
        blob = np.ascontiguousarray(positions, dtype='<f4').reshape(-1, 3)
        if len(blob) != manifest.vertex_count:
            raise ValueError(
                f"Model {name} has {len(blob)} vertices, manifest expects {manifest.vertex_count}"
            )
        blobs[name] = blob

    os.makedirs(output_dir, exist_ok=True)

    for name, blob in blobs.items():
        bin_path = os.path.join(output_dir, f"{name}.bin")
        meta_path = os.path.join(output_dir, f"{name}.json")
        with open(bin_path, 'wb') as f:
            f.write(blob.tobytes())
        with open(meta_path, 'w') as f:
            json.dump({'name': name, 'vertexCount': manifest.vertex_count}, f, indent=2)

        if verbose:
            print(f"Wrote {bin_path} ({manifest.vertex_count:,} vertices)")

    index = manifest.to_dict()
    with open(os.path.join(output_dir, MANIFEST_FILENAME), 'w') as f:
        json.dump(index, f, indent=2)

    return index


def read_manifest(output_dir: str) -> Manifest:
    """Load a manifest and all of its blobs back into memory"""
    with open(os.path.join(output_dir, MANIFEST_FILENAME), 'r') as f:
        index = json.load(f)

    manifest = Manifest(vertex_count=int(index['vertexCount']))
    for entry in index['models']:
        blob = np.fromfile(os.path.join(output_dir, entry['bin']), dtype='<f4')
        manifest.models[entry['name']] = blob.reshape(-1, 3).astype(np.float32)
    return manifest
