#!/usr/bin/env python3
"""
Mesh loading: flatten model files into world-space vertex soup
"""

import os
from typing import Any, Dict

import numpy as np
import trimesh

from .point_cloud_processor import PointCloudProcessor


class MeshUtils:
    """Utility class for reading model files as point clouds"""

    SUPPORTED_FORMATS = {
        '.glb': 'GLB',
        '.gltf': 'GLTF',
        '.obj': 'OBJ',
        '.ply': 'PLY',
        '.stl': 'STL',
        '.off': 'OFF',
        '.dae': 'DAE',
    }

    @staticmethod
    def load_scene(filename: str) -> trimesh.Scene:
        """
        Load a model file as a scene

        Args:
            filename: Path to model file

        Returns:
            trimesh Scene

        Raises:
            ValueError: If the file is missing or cannot be parsed
        """
        if not os.path.exists(filename):
            raise ValueError(f"File not found: {filename}")

        try:
            return trimesh.load(filename, force='scene')
        except Exception as e:
            raise ValueError(f"Failed to load model from {filename}: {str(e)}")

    @staticmethod
    def scene_vertices(scene: trimesh.Scene) -> np.ndarray:
        """
        Merge every geometry of a scene into one world-space vertex array

        Triangle meshes contribute one vertex per face corner (non-indexed),
        so shared vertices repeat exactly as a renderer would draw them.

        Args:
            scene: Scene to flatten

        Returns:
            (N, 3) float32 array
        """
        chunks = []
        for node_name in scene.graph.nodes_geometry:
            transform, geometry_name = scene.graph[node_name]
            geometry = scene.geometry.get(geometry_name)
            if geometry is None:
                continue

            if isinstance(geometry, trimesh.Trimesh):
                if len(geometry.faces) > 0:
                    local = geometry.vertices[geometry.faces].reshape(-1, 3)
                else:
                    local = geometry.vertices
            elif hasattr(geometry, 'vertices'):
                local = np.asarray(geometry.vertices)
            else:
                continue

            if len(local) == 0:
                continue
            chunks.append(trimesh.transformations.transform_points(local, transform))

        if not chunks:
            return np.zeros((0, 3), dtype=np.float32)
        return np.concatenate(chunks).astype(np.float32)

    @staticmethod
    def load_vertices(filename: str) -> np.ndarray:
        """
        Load a model file and return its world-space vertices

        Raises:
            ValueError: If the file cannot be loaded or holds no vertices
        """
        scene = MeshUtils.load_scene(filename)
        vertices = MeshUtils.scene_vertices(scene)
        if len(vertices) == 0:
            raise ValueError(f"No vertices found in {filename}")
        return vertices

    @staticmethod
    def get_model_info(vertices: np.ndarray) -> Dict[str, Any]:
        """Basic statistics of a loaded vertex array"""
        bounds = np.array([vertices.min(axis=0), vertices.max(axis=0)])
        return {
            'vertices': len(vertices),
            'bounds': bounds.tolist(),
            'dimensions': (bounds[1] - bounds[0]).tolist(),
        }


def detect_data_type(file_path: str) -> str:
    """Auto-detect if file is mesh or point cloud based on extension"""
    ext = os.path.splitext(file_path)[1].lower()

    if ext in PointCloudProcessor.SUPPORTED_FORMATS:
        return 'pointcloud'

    # Mesh formats (default)
    return 'mesh'


def is_model_file(file_path: str) -> bool:
    ext = os.path.splitext(file_path)[1].lower()
    return ext in MeshUtils.SUPPORTED_FORMATS or ext in PointCloudProcessor.SUPPORTED_FORMATS


def load_model_points(file_path: str) -> np.ndarray:
    """
    Load any supported model or point cloud file as an (N, 3) float32 array

    Raises:
        ValueError: If the file cannot be loaded or holds no points
    """
    if detect_data_type(file_path) == 'pointcloud':
        points = PointCloudProcessor.load_point_cloud(file_path)
        if len(points) == 0:
            raise ValueError(f"No vertices found in {file_path}")
        return points
    return MeshUtils.load_vertices(file_path)
