#!/usr/bin/env python3
"""
Point cloud file loading for the model precompute driver
"""
import os
import numpy as np


class PointCloudProcessor:
    """Utilities for point cloud input"""

    SUPPORTED_FORMATS = ['.pcd', '.xyz', '.pts', '.txt', '.csv']

    @staticmethod
    def load_point_cloud(filename):
        """Load point positions from various formats as an (N, 3) float32 array"""
        if not os.path.exists(filename):
            raise ValueError(f"File not found: {filename}")

        ext = os.path.splitext(filename)[1].lower()

        if ext in ['.pcd', '.xyz', '.pts']:
            # Use Open3D for binary/structured point cloud formats
            import open3d as o3d
            pcd = o3d.io.read_point_cloud(filename)
            return np.asarray(pcd.points, dtype=np.float32).reshape(-1, 3)

        elif ext in ['.txt', '.csv']:
            # Load ASCII point clouds
            delimiter = ',' if ext == '.csv' else None
            try:
                data = np.loadtxt(filename, delimiter=delimiter, ndmin=2)
            except ValueError as e:
                raise ValueError(f"Failed to parse point cloud {filename}: {e}")
            if data.size == 0:
                return np.zeros((0, 3), dtype=np.float32)
            if data.shape[1] >= 3:
                return data[:, :3].astype(np.float32)
            else:
                raise ValueError("File must have at least 3 columns (x, y, z)")

        else:
            raise ValueError(f"Unsupported point cloud format: {ext}")

    @staticmethod
    def save_point_cloud(points, filename):
        """Write positions to a point cloud file (format from extension)"""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        ext = os.path.splitext(filename)[1].lower()

        if ext in ['.txt', '.csv']:
            delimiter = ',' if ext == '.csv' else ' '
            np.savetxt(filename, points, delimiter=delimiter)
            return

        import open3d as o3d
        pcd = o3d.geometry.PointCloud()
        pcd.points = o3d.utility.Vector3dVector(points)
        o3d.io.write_point_cloud(filename, pcd)
