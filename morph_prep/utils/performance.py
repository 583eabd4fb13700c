#!/usr/bin/env python3
"""
Performance monitoring utilities for morph-prep
"""

import os
import platform
import time
from contextlib import contextmanager
from typing import Dict, Any

import psutil


class PerformanceMonitor:
    """Track wall time, memory and per-stage metrics of a batch run"""

    def __init__(self):
        self.start_time = None
        self.end_time = None
        self.metrics = {}
        self.process = psutil.Process(os.getpid())

    def start_monitoring(self):
        self.start_time = time.time()
        self.end_time = None
        self.metrics = {}

    def stop_monitoring(self):
        self.end_time = time.time()

    def record_metric(self, metric_name: str, value: Any):
        """Record a custom metric"""
        self.metrics.setdefault(metric_name, []).append(value)

    @contextmanager
    def stage(self, name: str):
        """Time a block and record it as '<name>_seconds'"""
        started = time.time()
        try:
            yield
        finally:
            self.record_metric(f"{name}_seconds", time.time() - started)

    def get_total_time(self) -> float:
        """Get total elapsed time"""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        elif self.start_time:
            return time.time() - self.start_time
        return 0.0

    def get_memory_usage(self) -> Dict[str, float]:
        """Get memory usage statistics"""
        try:
            memory_info = self.process.memory_info()
            return {
                'rss_mb': memory_info.rss / (1024 * 1024),
                'vms_mb': memory_info.vms / (1024 * 1024),
                'percent': self.process.memory_percent()
            }
        except psutil.Error:
            return {
                'rss_mb': 0.0,
                'vms_mb': 0.0,
                'percent': 0.0
            }

    def get_system_info(self) -> Dict[str, Any]:
        """Get system information"""
        try:
            memory = psutil.virtual_memory()
            total_gb = memory.total / (1024**3)
            available_gb = memory.available / (1024**3)
        except psutil.Error:
            total_gb = available_gb = 0.0

        return {
            'cpu_count': os.cpu_count(),
            'total_memory_gb': total_gb,
            'available_memory_gb': available_gb,
            'platform': platform.system(),
            'python_version': platform.python_version(),
        }

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get comprehensive performance summary"""
        summary = {
            'total_time': self.get_total_time(),
            'memory_usage': self.get_memory_usage(),
            'system_info': self.get_system_info(),
            'custom_metrics': {}
        }

        for key, values in self.metrics.items():
            if not values:
                continue
            if all(isinstance(v, (int, float)) for v in values):
                summary['custom_metrics'][key] = {
                    'min': min(values),
                    'max': max(values),
                    'mean': sum(values) / len(values),
                    'count': len(values)
                }
            else:
                summary['custom_metrics'][key] = values

        return summary

    def print_summary(self):
        """Print performance summary to console"""
        summary = self.get_performance_summary()

        print("\n" + "="*50)
        print("PERFORMANCE SUMMARY")
        print("="*50)
        print(f"Total time: {summary['total_time']:.2f} seconds")
        print(f"Memory usage: {summary['memory_usage']['rss_mb']:.1f} MB")
        print(f"CPU cores: {summary['system_info']['cpu_count']}")
        print(f"Available memory: {summary['system_info']['available_memory_gb']:.1f} GB")

        if summary['custom_metrics']:
            print("\nStages:")
            for key, value in summary['custom_metrics'].items():
                if isinstance(value, dict):
                    print(f"  {key}: min={value['min']:.3f}, max={value['max']:.3f}, "
                          f"mean={value['mean']:.3f} (n={value['count']})")
                else:
                    print(f"  {key}: {value}")

        print("="*50)


@contextmanager
def performance_monitor(name: str = "operation", report: bool = True):
    """Context manager for performance monitoring"""
    monitor = PerformanceMonitor()
    monitor.start_monitoring()

    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
        if report:
            print(f"\nPerformance for {name}:")
            monitor.print_summary()


def estimate_memory_requirement(n_vertices: int, n_models: int = 1) -> float:
    """Rough peak memory in MB for aligning n_models clouds of n_vertices points"""
    cloud_bytes = n_vertices * 12        # float32 x, y, z
    working_bytes = n_vertices * 24      # float64 copies used for distances
    grid_bytes = n_vertices * 80         # bucket lists and cell keys
    total = cloud_bytes * n_models * 2 + working_bytes * 2 + grid_bytes
    return total / (1024 * 1024)


def check_memory_available(required_mb: float) -> bool:
    """Check if required memory is available"""
    try:
        available_mb = psutil.virtual_memory().available / (1024 * 1024)
        return available_mb >= required_mb
    except psutil.Error:
        return True
