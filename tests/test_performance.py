#!/usr/bin/env python3
"""
Tests for performance monitoring helpers
"""

from morph_prep.utils.performance import (
    PerformanceMonitor,
    check_memory_available,
    estimate_memory_requirement,
    performance_monitor,
)


def test_stage_records_seconds():
    monitor = PerformanceMonitor()
    monitor.start_monitoring()
    with monitor.stage("build"):
        pass
    monitor.record_metric("fallback_matches", 3)
    monitor.record_metric("fallback_matches", 5)
    monitor.stop_monitoring()

    summary = monitor.get_performance_summary()
    assert summary['custom_metrics']['build_seconds']['count'] == 1
    assert summary['custom_metrics']['fallback_matches']['mean'] == 4
    assert summary['total_time'] >= 0


def test_context_manager_reports(capsys):
    with performance_monitor("models", report=True) as monitor:
        monitor.record_metric("fallback_matches", 0)
    out = capsys.readouterr().out
    assert "Performance for models" in out
    assert "PERFORMANCE SUMMARY" in out


def test_context_manager_quiet(capsys):
    with performance_monitor("models", report=False):
        pass
    assert capsys.readouterr().out == ""


def test_memory_estimate_scales_with_models():
    single = estimate_memory_requirement(20000, 1)
    assert estimate_memory_requirement(20000, 4) > single > 0
    assert check_memory_available(0.0)
