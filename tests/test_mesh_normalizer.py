#!/usr/bin/env python3
"""
Tests for point cloud normalization and vertex count equalization
"""

import itertools

import numpy as np
import pytest

from morph_prep.core.mesh_normalizer import (
    MeshNormalizer,
    adjust_vertex_count,
    as_points,
    clamp_positions,
    normalize_positions,
    prepare_cloud,
    trim_bottom,
)


def box_corners(size, offset=(0.0, 0.0, 0.0)):
    corners = np.array(list(itertools.product(*[(0.0, s) for s in size])))
    return corners + np.asarray(offset)


def test_largest_dimension_scales_to_three_and_box_is_centered():
    normalized = normalize_positions(box_corners((10, 5, 2), offset=(3, -2, 7)))

    mins = normalized.min(axis=0)
    maxs = normalized.max(axis=0)
    assert (maxs - mins) == pytest.approx([3.0, 1.5, 0.6], abs=1e-5)
    assert (mins + maxs) / 2 == pytest.approx([0.0, 0.0, 0.0], abs=1e-6)
    assert normalized.dtype == np.float32


def test_custom_target_size():
    normalized = normalize_positions(box_corners((4, 1, 1)), target_size=1.0)
    assert np.ptp(normalized, axis=0).max() == pytest.approx(1.0, abs=1e-6)


def test_degenerate_cloud_is_only_centered():
    normalized = normalize_positions([[2.0, 2.0, 2.0], [2.0, 2.0, 2.0]])
    assert np.all(normalized == 0.0)


def test_normalize_does_not_mutate_input():
    points = box_corners((2, 2, 2)).astype(np.float32)
    original = points.copy()
    normalize_positions(points)
    assert np.array_equal(points, original)


def test_trim_removes_lowest_percent():
    points = np.zeros((100, 3), dtype=np.float32)
    points[:, 1] = np.arange(100)
    trimmed = trim_bottom(points)
    assert len(trimmed) == 99
    assert trimmed[:, 1].min() == 1.0


def test_trim_keeps_points_above_threshold_in_order():
    points = np.array([[0, 5, 0], [1, 0, 0], [2, 10, 0], [3, 0.05, 0]], dtype=np.float32)
    trimmed = trim_bottom(points)
    assert trimmed[:, 0].tolist() == [0, 2]


def test_trim_that_would_remove_everything_is_skipped():
    flat = np.array([[0, 1, 0], [1, 1, 0], [2, 1, 1]], dtype=np.float32)
    assert np.array_equal(trim_bottom(flat), flat)


def test_clamp_uses_fixed_stride():
    points = np.arange(30, dtype=np.float32).reshape(10, 3)
    clamped = clamp_positions(points, 3)
    # stride = ceil(10 / 3) = 4, kept = floor(10 / 4) = 2
    assert clamped.tolist() == [points[0].tolist(), points[4].tolist()]

    clamped = clamp_positions(points[:9], 3)
    assert clamped.tolist() == [points[0].tolist(), points[3].tolist(), points[6].tolist()]


def test_clamp_under_cap_passes_through():
    points = np.arange(12, dtype=np.float32).reshape(4, 3)
    assert np.array_equal(clamp_positions(points, 4), points)


def test_pad_repeats_final_point():
    points = np.array([[0, 0, 0], [1, 2, 3], [4, 5, 6]], dtype=np.float32)
    adjusted = adjust_vertex_count(points, 6)
    assert adjusted.shape == (6, 3)
    assert np.array_equal(adjusted[:3], points)
    assert np.all(adjusted[3:] == points[-1])


def test_truncate_keeps_leading_points():
    points = np.arange(15, dtype=np.float32).reshape(5, 3)
    assert np.array_equal(adjust_vertex_count(points, 2), points[:2])


def test_pad_empty_cloud_with_origin():
    adjusted = adjust_vertex_count(np.zeros((0, 3)), 3)
    assert adjusted.shape == (3, 3)
    assert np.all(adjusted == 0)


def test_flat_positions_are_accepted():
    assert as_points([0, 1, 2, 3, 4, 5]).shape == (2, 3)
    with pytest.raises(ValueError):
        as_points([0, 1, 2, 3])
    with pytest.raises(ValueError):
        as_points(np.zeros((2, 4)))


def test_normalizer_runs_steps_in_order():
    rng = np.random.default_rng(0)
    raw = rng.uniform(-5, 5, size=(1000, 3))
    normalizer = MeshNormalizer(target_size=3.0, trim_fraction=0.01, max_vertex_count=100)
    processed = normalizer.process(raw)

    expected = clamp_positions(trim_bottom(normalize_positions(raw, 3.0), 0.01), 100)
    assert np.array_equal(processed, expected)
    assert len(processed) <= 100
    assert np.array_equal(prepare_cloud(raw, 3.0, 0.01, 100), processed)
