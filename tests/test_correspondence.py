#!/usr/bin/env python3
"""
Tests for the greedy correspondence builder
"""

import numpy as np
import pytest

from morph_prep.core.correspondence import CorrespondenceBuilder, reorder_to_nearest


@pytest.fixture
def cloud():
    rng = np.random.default_rng(42)
    return rng.uniform(-1.5, 1.5, size=(500, 3)).astype(np.float32)


def test_identity_pair_is_left_unchanged(cloud):
    builder = CorrespondenceBuilder()
    mapping = builder.build(cloud, cloud)
    assert np.array_equal(mapping, np.arange(len(cloud)))
    assert np.array_equal(builder.reorder(cloud, cloud), cloud)


def test_identity_with_duplicate_points():
    points = np.array([[0, 0, 0], [1, 1, 1], [0, 0, 0], [1, 1, 1]], dtype=np.float32)
    assert reorder_to_nearest(points, points).tolist() == points.tolist()
    assert CorrespondenceBuilder().build(points, points).tolist() == [0, 1, 2, 3]


def test_shuffled_copy_is_restored_to_reference_order(cloud):
    perm = np.random.default_rng(1).permutation(len(cloud))
    shuffled = cloud[perm]
    assert np.array_equal(reorder_to_nearest(cloud, shuffled), cloud)


def test_output_is_a_bijection(cloud):
    target = np.random.default_rng(3).normal(size=(500, 3)).astype(np.float32)
    mapping = CorrespondenceBuilder().build(cloud, target)
    assert sorted(mapping.tolist()) == list(range(500))

    reordered = reorder_to_nearest(cloud, target)
    assert sorted(map(tuple, reordered.tolist())) == sorted(map(tuple, target.tolist()))


def test_far_points_fall_back_to_exhaustive_scan():
    reference = np.array([[0.0, 0.0, 0.0], [0.1, 0.0, 0.0]], dtype=np.float32)
    target = np.array([[0.05, 0.0, 0.0], [10.0, 0.0, 0.0]], dtype=np.float32)
    builder = CorrespondenceBuilder()
    mapping = builder.build(reference, target)

    assert mapping.tolist() == [0, 1]
    assert builder.last_stats.grid_matches == 1
    assert builder.last_stats.fallback_matches == 1
    assert builder.last_stats.cell_size == pytest.approx(0.5)


def test_matching_is_greedy_in_reference_order():
    # Reference 0 claims the shared nearest target first even though the
    # global optimum would give it to reference 1.
    reference = np.array([[0.0, 0.0, 0.0], [0.4, 0.0, 0.0]], dtype=np.float32)
    target = np.array([[0.5, 0.0, 0.0], [-1.0, 0.0, 0.0]], dtype=np.float32)
    mapping = CorrespondenceBuilder(max_ring_radius=20).build(reference, target)
    assert mapping.tolist() == [0, 1]


def test_length_mismatch_is_rejected(cloud):
    with pytest.raises(ValueError):
        CorrespondenceBuilder().build(cloud, cloud[:-1])


def test_empty_clouds():
    empty = np.zeros((0, 3), dtype=np.float32)
    assert CorrespondenceBuilder().build(empty, empty).tolist() == []


def test_stats_are_reported(cloud):
    builder = CorrespondenceBuilder()
    builder.build(cloud, cloud)
    stats = builder.last_stats.to_dict()
    assert stats['vertex_count'] == 500
    assert stats['grid_matches'] + stats['fallback_matches'] == 500
    assert stats['mean_squared_distance'] == 0.0


def test_invalid_settings():
    with pytest.raises(ValueError):
        CorrespondenceBuilder(grid_divisions=0)
    with pytest.raises(ValueError):
        CorrespondenceBuilder(max_ring_radius=-1)
