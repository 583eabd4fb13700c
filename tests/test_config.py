#!/usr/bin/env python3
"""
Tests for ConfigManager
"""

import json

import pytest

from morph_prep.config.settings import ConfigManager


@pytest.fixture
def config(tmp_path):
    return ConfigManager(str(tmp_path / "config.json"))


def test_defaults(config):
    assert config.get('geometry.target_size') == 3.0
    assert config.get('geometry.trim_fraction') == 0.01
    assert config.get('geometry.max_vertex_count') == 20000
    assert config.get('correspondence.grid_divisions') == 20
    assert config.get('correspondence.max_ring_radius') == 2
    assert config.get('palette.color_count') == 64
    assert config.validate_config()


def test_dot_path_get_and_set(config):
    assert config.get('geometry.missing', 'fallback') == 'fallback'
    assert config.get('geometry.target_size.deeper') is None
    assert config.set('geometry.target_size', 5.0)
    assert config.get_geometry_params()['target_size'] == 5.0
    assert not config.set('geometry.target_size.deeper', 1)


def test_load_merges_file_over_defaults(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"correspondence": {"grid_divisions": 32}}))
    config = ConfigManager(str(path))
    assert config.get('correspondence.grid_divisions') == 32
    assert config.get('correspondence.max_ring_radius') == 2


def test_corrupt_file_keeps_defaults(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    config = ConfigManager(str(path))
    assert not config.load_config()
    assert config.get('geometry.max_vertex_count') == 20000


def test_save_and_reload(config):
    config.set('palette.color_count', 12)
    assert config.save_config()
    assert ConfigManager(config.config_file).get('palette.color_count') == 12


def test_import_rejects_unknown_sections(config, tmp_path):
    path = tmp_path / "import.json"
    path.write_text(json.dumps({"rendering": {"fov": 60}}))
    assert not config.import_config(str(path))

    path.write_text(json.dumps({"geometry": {"target_size": 2.0}}))
    assert config.import_config(str(path))
    assert config.get('geometry.target_size') == 2.0


def test_presets(config):
    assert config.apply_preset('preview')
    assert config.get('geometry.max_vertex_count') == 5000
    assert config.get('palette.color_count') == 16

    config.reset_to_defaults()
    assert config.apply_preset('high_detail')
    assert config.get('correspondence.grid_divisions') == 40
    assert config.get('performance.parallel_processing') is True
    assert config.validate_config()


def test_unknown_preset(config):
    assert config.get_preset_config('ultra') is None
    assert not config.apply_preset('ultra')


def test_invalid_values_fail_validation(config):
    config.set('geometry.trim_fraction', 1.5)
    assert not config.validate_config()


def test_summary(config):
    summary = config.get_config_summary()
    assert summary['geometry']['max_vertices'] == 20000
    assert summary['correspondence']['grid_divisions'] == 20
