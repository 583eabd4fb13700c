#!/usr/bin/env python3
"""
Tests for the batch drivers and the command line interface
"""

import json

import numpy as np
import pytest
from PIL import Image

from morph_prep.cli.cli_app import main
from morph_prep.config.settings import ConfigManager
from morph_prep.io.mesh_utils import MeshUtils, detect_data_type, load_model_points
from morph_prep.io.point_cloud_processor import PointCloudProcessor
from morph_prep.precompute import find_model_files, generate_palettes, precompute_models


def write_cloud(path, n, seed):
    rng = np.random.default_rng(seed)
    np.savetxt(path, rng.uniform(-1, 1, size=(n, 3)))


@pytest.fixture
def model_dir(tmp_path):
    models = tmp_path / "models"
    models.mkdir()
    write_cloud(models / "alpha.txt", 120, 1)
    write_cloud(models / "beta.txt", 80, 2)
    (models / "readme.md").write_text("not a model")
    return models


@pytest.fixture
def config(tmp_path):
    return ConfigManager(str(tmp_path / "missing_config.json"))


def test_find_model_files(model_dir):
    assert find_model_files(str(model_dir)) == ["alpha.txt", "beta.txt"]
    assert find_model_files(str(model_dir / "nope")) == []


def test_precompute_writes_manifest(model_dir, tmp_path, config):
    out = tmp_path / "precomputed"
    manifest = precompute_models(str(model_dir), str(out), config=config, verbose=False)

    index = json.loads((out / "manifest.json").read_text())
    assert index['vertexCount'] == manifest.vertex_count
    assert [m['name'] for m in index['models']] == ['alpha', 'beta']
    assert (out / "beta.bin").stat().st_size == manifest.vertex_count * 12


def test_precompute_without_models_fails(tmp_path, config):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(FileNotFoundError):
        precompute_models(str(empty), str(tmp_path / "out"), config=config, verbose=False)


def test_loader_failure_aborts_before_writing(model_dir, tmp_path, config):
    (model_dir / "gamma.txt").write_text("1 2\n3 4\n")
    out = tmp_path / "out"
    with pytest.raises(ValueError, match="gamma.txt"):
        precompute_models(str(model_dir), str(out), config=config, verbose=False)
    assert not (out / "manifest.json").exists()


def test_obj_mesh_is_loaded_as_vertex_soup(tmp_path):
    obj = tmp_path / "quad.obj"
    obj.write_text(
        "v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\n"
        "f 1 2 3\nf 1 3 4\n"
    )
    vertices = MeshUtils.load_vertices(str(obj))
    assert vertices.shape == (6, 3)
    assert vertices.dtype == np.float32
    assert detect_data_type(str(obj)) == 'mesh'


def test_missing_model_file(tmp_path):
    with pytest.raises(ValueError):
        load_model_points(str(tmp_path / "missing.glb"))
    assert detect_data_type("cloud.xyz") == 'pointcloud'


def test_generate_palettes(tmp_path, config):
    images = tmp_path / "srefs"
    images.mkdir()
    for name, color in [("a.jpg", (250, 10, 10)), ("b.jpg", (10, 10, 250))]:
        Image.new("RGB", (16, 16), color).save(images / name)

    config.set('palette.color_count', 4)
    out = tmp_path / "palettes.json"
    palettes = generate_palettes(str(images), str(out), config=config, pair_with="a.jpg",
                                 verbose=False)

    data = json.loads(out.read_text())
    assert list(data) == ["a.jpg", "b.jpg"]
    assert len(palettes["b.jpg"]) <= len(palettes["a.jpg"])
    for colors in data.values():
        for color in colors:
            assert set(color) == {'r', 'g', 'b'}


def test_cli_models(model_dir, tmp_path):
    out = tmp_path / "cli_out"
    main(["models", str(model_dir), "-o", str(out), "-q", "--max-vertices", "50"])
    index = json.loads((out / "manifest.json").read_text())
    assert index['vertexCount'] <= 50


def test_cli_reports_errors_with_exit_status(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["models", str(tmp_path / "none"), "-o", str(tmp_path / "out"), "-q"])
    assert excinfo.value.code == 1
    assert "No model files found" in capsys.readouterr().out


def test_cli_rejects_invalid_settings(model_dir, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["models", str(model_dir), "-o", str(tmp_path / "out"), "-q", "--grid-divisions", "0"])
    assert excinfo.value.code == 1


def test_csv_point_cloud_round_trip(tmp_path):
    points = np.array([[0.0, 1.0, 2.0], [3.5, -4.0, 5.25]])
    path = tmp_path / "cloud.csv"
    PointCloudProcessor.save_point_cloud(points, str(path))

    loaded = load_model_points(str(path))
    assert loaded.dtype == np.float32
    np.testing.assert_allclose(loaded, points)

    info = MeshUtils.get_model_info(loaded)
    assert info['vertices'] == 2
    assert info['dimensions'] == pytest.approx([3.5, 5.0, 3.25])


def test_non_finite_coordinates_abort_before_writing(model_dir, tmp_path, config):
    rows = np.random.default_rng(3).uniform(-1, 1, size=(49, 3))
    rows[3, 0] = np.nan
    np.savetxt(model_dir / "corrupt.csv", rows, delimiter=",")
    out = tmp_path / "out"

    with pytest.raises(ValueError, match="corrupt.csv.*NaN"):
        precompute_models(str(model_dir), str(out), config=config, verbose=False)
    assert not (out / "manifest.json").exists()
    assert not (out / "alpha.bin").exists()


def test_config_formats_cover_every_loader():
    formats = set(ConfigManager(config_file="does_not_exist.json").get('files.supported_formats'))
    assert set(MeshUtils.SUPPORTED_FORMATS) <= formats
    assert set(PointCloudProcessor.SUPPORTED_FORMATS) <= formats
