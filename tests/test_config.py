from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from aurora_field import constants
from aurora_field.config import clear_config_cache, get_config_bundle, get_config_dir, load_settings
from aurora_field.config.loader import ENV_CONFIG_DIR
from aurora_field.config.validation import ensure_color_stops, ensure_mapping


def _write_yaml(path: Path, payload) -> None:
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")


def _make_config_dir(
    tmp_path: Path,
    *,
    pipeline: dict | None = None,
    rendering: dict | None = None,
    colors: dict | None = None,
) -> Path:
    cfg = tmp_path / "cfg"
    cfg.mkdir(parents=True)
    _write_yaml(cfg / "pipeline.yaml", pipeline or {})
    _write_yaml(cfg / "rendering.yaml", rendering or {})
    _write_yaml(cfg / "colors.yaml", colors or {})
    return cfg


@pytest.fixture(autouse=True)
def _reset_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


def test_config_dir_uses_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    cfg_a = _make_config_dir(tmp_path / "a", pipeline={"downsample": {"target_count": 111}})
    cfg_b = _make_config_dir(tmp_path / "b", pipeline={"downsample": {"target_count": 222}})

    monkeypatch.setenv(ENV_CONFIG_DIR, str(cfg_a))
    assert get_config_dir() == cfg_a.resolve()
    assert load_settings()[0].target_count == 111

    monkeypatch.setenv(ENV_CONFIG_DIR, str(cfg_b))
    assert load_settings()[0].target_count == 222


def test_repository_config_matches_builtin_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_CONFIG_DIR, raising=False)
    assert (get_config_dir() / "pipeline.yaml").exists()
    pipeline, render = load_settings()
    assert pipeline.target_count == constants.DEFAULT_TARGET_COUNT
    assert pipeline.min_probability == constants.DEFAULT_MIN_PROBABILITY
    assert render.base_radius_m == constants.BASE_RADIUS_M
    assert render.color_stops == constants.COLOR_STOPS


def test_missing_files_fall_back_to_defaults(tmp_path: Path) -> None:
    cfg = tmp_path / "empty"
    cfg.mkdir()
    bundle = get_config_bundle(cfg)
    assert bundle.pipeline == {} and bundle.rendering == {} and bundle.colors == {}
    pipeline, render = load_settings(cfg)
    assert pipeline.grid.lat_deg == constants.CELL_LAT_DEG
    assert pipeline.compute_kwargs()["pole_epsilon"] == constants.POLE_EPSILON_DEG
    assert render.boost is True


def test_bundle_is_cached_until_cleared(tmp_path: Path) -> None:
    cfg = _make_config_dir(tmp_path, rendering={"boost": False})
    first = get_config_bundle(cfg)
    _write_yaml(cfg / "rendering.yaml", {"boost": True})
    assert get_config_bundle(cfg) is first
    clear_config_cache()
    assert get_config_bundle(cfg).rendering == {"boost": True}


def test_overrides_are_applied(tmp_path: Path) -> None:
    stops = [[i / 10.0, 0.0, 1.0 - i / 10.0] for i in range(11)]
    cfg = _make_config_dir(
        tmp_path,
        pipeline={"downsample": {"min_probability": 10, "grid": {"lat_deg": 5, "lon_deg": 10}}},
        rendering={"radius": {"base_m": 1000, "span_m": 500}, "canvas": {"width_px": 640}},
        colors={"stops": stops},
    )
    pipeline, render = load_settings(cfg)
    assert pipeline.min_probability == 10.0
    assert (pipeline.grid.lat_deg, pipeline.grid.lon_deg) == (5.0, 10.0)
    assert (render.base_radius_m, render.radius_span_m) == (1000.0, 500.0)
    assert render.width_px == 640
    assert render.color_stops[10] == (1.0, 0.0, 0.0)


def test_non_mapping_file_raises(tmp_path: Path) -> None:
    cfg = _make_config_dir(tmp_path)
    _write_yaml(cfg / "pipeline.yaml", [1, 2, 3])
    with pytest.raises(TypeError):
        get_config_bundle(cfg)


@pytest.mark.parametrize(
    "pipeline",
    [
        {"downsample": {"target_count": 0}},
        {"downsample": {"grid": {"lat_deg": -2.5}}},
        {"downsample": {"grid": {"lon_deg": "wide"}}},
    ],
)
def test_invalid_pipeline_values_raise(tmp_path: Path, pipeline: dict) -> None:
    cfg = _make_config_dir(tmp_path, pipeline=pipeline)
    with pytest.raises(ValueError):
        load_settings(cfg)


@pytest.mark.parametrize("span_m", [0, -5000.0])
def test_invalid_radius_span_raises(tmp_path: Path, span_m: float) -> None:
    cfg = _make_config_dir(tmp_path, rendering={"radius": {"span_m": span_m}})
    with pytest.raises(ValueError):
        load_settings(cfg)


def test_color_stop_validation() -> None:
    with pytest.raises(ValueError):
        ensure_color_stops([[0.0, 0.0, 0.0]] * 10, name="stops")
    with pytest.raises(ValueError):
        ensure_color_stops([[0.0, 0.0, 0.0]] * 10 + [[0.0, 2.0, 0.0]], name="stops")
    with pytest.raises(ValueError):
        ensure_color_stops([[0.0, 0.0]] * 11, name="stops")
    assert len(ensure_color_stops([(0, 0, 0)] * 11, name="stops")) == 11


def test_ensure_mapping() -> None:
    assert ensure_mapping(None, name="x") == {}
    with pytest.raises(TypeError):
        ensure_mapping([1], name="x")
