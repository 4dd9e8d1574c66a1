"""Tests for configuration defaults and JSON overrides."""

from __future__ import annotations

import json

import pytest

from repixel.config import RepixelConfig, load_config
from repixel.errors import ConfigError


def test_defaults():
    cfg = RepixelConfig()
    assert cfg.duration_ms == 3000
    assert (cfg.max_width, cfg.max_height) == (800, 800)
    assert cfg.fps == 30


def test_replace_skips_none():
    cfg = RepixelConfig().replace(fps=12, max_width=None)
    assert cfg.fps == 12
    assert cfg.max_width == 800


def test_replace_rejects_unknown():
    with pytest.raises(ConfigError):
        RepixelConfig().replace(edge_fraction=0.5)


class TestLoadConfig:
    def test_overrides(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"duration_ms": 1200, "log_level": "DEBUG"}))
        cfg = load_config(path)
        assert cfg.duration_ms == 1200
        assert cfg.log_level == "DEBUG"
        assert cfg.fps == 30

    def test_bad_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{nope")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json")


class TestValueTypes:
    def test_int_accepted_for_float_field(self):
        cfg = RepixelConfig().replace(duration_ms=1200)
        assert cfg.duration_ms == 1200.0
        assert isinstance(cfg.duration_ms, float)

    def test_integral_float_accepted_for_int_field(self):
        assert RepixelConfig().replace(fps=24.0).fps == 24

    @pytest.mark.parametrize(
        "overrides",
        [
            {"fps": "30"},
            {"fps": 12.5},
            {"fps": True},
            {"max_width": [800]},
            {"duration_ms": "3000"},
            {"log_level": 5},
            {"log_level": "LOUD"},
        ],
    )
    def test_wrong_type_rejected(self, overrides):
        with pytest.raises(ConfigError):
            RepixelConfig().replace(**overrides)

    def test_load_config_checks_types(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"fps": "30"}))
        with pytest.raises(ConfigError):
            load_config(path)
