"""Tests for render settings normalization and settings files."""

import copy
import dataclasses
import json
import math

import pytest

from glyphgrid.config.render_config import (
    DEFAULT_HEIGHT,
    DEFAULT_SETTINGS,
    RenderConfig,
    load_settings,
    normalize,
    save_settings,
)
from glyphgrid.render.errors import InvalidConfigError, UnknownRampError
from glyphgrid.render.pixels import PixelBuffer
from glyphgrid.render.ramps import RampRegistry
from glyphgrid.render.sampler import render


class TestDefaults:
    def test_empty_settings(self):
        cfg = normalize()
        assert cfg.target_width == 100
        assert cfg.target_height == DEFAULT_HEIGHT
        assert cfg.resolution_factor == 1.0
        assert cfg.brightness == 1.0
        assert cfg.contrast == 1.0
        assert cfg.grayscale is True
        assert cfg.invert is False
        assert cfg.ramp_id == "standard"
        assert cfg.font_size == 6

    def test_sampling_size(self):
        cfg = normalize({"width": 50, "height": 20, "resolution": 1.5})
        assert cfg.sampling_width == 75
        assert cfg.sampling_height == 30


class TestClamping:
    @pytest.mark.parametrize("raw, expected", [(5, 20), (20, 20), (120, 120), (500, 200), (50.9, 50)])
    def test_width(self, raw, expected):
        assert normalize({"width": raw}).target_width == expected

    @pytest.mark.parametrize("raw, expected", [(3, 10), (40, 40), (999, 150)])
    def test_height(self, raw, expected):
        assert normalize({"height": raw}).target_height == expected

    @pytest.mark.parametrize("raw, expected", [(0.1, 0.5), (1.2, 1.2), (10, 3.0)])
    def test_resolution(self, raw, expected):
        assert normalize({"resolution": raw}).resolution_factor == expected

    @pytest.mark.parametrize("key, attr", [("brightness", "brightness"), ("contrast", "contrast")])
    def test_brightness_contrast(self, key, attr):
        assert getattr(normalize({key: 0.1}), attr) == 0.3
        assert getattr(normalize({key: 9}), attr) == 2.5
        assert getattr(normalize({key: 1.7}), attr) == 1.7

    def test_font_size(self):
        assert normalize({"fontSize": 1}).font_size == 3
        assert normalize({"fontSize": 40}).font_size == 16

    def test_numeric_strings_accepted(self):
        cfg = normalize({"width": "80", "brightness": "1.5"})
        assert cfg.target_width == 80
        assert cfg.brightness == 1.5


class TestDerivedHeight:
    def test_height_from_aspect_ratio(self):
        # floor(100 * 0.75 * 0.5) = 37
        cfg = normalize({"width": 100}, image_aspect_ratio=0.75)
        assert cfg.target_height == 37

    def test_derived_from_clamped_width(self):
        cfg = normalize({"width": 1000}, image_aspect_ratio=1.0)
        assert cfg.target_width == 200
        assert cfg.target_height == 100

    def test_derived_height_not_clamped(self):
        cfg = normalize({"width": 200}, image_aspect_ratio=3.0)
        assert cfg.target_height == 300

    def test_very_wide_image_keeps_one_row(self):
        cfg = normalize({"width": 20}, image_aspect_ratio=0.01)
        assert cfg.target_height == 1

    @pytest.mark.parametrize("resolution", [0.5, 0.7, 0.99])
    def test_very_wide_image_renders_at_low_resolution(self, resolution):
        pixels = PixelBuffer.filled(400, 2, (128, 128, 128, 255))
        cfg = normalize({"width": 20, "resolution": resolution}, image_aspect_ratio=pixels.aspect_ratio)
        assert cfg.target_height == 2
        grid = render(pixels, cfg)
        assert grid.height == 1
        assert grid.width == math.floor(20 * resolution)

    def test_explicit_height_wins(self):
        cfg = normalize({"width": 100, "height": 40}, image_aspect_ratio=0.75)
        assert cfg.target_height == 40

    def test_none_height_means_derive(self):
        cfg = normalize({"width": 100, "height": None}, image_aspect_ratio=0.5)
        assert cfg.target_height == 25

    @pytest.mark.parametrize("aspect", [0, -1.0, math.nan, math.inf, "tall"])
    def test_bad_aspect_ratio(self, aspect):
        with pytest.raises(InvalidConfigError):
            normalize({"width": 100}, image_aspect_ratio=aspect)


class TestInvalidInput:
    @pytest.mark.parametrize("key", ["width", "height", "resolution", "brightness", "contrast", "fontSize"])
    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, key, value):
        with pytest.raises(InvalidConfigError):
            normalize({key: value})

    @pytest.mark.parametrize("value", ["wide", [1, 2], True])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidConfigError):
            normalize({"width": value})

    def test_unknown_character_set(self):
        with pytest.raises(InvalidConfigError) as exc:
            normalize({"characterSet": "nope"})
        assert isinstance(exc.value.__cause__, UnknownRampError)

    def test_character_set_must_be_string(self):
        with pytest.raises(InvalidConfigError):
            normalize({"characterSet": 3})

    def test_bad_flag(self):
        with pytest.raises(InvalidConfigError):
            normalize({"inverted": "maybe"})

    @pytest.mark.parametrize("key", ["width", "height", "resolution"])
    def test_huge_integer_rejected(self, key):
        with pytest.raises(InvalidConfigError):
            normalize({key: 10 ** 400})

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            normalize({"width": math.nan})


class TestFlags:
    @pytest.mark.parametrize("value, expected", [(True, True), (False, False), ("true", True), ("no", False), (1, True), (0, False)])
    def test_inverted(self, value, expected):
        assert normalize({"inverted": value}).invert is expected

    def test_grayscale_off(self):
        assert normalize({"grayscale": False}).grayscale is False


class TestPurity:
    def test_input_not_mutated(self):
        raw = {"width": 500, "brightness": 9, "characterSet": "blocks"}
        before = copy.deepcopy(raw)
        normalize(raw, image_aspect_ratio=0.5)
        assert raw == before

    def test_custom_registry(self):
        registry = RampRegistry({"mine": "#."})
        cfg = normalize({"characterSet": "mine"}, registry=registry)
        assert cfg.ramp_id == "mine"
        with pytest.raises(InvalidConfigError):
            normalize({"characterSet": "standard"}, registry=registry)

    def test_settings_round_trip(self):
        cfg = normalize({"width": 64, "height": 32, "resolution": 2, "inverted": True, "characterSet": "dots"})
        assert normalize(cfg.to_settings()) == cfg


class TestRenderConfig:
    def test_frozen(self):
        cfg = RenderConfig(target_width=20, target_height=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.target_width = 30

    @pytest.mark.parametrize("field, value", [
        ("target_width", 0),
        ("target_height", -3),
        ("resolution_factor", 0.0),
        ("brightness", math.nan),
        ("contrast", math.inf),
    ])
    def test_rejects_non_positive(self, field, value):
        params = dict(target_width=20, target_height=10)
        params[field] = value
        with pytest.raises(InvalidConfigError):
            RenderConfig(**params)

    def test_to_dict(self):
        d = RenderConfig(target_width=20, target_height=10, resolution_factor=1.5).to_dict()
        assert d["sampling_width"] == 30
        assert d["sampling_height"] == 15
        assert d["ramp_id"] == "standard"


class TestSettingsFiles:
    def test_save_and_load(self, tmp_path):
        path = save_settings({"width": 150, "characterSet": "blocks"}, tmp_path / "cfg" / "settings.json")
        loaded = load_settings(path)
        assert loaded["width"] == 150
        assert loaded["characterSet"] == "blocks"
        # Defaults filled in for unspecified keys
        assert loaded["contrast"] == DEFAULT_SETTINGS["contrast"]
        assert loaded["height"] is None

    def test_unknown_keys_kept(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"theme": "dark"}))
        loaded = load_settings(path)
        assert loaded["theme"] == "dark"
        assert normalize(loaded).target_width == 100

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("{not json")
        with pytest.raises(InvalidConfigError):
            load_settings(path)

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_bytes(b"\xff\xfe{\x00}")
        with pytest.raises(InvalidConfigError):
            load_settings(path)

    def test_non_object_json(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("[1, 2]")
        with pytest.raises(InvalidConfigError):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.json")
