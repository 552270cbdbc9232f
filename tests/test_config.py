"""Tests for configuration and presets."""

import pytest

from livescope.config import AnalysisConfig, get_preset, load_presets
from livescope.errors import ConfigError


def test_defaults():
    cfg = AnalysisConfig()
    assert cfg.sample_rate == 44100
    assert cfg.block_size == 512
    assert cfg.band_count == 32
    assert cfg.smoothing_weight == 0.5
    assert cfg.log_scale == 100.0
    assert cfg.extensions == (".mp3", ".wav")
    assert cfg.block_duration == pytest.approx(512 / 44100)


def test_presets_packaged():
    presets = load_presets()
    assert {"default", "responsive", "smooth"} <= set(presets)
    assert get_preset("nope") is None


def test_from_preset_applies_overrides():
    cfg = AnalysisConfig.from_preset("responsive")
    assert cfg.block_size == 256
    assert cfg.tick_interval == 0.05

    cfg = AnalysisConfig.from_preset("responsive", block_size=1024, band_count=None)
    assert cfg.block_size == 1024
    assert cfg.band_count == 32


def test_unknown_preset():
    with pytest.raises(ConfigError, match="Unknown preset"):
        AnalysisConfig.from_preset("loud")


def test_unknown_field():
    with pytest.raises(ConfigError, match="Unknown config field"):
        AnalysisConfig().with_overrides(colour="red")


def test_extensions_become_tuple():
    cfg = AnalysisConfig().with_overrides(extensions=[".flac"])
    assert cfg.extensions == (".flac",)


@pytest.mark.parametrize(
    "field,value",
    [
        ("block_size", 0),
        ("band_count", -1),
        ("tick_interval", 0.0),
        ("log_scale", 0.0),
        ("smoothing_weight", -0.1),
    ],
)
def test_validate_rejects(field, value):
    with pytest.raises(ConfigError):
        AnalysisConfig().with_overrides(**{field: value}).validate()


def test_non_power_of_two_block_allowed():
    assert AnalysisConfig(block_size=300).validate().block_size == 300
