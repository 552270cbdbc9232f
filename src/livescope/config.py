"""
Runtime configuration for the live analysis pipeline.

Values are threaded explicitly through constructors; nothing in the package
reads module-level audio constants. Named presets are loaded from a single
packaged JSON file so the CLI and library callers share the same defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

from livescope.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis, playback and presentation."""

    # Audio
    sample_rate: int = 44100
    block_size: int = 512        # frames per analysed block
    latency: float = 0.1         # output device latency in seconds

    # Spectrum
    band_count: int = 32
    log_scale: float = 100.0     # divisor applied to mean log10 magnitude
    epsilon: float = 1e-6        # added before log10 so silence stays finite
    smoothing_weight: float = 0.5

    # Presentation
    tick_interval: float = 0.1   # seconds between display refreshes
    bar_width: int = 50
    bar_height: int = 12

    # Discovery
    music_dir: str = "./music"
    extensions: tuple = (".mp3", ".wav")

    def validate(self) -> "AnalysisConfig":
        """
        Check value ranges.

        Returns:
            The config itself, so calls can be chained.

        Raises:
            ConfigError: If a size or interval is out of range.
        """
        for name in ("sample_rate", "block_size", "band_count", "bar_width", "bar_height"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("tick_interval", "log_scale", "epsilon", "latency"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.smoothing_weight < 0:
            raise ConfigError(
                f"smoothing_weight must be non-negative, got {self.smoothing_weight}"
            )
        if self.block_size & (self.block_size - 1):
            logger.warning(
                "block_size %d is not a power of two; FFT will be slower",
                self.block_size,
            )
        return self

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a copy with the non-None overrides applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "extensions" in changes:
            changes["extensions"] = tuple(changes["extensions"])
        return replace(self, **changes)

    @classmethod
    def from_preset(cls, name: str = "default", **overrides: Any) -> "AnalysisConfig":
        """
        Build a config from a named preset plus explicit overrides.

        Raises:
            ConfigError: If the preset name is unknown.
        """
        preset = get_preset(name)
        if preset is None:
            raise ConfigError(
                f"Unknown preset '{name}' (available: {', '.join(sorted(load_presets()))})"
            )
        return cls().with_overrides(**preset).with_overrides(**overrides).validate()

    @property
    def block_duration(self) -> float:
        """Nominal duration of one block in seconds."""
        return self.block_size / self.sample_rate


@lru_cache(maxsize=1)
def load_presets() -> Dict[str, Any]:
    """Load all presets from the packaged JSON file."""
    with resources.files("livescope").joinpath("presets.json").open(
        "r", encoding="utf-8"
    ) as f:
        return json.load(f)


def get_preset(name: str) -> Dict[str, Any] | None:
    """Return the overrides for a preset, or None if the name is unknown."""
    return load_presets().get(name)
