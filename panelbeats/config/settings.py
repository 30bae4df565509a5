"""Effect settings and YAML loading."""

import logging
import math
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from panelbeats.analysis.beat import ENERGY_THRESHOLD, TriggerPolicy
from panelbeats.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class DetectorSettings:
    """Beat detector tuning for both effects."""
    energy_threshold: int = ENERGY_THRESHOLD
    pattern_multiplier: float = 2.0
    onset_multiplier: float = 1.8
    recolor_multiplier: float = 1.8
    recolor_skip_frames: int = 1  # every other eligible beat recolors


@dataclass
class DiffusionSettings:
    """Light diffusion geometry for Soft Lightning."""
    tile_distance: float = 86.6  # centroid spacing of adjacent triangle panels
    max_sources: int = 2  # including the ambient light
    despawn_tiles: float = 10.0
    speed_tiles: float = 2.0
    falloff_radius: float = 1.0
    blend_scale: float = 1.5


@dataclass
class EffectSettings:
    """Complete effect settings."""
    active_mode: str = "patterned_beats"  # "patterned_beats" or "soft_lightning"
    transition_time: int = 3
    seed: Optional[int] = None  # None seeds from the clock
    detector: DetectorSettings = field(default_factory=DetectorSettings)
    diffusion: DiffusionSettings = field(default_factory=DiffusionSettings)

    def pattern_policy(self) -> TriggerPolicy:
        return TriggerPolicy(
            multiplier=self.detector.pattern_multiplier,
            energy_threshold=self.detector.energy_threshold,
        )

    def onset_policy(self) -> TriggerPolicy:
        return TriggerPolicy(
            multiplier=self.detector.onset_multiplier,
            energy_threshold=self.detector.energy_threshold,
        )

    def recolor_policy(self) -> TriggerPolicy:
        return TriggerPolicy(
            multiplier=self.detector.recolor_multiplier,
            energy_threshold=self.detector.energy_threshold,
            skip_frames=self.detector.recolor_skip_frames,
        )

    def validate(self) -> None:
        """Raise ConfigurationError for values no effect can run with."""
        if not isinstance(self.active_mode, str):
            raise ConfigurationError("active_mode must be a string")
        if self.seed is not None:
            _require_int("seed", self.seed)
        _require_int("transition_time", self.transition_time, minimum=0)

        detector = self.detector
        _require_int("energy_threshold", detector.energy_threshold, minimum=0)
        _require_int("recolor_skip_frames", detector.recolor_skip_frames, minimum=0)
        _require_number("pattern_multiplier", detector.pattern_multiplier, minimum=0.0)
        _require_number("onset_multiplier", detector.onset_multiplier, minimum=0.0)
        _require_number("recolor_multiplier", detector.recolor_multiplier, minimum=0.0)

        diffusion = self.diffusion
        _require_number("tile_distance", diffusion.tile_distance, minimum=0.0)
        if diffusion.tile_distance <= 0:
            raise ConfigurationError("tile_distance must be positive")
        _require_int("max_sources", diffusion.max_sources, minimum=2)
        _require_number("despawn_tiles", diffusion.despawn_tiles, minimum=0.0)
        _require_number("speed_tiles", diffusion.speed_tiles, minimum=0.0)
        _require_number("falloff_radius", diffusion.falloff_radius, minimum=0.0)
        _require_number("blend_scale", diffusion.blend_scale, minimum=0.0)

    def to_dict(self) -> dict:
        return asdict(self)


def _require_int(name: str, value: Any, minimum: Optional[int] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")


def _require_number(name: str, value: Any, minimum: Optional[float] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")


def _build(cls, raw: Any, section: str):
    """Instantiate a settings dataclass, rejecting unknown keys."""
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{section}': {', '.join(sorted(unknown))}")
    return cls(**raw)


def settings_from_dict(data: Optional[dict]) -> EffectSettings:
    """Create settings from a dictionary, filling in defaults."""
    data = dict(data or {})
    detector = _build(DetectorSettings, data.pop("detector", None), "detector")
    diffusion = _build(DiffusionSettings, data.pop("diffusion", None), "diffusion")
    settings = _build(EffectSettings, data, "settings")
    settings.detector = detector
    settings.diffusion = diffusion
    settings.validate()
    return settings


def load_settings(config_path: Union[str, Path] = "config/effect.yaml") -> EffectSettings:
    """Load settings from a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")

    settings = settings_from_dict(raw)
    logger.info(f"Loaded effect settings from {path} (mode: {settings.active_mode})")
    return settings
