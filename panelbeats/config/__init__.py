# Effect configuration module
from .settings import (
    DetectorSettings,
    DiffusionSettings,
    EffectSettings,
    load_settings,
    settings_from_dict,
)

__all__ = [
    "DetectorSettings",
    "DiffusionSettings",
    "EffectSettings",
    "load_settings",
    "settings_from_dict",
]
