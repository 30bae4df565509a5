"""panelbeats - audio-reactive colour frames for panel layouts."""

from .errors import PanelbeatsError, ConfigurationError, BoundsViolation
from .layout import Panel, LayoutGraph
from .palette import Palette, PaletteColorMapper
from .analysis import SpectralFrame, AdaptiveBeatDetector, TriggerPolicy
from .modes import FrameEmitter, ModeRegistry

__all__ = [
    "PanelbeatsError",
    "ConfigurationError",
    "BoundsViolation",
    "Panel",
    "LayoutGraph",
    "Palette",
    "PaletteColorMapper",
    "SpectralFrame",
    "AdaptiveBeatDetector",
    "TriggerPolicy",
    "FrameEmitter",
    "ModeRegistry",
]
