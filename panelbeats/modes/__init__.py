# Panel effect modes module
from .base import EffectContext, FrameOutput, FrameRecord, Mode, ModeRegistry
from .pattern_mode import PatternedBeatsMode
from .diffusion_mode import SoftLightningMode
from .pipeline import FrameEmitter

__all__ = [
    "EffectContext",
    "FrameOutput",
    "FrameRecord",
    "Mode",
    "ModeRegistry",
    "PatternedBeatsMode",
    "SoftLightningMode",
    "FrameEmitter",
]
