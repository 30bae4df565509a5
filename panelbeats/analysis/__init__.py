# Audio feature analysis module
from .spectrum import SpectralFrame, FeatureProvider, StaticFeatureProvider, FFT_BINS
from .beat import AdaptiveBeatDetector, DetectorState, FrameGate, TriggerPolicy

__all__ = [
    "SpectralFrame",
    "FeatureProvider",
    "StaticFeatureProvider",
    "FFT_BINS",
    "AdaptiveBeatDetector",
    "DetectorState",
    "FrameGate",
    "TriggerPolicy",
]
