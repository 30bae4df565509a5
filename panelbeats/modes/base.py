"""Base classes for panel effect modes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from panelbeats.analysis.beat import AdaptiveBeatDetector
from panelbeats.analysis.spectrum import SpectralFrame
from panelbeats.config.settings import EffectSettings
from panelbeats.layout import LayoutGraph
from panelbeats.palette import Palette, PaletteColorMapper


@dataclass(frozen=True)
class FrameRecord:
    """Colour for one panel in one frame."""
    panel_id: int
    r: int
    g: int
    b: int
    trans_time: int = 3

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b


@dataclass
class FrameOutput:
    """One complete frame, one record per panel in layout order."""
    records: list[FrameRecord] = field(default_factory=list)
    sleep_time: Optional[int] = None  # None for sound visualisation effects

    @property
    def n_frames(self) -> int:
        return len(self.records)


@dataclass
class EffectContext:
    """Everything a running effect owns, created once at start."""
    layout: LayoutGraph
    palette: Palette
    settings: EffectSettings
    detector: AdaptiveBeatDetector
    rng: np.random.Generator
    mapper: PaletteColorMapper = field(init=False)

    def __post_init__(self):
        self.mapper = PaletteColorMapper(self.palette)

    @classmethod
    def create(cls, layout: LayoutGraph, palette: Palette, settings: EffectSettings,
               seed: Optional[int] = None) -> "EffectContext":
        return cls(
            layout=layout,
            palette=palette,
            settings=settings,
            detector=AdaptiveBeatDetector(len(palette)),
            rng=np.random.default_rng(seed),
        )

    @property
    def active_color(self) -> tuple[int, int, int]:
        return self.mapper.color_for(self.detector.palette_index)


class Mode(ABC):
    """Abstract base class for panel effect modes."""

    # Mode identifier (override in subclasses)
    MODE_ID: str = "base"
    MODE_NAME: str = "Base Mode"

    def __init__(self, context: EffectContext):
        self._context = context

    @property
    def context(self) -> EffectContext:
        return self._context

    @abstractmethod
    def process(self, frame: SpectralFrame) -> np.ndarray:
        """
        Advance the effect by one invocation and colour every panel.

        Args:
            frame: Spectral features for this invocation

        Returns:
            (n_panels, 3) integer array of RGB values in layout order
        """
        pass

    @abstractmethod
    def get_parameters(self) -> dict[str, Any]:
        """Get current mode parameters for serialization."""
        pass

    @abstractmethod
    def set_parameters(self, params: dict[str, Any]) -> None:
        """Set mode parameters from dict."""
        pass


class ModeRegistry:
    """Registry for available effect modes."""

    _modes: dict[str, type[Mode]] = {}

    @classmethod
    def register(cls, mode_class: type[Mode]) -> type[Mode]:
        """Register a mode class. Can be used as decorator."""
        cls._modes[mode_class.MODE_ID] = mode_class
        return mode_class

    @classmethod
    def get(cls, mode_id: str) -> Optional[type[Mode]]:
        """Get a mode class by ID."""
        return cls._modes.get(mode_id)

    @classmethod
    def create(cls, mode_id: str, context: EffectContext) -> Optional[Mode]:
        """Create a mode instance by ID."""
        mode_class = cls._modes.get(mode_id)
        if mode_class:
            return mode_class(context)
        return None

    @classmethod
    def list_modes(cls) -> list[tuple[str, str]]:
        """List available modes as (id, name) tuples."""
        return [(m.MODE_ID, m.MODE_NAME) for m in cls._modes.values()]
