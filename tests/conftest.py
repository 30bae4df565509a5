"""Pytest configuration and shared fixtures."""

import pytest

from panelbeats.analysis.spectrum import FFT_BINS, SpectralFrame
from panelbeats.config.settings import EffectSettings
from panelbeats.layout import LayoutGraph
from panelbeats.modes.base import EffectContext
from panelbeats.palette import Palette

TILE = 86.6


@pytest.fixture
def grid_layout() -> LayoutGraph:
    """3x3 grid of panels one tile apart, centered on the origin."""
    points = []
    panel_id = 10
    for row in (-1, 0, 1):
        for col in (-1, 0, 1):
            points.append((panel_id, col * TILE, row * TILE))
            panel_id += 1
    return LayoutGraph.from_points(points, center=(0.0, 0.0))


@pytest.fixture
def rgb_palette() -> Palette:
    return Palette.from_list([(255, 0, 0), (0, 255, 0), (0, 0, 255)])


@pytest.fixture
def settings() -> EffectSettings:
    return EffectSettings(seed=1234)


@pytest.fixture
def context(grid_layout, rgb_palette, settings) -> EffectContext:
    return EffectContext.create(grid_layout, rgb_palette, settings, seed=settings.seed)


def peak_frame(index: int, value: int = 100, energy: int = 1000,
               is_beat: bool = False, is_onset: bool = False) -> SpectralFrame:
    """Frame whose only non-zero bin is ``index``."""
    bins = [0] * FFT_BINS
    bins[index] = value
    return SpectralFrame(bins=tuple(bins), energy=energy, is_beat=is_beat, is_onset=is_onset)


def silent_frame(is_beat: bool = False, is_onset: bool = False, energy: int = 0) -> SpectralFrame:
    return SpectralFrame(bins=(0,) * FFT_BINS, energy=energy, is_beat=is_beat, is_onset=is_onset)


class FixedRng:
    """Stand-in for numpy's Generator with predictable draws."""

    def __init__(self, value: float = 0.75):
        self.value = value

    def random(self):
        return self.value

    def integers(self, low, high=None, size=None):
        if size is None:
            return low
        return [low] * size
