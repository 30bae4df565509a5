"""Patterned Beats: random panel masks regenerated on every beat."""

import logging
from typing import Any

import numpy as np

from .base import EffectContext, Mode, ModeRegistry
from panelbeats.analysis.spectrum import SpectralFrame
from panelbeats.errors import BoundsViolation
from panelbeats.palette import RGB, WHITE

logger = logging.getLogger(__name__)


class PatternMask:
    """One on/off flag per panel, index-aligned with the layout."""

    def __init__(self, size: int):
        self._bits = np.zeros(size, dtype=bool)

    @property
    def bits(self) -> np.ndarray:
        return self._bits

    def __len__(self) -> int:
        return len(self._bits)

    def regenerate(self, rng: np.random.Generator) -> None:
        """Replace every flag with a fresh fair coin flip."""
        self._bits = rng.integers(0, 2, size=len(self._bits)).astype(bool)


class PatternMaskRenderer:
    """Colours masked panels with the active colour and the rest white."""

    def __init__(self, background: RGB = WHITE):
        self.background = background

    def render(self, mask: PatternMask, color: RGB, n_panels: int) -> np.ndarray:
        if len(mask) != n_panels:
            raise BoundsViolation(f"Pattern mask has {len(mask)} entries for {n_panels} panels")
        on = np.asarray(color, dtype=np.int64)
        off = np.asarray(self.background, dtype=np.int64)
        return np.where(mask.bits[:, None], on, off)


@ModeRegistry.register
class PatternedBeatsMode(Mode):
    """Random two-tone pattern that reshuffles on beats."""

    MODE_ID = "patterned_beats"
    MODE_NAME = "Patterned Beats"

    def __init__(self, context: EffectContext):
        super().__init__(context)
        self._policy = context.settings.pattern_policy()
        self._mask = PatternMask(len(context.layout))
        self._renderer = PatternMaskRenderer()
        self._mask.regenerate(context.rng)

    @property
    def mask(self) -> PatternMask:
        return self._mask

    def process(self, frame: SpectralFrame) -> np.ndarray:
        ctx = self._context
        triggered, _ = ctx.detector.process(frame, self._policy)
        if triggered:
            self._mask.regenerate(ctx.rng)
            logger.debug(f"Pattern regenerated, {int(self._mask.bits.sum())}/{len(self._mask)} panels lit")
        return self._renderer.render(self._mask, ctx.active_color, len(ctx.layout))

    def get_parameters(self) -> dict[str, Any]:
        return {
            "multiplier": self._policy.multiplier,
            "energy_threshold": self._policy.energy_threshold,
        }

    def set_parameters(self, params: dict[str, Any]) -> None:
        settings = self._context.settings.detector
        if "multiplier" in params:
            settings.pattern_multiplier = max(0.0, float(params["multiplier"]))
        if "energy_threshold" in params:
            settings.energy_threshold = max(0, int(params["energy_threshold"]))
        self._policy = self._context.settings.pattern_policy()
