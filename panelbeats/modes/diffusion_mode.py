"""Soft Lightning: an ambient glow crossed by lights born on onsets."""

import logging
from typing import Any

import numpy as np

from .base import EffectContext, Mode, ModeRegistry
from .lights import LightSourceField
from panelbeats.analysis.beat import FrameGate
from panelbeats.analysis.spectrum import SpectralFrame
from panelbeats.errors import ConfigurationError
from panelbeats.layout import LayoutGraph

logger = logging.getLogger(__name__)


class SpatialDiffusionRenderer:
    """Blends the ambient colour towards each transient light by distance.

    Lights are applied one after another in creation order; the blend is
    not commutative, so order changes the result.
    """

    def __init__(self, blend_scale: float = 1.5):
        if blend_scale < 0:
            raise ConfigurationError(f"blend_scale must be >= 0, got {blend_scale}")
        self.blend_scale = blend_scale

    def blend_factors(self, field: LightSourceField, layout: LayoutGraph, index: int) -> np.ndarray:
        """Per-panel weight of one light, in (0, 1]."""
        light = field.sources[index]
        d = layout.distances_to(light.x, light.y) / field.tile_distance - light.radius
        return 1.0 / (self.blend_scale * d * d + 1.0)

    def render(self, field: LightSourceField, layout: LayoutGraph) -> np.ndarray:
        accum = np.tile(np.asarray(field.ambient.color, dtype=np.float64), (len(layout), 1))
        for index in range(1, len(field)):
            factor = self.blend_factors(field, layout, index)[:, None]
            color = np.asarray(field.sources[index].color, dtype=np.float64)
            accum = accum * (1.0 - factor) + color * factor
        return accum.astype(np.int64)


@ModeRegistry.register
class SoftLightningMode(Mode):
    """Ambient colour that follows beats, with white flashes drifting across on onsets."""

    MODE_ID = "soft_lightning"
    MODE_NAME = "Soft Lightning"

    def __init__(self, context: EffectContext):
        super().__init__(context)
        diffusion = context.settings.diffusion
        self._onset_policy = context.settings.onset_policy()
        self._recolor_policy = context.settings.recolor_policy()
        self._gate = FrameGate(self._recolor_policy.skip_frames)
        self._field = LightSourceField(
            context.layout,
            tile_distance=diffusion.tile_distance,
            max_sources=diffusion.max_sources,
            despawn_tiles=diffusion.despawn_tiles,
            speed_tiles=diffusion.speed_tiles,
            falloff_radius=diffusion.falloff_radius,
            rng=context.rng,
        )
        self._renderer = SpatialDiffusionRenderer(diffusion.blend_scale)

    @property
    def field(self) -> LightSourceField:
        return self._field

    @property
    def renderer(self) -> SpatialDiffusionRenderer:
        return self._renderer

    def process(self, frame: SpectralFrame) -> np.ndarray:
        ctx = self._context
        detector = ctx.detector
        scan = detector.scan(frame)

        if detector.is_triggered(scan, self._onset_policy, scan.is_onset):
            self._field.spawn()

        # Skipped frames hold the field still: no recolor and no movement
        if not self._gate.ready():
            return self._renderer.render(self._field, ctx.layout)

        if detector.is_triggered(scan, self._recolor_policy, scan.is_beat):
            index = detector.resolve_palette_index()
            self._field.recolor(ctx.mapper.color_for(index))
            logger.debug(f"Ambient recolored to palette index {index}")

        colors = self._renderer.render(self._field, ctx.layout)
        self._field.propagate()
        return colors

    def get_parameters(self) -> dict[str, Any]:
        return {
            "onset_multiplier": self._onset_policy.multiplier,
            "recolor_multiplier": self._recolor_policy.multiplier,
            "energy_threshold": self._onset_policy.energy_threshold,
            "blend_scale": self._renderer.blend_scale,
        }

    def set_parameters(self, params: dict[str, Any]) -> None:
        settings = self._context.settings.detector
        if "onset_multiplier" in params:
            settings.onset_multiplier = max(0.0, float(params["onset_multiplier"]))
        if "recolor_multiplier" in params:
            settings.recolor_multiplier = max(0.0, float(params["recolor_multiplier"]))
        if "energy_threshold" in params:
            settings.energy_threshold = max(0, int(params["energy_threshold"]))
        if "blend_scale" in params:
            self._renderer.blend_scale = max(0.0, float(params["blend_scale"]))
        self._onset_policy = self._context.settings.onset_policy()
        self._recolor_policy = self._context.settings.recolor_policy()
