"""Frame emitter: runs the active mode and writes one record per panel."""

import logging
import time
from typing import Any, Optional

from .base import EffectContext, FrameOutput, FrameRecord, Mode, ModeRegistry
from panelbeats.analysis.spectrum import FeatureProvider, SpectralFrame
from panelbeats.config.settings import EffectSettings
from panelbeats.errors import ConfigurationError
from panelbeats.layout import LayoutGraph
from panelbeats.palette import Palette

logger = logging.getLogger(__name__)


class FrameEmitter:
    """Per-invocation entry point for a running effect.

    ``start`` builds the effect state once from the layout and palette,
    ``get_frame`` is called by the host scheduler for every frame and
    ``stop`` discards the state.
    """

    def __init__(self, layout: LayoutGraph, palette: Palette,
                 settings: Optional[EffectSettings] = None):
        self._layout = layout
        self._palette = palette
        self._settings = settings or EffectSettings()
        self._context: Optional[EffectContext] = None
        self._mode: Optional[Mode] = None

    @property
    def running(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[EffectContext]:
        return self._context

    @property
    def mode(self) -> Optional[Mode]:
        return self._mode

    @property
    def settings(self) -> EffectSettings:
        return self._settings

    def start(self) -> None:
        """Create the effect state. Raises ConfigurationError if it cannot run."""
        if self.running:
            return

        self._settings.validate()

        seed = self._settings.seed if self._settings.seed is not None else time.time_ns()
        context = EffectContext.create(self._layout, self._palette, self._settings, seed=seed)
        mode = ModeRegistry.create(self._settings.active_mode, context)
        if mode is None:
            raise ConfigurationError(f"Unknown effect mode: {self._settings.active_mode}")

        self._context = context
        self._mode = mode
        logger.info(f"Started {mode.MODE_NAME} on {len(self._layout)} panels "
                    f"with {len(self._palette)} palette colors")
        logger.debug(f"Random seed: {seed}")

    def stop(self) -> None:
        """Discard the effect state."""
        if not self.running:
            return
        logger.info(f"Stopped {self._mode.MODE_NAME}")
        self._context = None
        self._mode = None

    def set_mode_by_id(self, mode_id: str) -> bool:
        """Switch the active mode, keeping detector state. Returns True if found."""
        if self._context is None:
            if ModeRegistry.get(mode_id) is None:
                return False
            self._settings.active_mode = mode_id
            return True

        mode = ModeRegistry.create(mode_id, self._context)
        if mode is None:
            return False
        self._mode = mode
        self._settings.active_mode = mode_id
        logger.info(f"Switched to {mode.MODE_NAME}")
        return True

    def get_parameters(self) -> dict[str, Any]:
        """Tunable parameters of the running mode."""
        if self._mode is None:
            return {}
        return self._mode.get_parameters()

    def set_parameters(self, params: dict[str, Any]) -> None:
        """Retune the running mode without restarting it."""
        if self._mode is None:
            raise RuntimeError("FrameEmitter.set_parameters called before start()")
        self._mode.set_parameters(params)
        logger.info(f"Updated {self._mode.MODE_NAME} parameters: {', '.join(sorted(params))}")

    def get_frame(self, frame: SpectralFrame) -> FrameOutput:
        """Produce the frame for one invocation."""
        if self._mode is None:
            raise RuntimeError("FrameEmitter.get_frame called before start()")

        colors = self._mode.process(frame)
        trans_time = self._settings.transition_time
        records = [
            FrameRecord(
                panel_id=panel.panel_id,
                r=int(colors[i, 0]),
                g=int(colors[i, 1]),
                b=int(colors[i, 2]),
                trans_time=trans_time,
            )
            for i, panel in enumerate(self._layout)
        ]
        return FrameOutput(records=records)

    def emit_from(self, provider: FeatureProvider) -> FrameOutput:
        """Read the current features from a provider and produce a frame."""
        return self.get_frame(provider.read_frame())
