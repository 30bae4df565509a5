"""Adaptive beat detection over FFT bins for colour-change triggers."""

import logging
from dataclasses import dataclass
from typing import Optional

from panelbeats.analysis.spectrum import SpectralFrame
from panelbeats.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Energy at or below which the sensitive bin-threshold path may fire
ENERGY_THRESHOLD = 50


@dataclass(frozen=True)
class TriggerPolicy:
    """Tuning for one trigger call site."""
    multiplier: float = 2.0
    energy_threshold: int = ENERGY_THRESHOLD
    skip_frames: int = 0


PATTERN_POLICY = TriggerPolicy(multiplier=2.0)
ONSET_POLICY = TriggerPolicy(multiplier=1.8)
RECOLOR_POLICY = TriggerPolicy(multiplier=1.8, skip_frames=1)


@dataclass
class DetectorState:
    """Detector memory carried from one frame to the next."""
    noise_floor: int = 0
    average: int = 0
    index_sum: int = 0
    sample_count: int = 0
    palette_index: int = 0


@dataclass(frozen=True)
class BinScan:
    """Result of scanning one frame's bins."""
    max_bin: int
    max_bin_index: int
    energy: int
    is_beat: bool
    is_onset: bool


class AdaptiveBeatDetector:
    """Detects beats and sensitive frequency changes from FFT bins.

    The detector keeps a decaying noise floor and a running average of the
    bins that set a new maximum during the scan. A frame triggers when the
    front end flags a beat (or onset), or when the strongest bin clears
    ``floor + multiplier * average`` while overall energy stays low.
    """

    def __init__(self, palette_size: int, state: Optional[DetectorState] = None):
        """
        Args:
            palette_size: Number of palette colours the dominant bin maps onto
            state: Existing state to continue from (fresh state if omitted)
        """
        if palette_size < 1:
            raise ConfigurationError("Beat detector needs at least one palette color")
        self._palette_size = palette_size
        self._state = state or DetectorState()

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def palette_size(self) -> int:
        return self._palette_size

    @property
    def palette_index(self) -> int:
        return self._state.palette_index

    def scan(self, frame: SpectralFrame) -> BinScan:
        """Update the floor, average and dominant-index accumulator from one frame."""
        state = self._state
        max_bin = 0
        max_bin_index = 0
        running = state.average
        contributing = 1

        for i, value in enumerate(frame.bins):
            if value <= max_bin:
                continue
            if state.noise_floor == 0 or value < state.noise_floor:
                state.noise_floor = value
            elif state.noise_floor > 0:
                state.noise_floor -= 1
            running += value
            contributing += 1
            max_bin = value
            max_bin_index = i

        state.average = running // contributing
        state.index_sum += max_bin_index
        state.sample_count += 1

        return BinScan(
            max_bin=max_bin,
            max_bin_index=max_bin_index,
            energy=frame.energy,
            is_beat=frame.is_beat,
            is_onset=frame.is_onset,
        )

    def exceeds_threshold(self, scan: BinScan, policy: TriggerPolicy) -> bool:
        """Whether the strongest bin stands out from the floor at low energy."""
        if scan.max_bin <= 0:
            return False
        threshold = self._state.noise_floor + policy.multiplier * self._state.average
        return scan.max_bin > threshold and scan.energy <= policy.energy_threshold

    def is_triggered(self, scan: BinScan, policy: TriggerPolicy, flag: bool) -> bool:
        """External flag or adaptive threshold, whichever fires first."""
        return flag or self.exceeds_threshold(scan, policy)

    def resolve_palette_index(self) -> int:
        """Average the dominant bin since the last trigger into a palette index."""
        state = self._state
        if state.sample_count > 0:
            mean_index = state.index_sum // state.sample_count
            state.palette_index = mean_index % self._palette_size
        state.index_sum = 0
        state.sample_count = 0
        return state.palette_index

    def process(self, frame: SpectralFrame, policy: TriggerPolicy = PATTERN_POLICY) -> tuple[bool, int]:
        """
        Scan a frame and test it against the beat flag and the policy threshold.

        Args:
            frame: Spectral features for this invocation
            policy: Threshold tuning for the calling effect

        Returns:
            (triggered, palette_index), the index only changes on trigger
        """
        scan = self.scan(frame)
        triggered = self.is_triggered(scan, policy, scan.is_beat)
        if triggered:
            index = self.resolve_palette_index()
            logger.debug(f"Beat trigger: max_bin={scan.max_bin} floor={self._state.noise_floor} "
                         f"avg={self._state.average} -> palette index {index}")
        return triggered, self._state.palette_index


class FrameGate:
    """Lets one frame through after every ``skip_frames`` skipped frames."""

    def __init__(self, skip_frames: int = 1):
        self._skip_frames = max(0, skip_frames)
        self._count = 0

    @property
    def skip_frames(self) -> int:
        return self._skip_frames

    def ready(self) -> bool:
        if self._count < self._skip_frames:
            self._count += 1
            return False
        self._count = 0
        return True
