"""Spectral frames and the interface of the audio feature front end."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

FFT_BINS = 32
MAX_BIN_VALUE = 255
MAX_ENERGY = 65535


@dataclass(frozen=True)
class SpectralFrame:
    """Audio features for a single invocation.

    Bins are 8-bit magnitudes, energy is a 16-bit scalar. Use ``coerce`` to
    build a frame from untrusted provider output.
    """
    bins: tuple[int, ...]
    energy: int = 0
    is_beat: bool = False
    is_onset: bool = False

    @classmethod
    def coerce(cls, bins: Iterable[int], energy: int = 0,
               is_beat: bool = False, is_onset: bool = False) -> "SpectralFrame":
        """Clamp and pad provider data into a well-formed frame.

        Missing bins read as 0 and extra bins are dropped, so a malformed
        frame degrades the output instead of stopping the effect.
        """
        values = [max(0, min(MAX_BIN_VALUE, int(b))) for b in list(bins)[:FFT_BINS]]
        values.extend([0] * (FFT_BINS - len(values)))
        return cls(
            bins=tuple(values),
            energy=max(0, min(MAX_ENERGY, int(energy))),
            is_beat=bool(is_beat),
            is_onset=bool(is_onset),
        )


class FeatureProvider(ABC):
    """Source of per-invocation audio features (FFT bins, energy, beat/onset)."""

    @abstractmethod
    def get_fft_bins(self) -> Sequence[int]:
        pass

    @abstractmethod
    def get_energy(self) -> int:
        pass

    @abstractmethod
    def get_is_beat(self) -> bool:
        pass

    @abstractmethod
    def get_is_onset(self) -> bool:
        pass

    def read_frame(self) -> SpectralFrame:
        """Snapshot the current features as a SpectralFrame."""
        return SpectralFrame.coerce(
            self.get_fft_bins(),
            energy=self.get_energy(),
            is_beat=self.get_is_beat(),
            is_onset=self.get_is_onset(),
        )


class StaticFeatureProvider(FeatureProvider):
    """Provider holding the last features pushed into it.

    Useful for replaying recorded analysis or driving effects from a host
    that computes its own FFT.
    """

    def __init__(self, bins: Optional[Sequence[int]] = None, energy: int = 0,
                 is_beat: bool = False, is_onset: bool = False):
        self._bins: list[int] = list(bins) if bins is not None else [0] * FFT_BINS
        self._energy = energy
        self._is_beat = is_beat
        self._is_onset = is_onset

    def update(self, bins: Sequence[int], energy: int = 0,
               is_beat: bool = False, is_onset: bool = False) -> None:
        self._bins = list(bins)
        self._energy = energy
        self._is_beat = is_beat
        self._is_onset = is_onset

    def get_fft_bins(self) -> Sequence[int]:
        return self._bins

    def get_energy(self) -> int:
        return self._energy

    def get_is_beat(self) -> bool:
        return self._is_beat

    def get_is_onset(self) -> bool:
        return self._is_onset
