from panelbeats.analysis.spectrum import (
    FFT_BINS,
    SpectralFrame,
    StaticFeatureProvider,
)


def test_coerce_pads_missing_bins():
    frame = SpectralFrame.coerce([1, 2, 3], energy=10)
    assert len(frame.bins) == FFT_BINS
    assert frame.bins[:3] == (1, 2, 3)
    assert frame.bins[3:] == (0,) * (FFT_BINS - 3)


def test_coerce_drops_extra_bins():
    frame = SpectralFrame.coerce(range(40))
    assert len(frame.bins) == FFT_BINS
    assert frame.bins[-1] == FFT_BINS - 1


def test_coerce_clamps_values():
    frame = SpectralFrame.coerce([-4, 300] + [0] * 30, energy=70000)
    assert frame.bins[0] == 0
    assert frame.bins[1] == 255
    assert frame.energy == 65535

    frame = SpectralFrame.coerce([], energy=-1, is_beat=1, is_onset=0)
    assert frame.energy == 0
    assert frame.is_beat is True
    assert frame.is_onset is False


def test_static_provider_reads_latest_update():
    provider = StaticFeatureProvider()
    assert provider.read_frame() == SpectralFrame(bins=(0,) * FFT_BINS)

    provider.update([9] * FFT_BINS, energy=42, is_beat=True, is_onset=True)
    frame = provider.read_frame()
    assert frame.bins == (9,) * FFT_BINS
    assert frame.energy == 42
    assert frame.is_beat and frame.is_onset
