import numpy as np
import pytest

from panelbeats.analysis.spectrum import StaticFeatureProvider
from panelbeats.config.settings import EffectSettings
from panelbeats.errors import ConfigurationError
from panelbeats.modes import FrameEmitter, ModeRegistry
from panelbeats.modes.diffusion_mode import SoftLightningMode
from panelbeats.modes.pattern_mode import PatternedBeatsMode
from panelbeats.palette import WHITE

from conftest import peak_frame, silent_frame


def test_registry_lists_both_effects():
    modes = dict(ModeRegistry.list_modes())
    assert modes["patterned_beats"] == "Patterned Beats"
    assert modes["soft_lightning"] == "Soft Lightning"
    assert ModeRegistry.get("strobe") is None


def test_get_frame_before_start(grid_layout, rgb_palette):
    emitter = FrameEmitter(grid_layout, rgb_palette)
    with pytest.raises(RuntimeError):
        emitter.get_frame(silent_frame())


def test_unknown_mode_fails_start(grid_layout, rgb_palette):
    emitter = FrameEmitter(grid_layout, rgb_palette, EffectSettings(active_mode="strobe"))
    with pytest.raises(ConfigurationError):
        emitter.start()
    assert not emitter.running


def test_start_and_stop(grid_layout, rgb_palette, settings):
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()
    assert emitter.running
    assert isinstance(emitter.mode, PatternedBeatsMode)
    emitter.stop()
    assert not emitter.running
    assert emitter.mode is None
    emitter.stop()


def test_frame_has_one_record_per_panel(grid_layout, rgb_palette, settings):
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()
    output = emitter.get_frame(peak_frame(3, is_beat=True))

    assert output.n_frames == len(grid_layout)
    assert [r.panel_id for r in output.records] == grid_layout.panel_ids
    assert all(r.trans_time == 3 for r in output.records)
    assert output.sleep_time is None


def test_patterned_frame_colors(grid_layout, rgb_palette, settings):
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()
    for index in range(8):
        output = emitter.get_frame(peak_frame(index, is_beat=index % 2 == 0))
        active = emitter.context.active_color
        assert {r.rgb for r in output.records} <= {active, WHITE}


def test_soft_lightning_starts_dark(grid_layout, rgb_palette):
    settings = EffectSettings(active_mode="soft_lightning", seed=1)
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()
    output = emitter.get_frame(silent_frame())
    assert all(r.rgb == (0, 0, 0) for r in output.records)


def test_transition_time_from_settings(grid_layout, rgb_palette):
    emitter = FrameEmitter(grid_layout, rgb_palette, EffectSettings(transition_time=7, seed=2))
    emitter.start()
    assert all(r.trans_time == 7 for r in emitter.get_frame(silent_frame()).records)


def test_same_seed_same_frames(grid_layout, rgb_palette):
    frames = [peak_frame(i % 32, is_beat=i % 3 == 0, is_onset=i % 4 == 0) for i in range(30)]
    outputs = []
    for _ in range(2):
        emitter = FrameEmitter(grid_layout, rgb_palette, EffectSettings(active_mode="soft_lightning", seed=99))
        emitter.start()
        outputs.append([[r.rgb for r in emitter.get_frame(f).records] for f in frames])
    assert outputs[0] == outputs[1]


def test_set_mode_by_id_keeps_detector(grid_layout, rgb_palette, settings):
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()
    emitter.get_frame(peak_frame(5, is_beat=True))
    detector = emitter.context.detector

    assert emitter.set_mode_by_id("soft_lightning")
    assert isinstance(emitter.mode, SoftLightningMode)
    assert emitter.context.detector is detector
    assert emitter.settings.active_mode == "soft_lightning"
    assert not emitter.set_mode_by_id("strobe")


def test_set_mode_before_start(grid_layout, rgb_palette, settings):
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    assert emitter.set_mode_by_id("soft_lightning")
    assert not emitter.set_mode_by_id("strobe")
    emitter.start()
    assert isinstance(emitter.mode, SoftLightningMode)


def test_emit_from_provider(grid_layout, rgb_palette, settings):
    provider = StaticFeatureProvider()
    emitter = FrameEmitter(grid_layout, rgb_palette, settings)
    emitter.start()

    provider.update([0] * 7 + [90] + [0] * 24, energy=500, is_beat=True)
    output = emitter.emit_from(provider)
    assert output.n_frames == len(grid_layout)
    assert emitter.context.detector.palette_index == 7 % 3


def test_colors_stay_in_byte_range(grid_layout, rgb_palette):
    rng = np.random.default_rng(8)
    emitter = FrameEmitter(grid_layout, rgb_palette, EffectSettings(active_mode="soft_lightning", seed=8))
    emitter.start()
    provider = StaticFeatureProvider()
    for _ in range(200):
        provider.update(rng.integers(0, 256, size=32).tolist(), energy=int(rng.integers(0, 100)),
                        is_beat=bool(rng.random() < 0.3), is_onset=bool(rng.random() < 0.3))
        for record in emitter.emit_from(provider).records:
            assert all(0 <= c <= 255 for c in record.rgb)


def test_parameters_reach_the_running_mode(grid_layout, rgb_palette):
    emitter = FrameEmitter(grid_layout, rgb_palette, EffectSettings(active_mode="soft_lightning", seed=3))
    assert emitter.get_parameters() == {}
    with pytest.raises(RuntimeError):
        emitter.set_parameters({"blend_scale": 2.0})

    emitter.start()
    assert emitter.get_parameters()["blend_scale"] == 1.5
    emitter.set_parameters({"blend_scale": 2.0, "onset_multiplier": 2.2})
    assert emitter.mode.renderer.blend_scale == 2.0
    assert emitter.get_parameters()["onset_multiplier"] == 2.2
    assert emitter.settings.detector.onset_multiplier == 2.2
