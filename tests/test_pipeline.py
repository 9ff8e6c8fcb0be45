import numpy as np
import pytest

from spectrogram_dsp.config import SpectrogramConfig
from spectrogram_dsp.errors import ConfigurationError, InvariantViolation
from spectrogram_dsp.stft.modes import list_modes, resolve_modes
from spectrogram_dsp.stft.normalizer import PcmBuffer
from spectrogram_dsp.stft.pipeline import analyze_pcm, render_pcm


def test_renders_both_default_views(tone_pcm):
    config = SpectrogramConfig(frame_size=256)
    rasters, report = render_pcm(tone_pcm, config)

    frames = int(np.ceil(tone_pcm.frame_count / 64))
    assert set(rasters) == {"rgb", "gray"}
    assert rasters["rgb"].pixels.shape == (256, frames, 3)
    assert rasters["gray"].pixels.shape == (256, frames)
    assert report.frame_count == frames
    assert report.bin_count == 128
    assert (report.width, report.height) == (frames, 256)
    assert not report.empty


def test_single_mode_request(tone_pcm):
    rasters, report = render_pcm(tone_pcm, SpectrogramConfig(frame_size=128, upscale_factor=1), ["gray"])
    assert list(rasters) == ["gray"]
    assert report.modes == ["gray"]
    assert report.height == 64


def test_rendering_is_deterministic(tone_pcm):
    config = SpectrogramConfig(frame_size=256, hop_size=100)
    first, _ = render_pcm(tone_pcm, config)
    second, _ = render_pcm(tone_pcm, config)
    for name in first:
        assert first[name].pixels.tobytes() == second[name].pixels.tobytes()


def test_tone_energy_lands_on_expected_row(tone_pcm):
    # 1 kHz at 8 kHz with 256-point frames falls exactly on bin 32
    spectrogram, _ = analyze_pcm(tone_pcm, SpectrogramConfig(frame_size=256))
    assert int(np.argmax(spectrogram.magnitudes[0])) == 32

    rasters, _ = render_pcm(tone_pcm, SpectrogramConfig(frame_size=256, upscale_factor=1), ["rgb"])
    column = rasters["rgb"].pixels[:, 0, 0]
    assert column[128 - 1 - 32] == 255


def test_empty_input_is_reported_not_raised():
    pcm = PcmBuffer.from_interleaved([], channels=2, sample_rate=44100)
    rasters, report = render_pcm(pcm)
    assert rasters == {}
    assert report.empty
    assert report.reason == "no audio samples"


def test_unknown_mode_fails_before_any_work(tone_pcm):
    with pytest.raises(ConfigurationError):
        render_pcm(tone_pcm, modes=["sepia"])


def test_mode_resolution_applies_configured_log_constants():
    (mode,) = resolve_modes(["RGB"], SpectrogramConfig(log_offset=2.0, log_scale=50.0))
    assert mode.mapper.offset == 2.0
    assert mode.mapper.scale == 50.0


def test_empty_mode_list_is_rejected():
    with pytest.raises(ConfigurationError):
        resolve_modes([])


def test_mode_catalogue():
    names = {info.name: info for info in list_modes()}
    assert names["rgb"].channels == 3
    assert names["gray"].mapper == "linear"


def test_in_memory_list_input_is_normalised_to_full_scale():
    pcm = PcmBuffer.from_interleaved([32767, 32767] * 8, channels=2, sample_rate=8000)
    spectrogram, report = analyze_pcm(pcm, SpectrogramConfig(frame_size=8, hop_size=8))
    assert report.frame_count == 1
    assert spectrogram.magnitudes[0, 0] == pytest.approx(8.0)


def test_list_input_renders_same_image_as_int16_array():
    values = [0, 16000, 32767, -32768, 1200, -900] * 40
    config = SpectrogramConfig(frame_size=32)
    from_list, _ = render_pcm(PcmBuffer.from_interleaved(values, channels=1, sample_rate=8000), config)
    from_array, _ = render_pcm(
        PcmBuffer(samples=np.array(values, dtype=np.int16), channels=1, sample_rate=8000),
        config,
    )
    for name in from_array:
        np.testing.assert_array_equal(from_list[name].pixels, from_array[name].pixels)


def test_buffer_with_unsupported_dtype_is_an_invariant_violation():
    pcm = PcmBuffer(samples=np.array([1, 2, 3, 4], dtype=np.int64), channels=1, sample_rate=8000)
    with pytest.raises(InvariantViolation) as info:
        analyze_pcm(pcm)
    assert info.value.stage == "normalizer"
