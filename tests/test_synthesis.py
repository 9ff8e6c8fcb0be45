import numpy as np
import pytest

from spectrogram_dsp.errors import InvariantViolation
from spectrogram_dsp.stft.analyzer import Spectrogram
from spectrogram_dsp.stft.intensity import LinearIntensity, LogIntensity
from spectrogram_dsp.stft.modes import RENDER_MODES
from spectrogram_dsp.stft.synthesis import layout_raster, synthesize, upscale


def _single_frame(values) -> Spectrogram:
    values = np.asarray(values, dtype=float)
    return Spectrogram(values[np.newaxis, :], frame_size=2 * values.size, hop_size=1)


def test_low_frequencies_sit_at_the_bottom_row():
    spectro = _single_frame([1.0, 2.0, 3.0, 4.0])
    mapper = LogIntensity()
    raster = layout_raster(spectro, mapper)
    assert raster.shape == (4, 1)
    assert raster[0, 0] == mapper(np.array([4.0]))[0]
    assert raster[3, 0] == mapper(np.array([1.0]))[0]


def test_inversion_is_visible_with_distinct_intensities():
    spectro = _single_frame([0.1, 0.2, 0.3, 0.4])
    raster = layout_raster(spectro, LinearIntensity())
    np.testing.assert_array_equal(raster[:, 0], [102, 76, 51, 26])


def test_time_runs_left_to_right():
    mags = np.array([[0.0, 0.0], [1.0, 1.0], [0.5, 0.5]])
    spectro = Spectrogram(mags, frame_size=4, hop_size=2)
    raster = layout_raster(spectro, LinearIntensity())
    assert raster.shape == (2, 3)
    np.testing.assert_array_equal(raster[1], [0, 255, 128])


def test_three_channel_layout_replicates_intensity():
    spectro = _single_frame([0.1, 0.9])
    raster = layout_raster(spectro, LinearIntensity(), channels=3)
    assert raster.shape == (2, 1, 3)
    assert (raster[..., 0] == raster[..., 1]).all()
    assert (raster[..., 1] == raster[..., 2]).all()


def test_unsupported_channel_count_is_rejected():
    with pytest.raises(InvariantViolation):
        layout_raster(_single_frame([1.0, 2.0]), LinearIntensity(), channels=2)


@pytest.mark.parametrize("shape", [(16, 5), (16, 5, 3)])
def test_upscale_doubles_height_and_keeps_width(shape):
    pixels = np.full(shape, 200, dtype=np.uint8)
    out = upscale(pixels, 2)
    assert out.shape[:2] == (32, 5)
    assert out.dtype == np.uint8
    # a flat field stays flat under Lanczos
    assert (out == 200).all()


def test_upscale_factor_one_is_identity():
    pixels = np.arange(12, dtype=np.uint8).reshape(3, 4)
    assert upscale(pixels, 1) is pixels


def test_synthesize_builds_raster_for_mode():
    mags = np.random.default_rng(3).uniform(0, 1, (7, 8))
    spectro = Spectrogram(mags, frame_size=16, hop_size=4)
    raster = synthesize(spectro, RENDER_MODES["rgb"], upscale_factor=2)
    assert raster.mode == "rgb"
    assert (raster.width, raster.height, raster.channels) == (7, 16, 3)


def test_empty_spectrogram_produces_no_image():
    spectro = Spectrogram(np.zeros((0, 4)), frame_size=8, hop_size=2)
    assert synthesize(spectro, RENDER_MODES["gray"]) is None
