import numpy as np
import pytest
import soundfile as sf

from spectrogram_dsp.stft.normalizer import PcmBuffer

TONE_SR = 8000
TONE_HZ = 1000.0


def _tone(seconds: float = 0.25, channels: int = 2) -> np.ndarray:
    t = np.arange(int(TONE_SR * seconds)) / TONE_SR
    mono = (0.5 * 32767 * np.sin(2 * np.pi * TONE_HZ * t)).astype(np.int16)
    return np.stack([mono] * channels, axis=1)


@pytest.fixture
def tone_pcm() -> PcmBuffer:
    data = _tone()
    return PcmBuffer(samples=data.reshape(-1), channels=2, sample_rate=TONE_SR)


@pytest.fixture
def tone_wav(tmp_path):
    path = tmp_path / "tone.wav"
    sf.write(str(path), _tone(), TONE_SR, subtype="PCM_16")
    return path


@pytest.fixture
def empty_wav(tmp_path):
    path = tmp_path / "empty.wav"
    sf.write(str(path), np.zeros((0, 1), dtype=np.int16), TONE_SR, subtype="PCM_16")
    return path


@pytest.fixture(autouse=True)
def _no_ambient_config(monkeypatch):
    for name in (
        "SPECTROGRAM_FRAME_SIZE",
        "SPECTROGRAM_HOP_SIZE",
        "SPECTROGRAM_LOG_OFFSET",
        "SPECTROGRAM_LOG_SCALE",
        "SPECTROGRAM_UPSCALE_FACTOR",
        "SPECTROGRAM_SAMPLE_DTYPE",
        "SPECTROGRAM_S3_BUCKET",
        "S3_BUCKET",
        "SPECTROGRAM_S3_REGION",
        "SPECTROGRAM_S3_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
