import logging
from typing import Any, Dict, Optional

import librosa
import numpy as np

from spectrogram_dsp.audio_io import read_pcm
from spectrogram_dsp.config import SpectrogramConfig
from spectrogram_dsp.stft.analyzer import Spectrogram
from spectrogram_dsp.stft.normalizer import PcmBuffer
from spectrogram_dsp.stft.pipeline import analyze_pcm

logger = logging.getLogger("spectrogram_dsp.analysis")


def summarize_spectrogram(spectrogram: Spectrogram) -> Dict[str, float]:
    """Scalar descriptors of a computed spectrogram.

    ``peak_frequency_hz`` is the centre of the loudest bin across all
    frames; it stays 0.0 when the sample rate is unknown.
    """

    mags = spectrogram.magnitudes
    sr = spectrogram.sample_rate or 0

    flat_index = int(np.argmax(mags))
    _, peak_bin = np.unravel_index(flat_index, mags.shape)

    if sr > 0:
        freqs = librosa.fft_frequencies(sr=sr, n_fft=spectrogram.frame_size)[: spectrogram.bin_count]
        peak_hz = float(freqs[peak_bin])
        resolution = float(sr) / float(spectrogram.frame_size)
    else:
        peak_hz = 0.0
        resolution = 0.0

    return {
        "bin_resolution_hz": resolution,
        "peak_magnitude": float(mags.flat[flat_index]),
        "peak_frequency_hz": peak_hz,
        "mean_magnitude": float(mags.mean()),
    }


def analyze_pcm_summary(pcm: PcmBuffer, config: Optional[SpectrogramConfig] = None) -> Dict[str, Any]:
    config = config or SpectrogramConfig()
    spectrogram, report = analyze_pcm(pcm, config)

    result: Dict[str, Any] = {
        "status": "empty" if report.empty else "analyzed",
        "sample_rate": pcm.sample_rate,
        "channels": pcm.channels,
        "duration": 0.0,
        "frame_size": report.frame_size,
        "hop_size": report.hop_size,
        "frame_count": report.frame_count,
        "bin_count": report.bin_count,
        "message": report.reason,
    }

    if spectrogram is None:
        return result

    mono = pcm.to_mono()
    if pcm.sample_rate > 0:
        result["duration"] = float(librosa.get_duration(y=mono, sr=pcm.sample_rate))
    result.update(summarize_spectrogram(spectrogram))

    logger.debug(
        "[ANALYSIS] frames=%d bins=%d peak=%.3f @ %.1f Hz",
        report.frame_count,
        report.bin_count,
        result["peak_magnitude"],
        result["peak_frequency_hz"],
    )
    return result


def analyze_upload(file, config: Optional[SpectrogramConfig] = None) -> Dict[str, Any]:
    """Decode an uploaded recording and summarise its spectrogram."""

    config = config or SpectrogramConfig()
    pcm = read_pcm(file.file, dtype=config.sample_dtype)
    return analyze_pcm_summary(pcm, config)
