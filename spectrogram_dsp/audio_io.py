"""Decode audio containers into interleaved integer PCM with soundfile."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import soundfile as sf

from .config import SUPPORTED_SAMPLE_DTYPES
from .errors import AudioDecodeError, ConfigurationError
from .stft.normalizer import PcmBuffer

logger = logging.getLogger("spectrogram_dsp.audio_io")


def read_pcm(source: Any, dtype: str = "int16") -> PcmBuffer:
    """Read ``source`` (path or file-like) as interleaved ``dtype`` samples.

    libsndfile converts whatever the container stores (float, 24-bit, ...)
    into the requested integer type, so the normaliser always sees
    full-scale integers.
    """

    if dtype not in SUPPORTED_SAMPLE_DTYPES:
        raise ConfigurationError("sample_dtype", f"must be one of {', '.join(SUPPORTED_SAMPLE_DTYPES)}, got {dtype!r}")

    try:
        data, sr = sf.read(source, dtype=dtype, always_2d=True)
    except (RuntimeError, TypeError, ValueError) as exc:
        raise AudioDecodeError(f"Failed to read audio: {exc}") from exc

    frames, channels = data.shape
    logger.info("[IO] decoded %d frames x %d channels at %d Hz (%s)", frames, channels, sr, dtype)

    # [frames, channels] row-major flattens to L, R, L, R, ...
    interleaved = np.ascontiguousarray(data).reshape(-1)
    return PcmBuffer(samples=interleaved, channels=int(channels), sample_rate=int(sr))
