"""Spectrogram DSP: STFT analysis of PCM audio rendered as raster images.

The ``stft`` subpackage holds the numeric pipeline; the modules next to it
wrap decoding (soundfile), image output (Pillow), optional S3 storage, the
FastAPI service and the command line.
"""
from .config import SpectrogramConfig
from .errors import AudioDecodeError, ConfigurationError, InvariantViolation, SpectrogramError
from .stft import PcmBuffer, Raster, RenderReport, Spectrogram, render_pcm

__all__ = [
    "SpectrogramConfig",
    "AudioDecodeError",
    "ConfigurationError",
    "InvariantViolation",
    "SpectrogramError",
    "PcmBuffer",
    "Raster",
    "RenderReport",
    "Spectrogram",
    "render_pcm",
]
