"""STFT spectrogram engine.

Building blocks for turning integer PCM into spectrogram rasters:
downmix, framing, FFT magnitudes, intensity mapping and image synthesis.
"""
from .analyzer import Spectrogram, analyze_frame, compute_spectrogram
from .framer import frame_count, frame_signal, iter_frames
from .intensity import LinearIntensity, LogIntensity, linear_intensity, log_intensity
from .modes import RENDER_MODES, RenderMode, list_modes, resolve_modes
from .normalizer import PcmBuffer, downmix
from .pipeline import RenderReport, analyze_pcm, render_pcm, render_spectrogram
from .synthesis import Raster, layout_raster, synthesize, upscale

__all__ = [
  "Spectrogram",
  "analyze_frame",
  "compute_spectrogram",
  "frame_count",
  "frame_signal",
  "iter_frames",
  "LinearIntensity",
  "LogIntensity",
  "linear_intensity",
  "log_intensity",
  "RENDER_MODES",
  "RenderMode",
  "list_modes",
  "resolve_modes",
  "PcmBuffer",
  "downmix",
  "RenderReport",
  "analyze_pcm",
  "render_pcm",
  "render_spectrogram",
  "Raster",
  "layout_raster",
  "synthesize",
  "upscale",
]
