"""End-to-end STFT spectrogram pipeline.

Normalizer -> Framer -> Spectral Analyzer -> Intensity Mapper -> Image
Synthesizer, in that order and in one synchronous pass. Empty input is a
reported outcome (``RenderReport.empty``), never an exception.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import SUPPORTED_SAMPLE_DTYPES, SpectrogramConfig
from ..errors import InvariantViolation
from .analyzer import Spectrogram, compute_spectrogram
from .modes import resolve_modes
from .normalizer import PcmBuffer, max_amplitude_for
from .synthesis import Raster, synthesize

logger = logging.getLogger("spectrogram_dsp.stft.pipeline")


@dataclass
class RenderReport:
  sample_rate: int
  channels: int
  sample_count: int
  frame_size: int
  hop_size: int
  frame_count: int = 0
  bin_count: int = 0
  modes: List[str] = field(default_factory=list)
  width: int = 0
  height: int = 0
  empty: bool = False
  reason: Optional[str] = None


def _max_amplitude(pcm: PcmBuffer) -> float:
  dtype = pcm.samples.dtype
  if dtype.name not in SUPPORTED_SAMPLE_DTYPES:
    raise InvariantViolation(
      "normalizer",
      f"PCM buffer holds {dtype} samples; expected one of {', '.join(SUPPORTED_SAMPLE_DTYPES)}",
    )
  return max_amplitude_for(dtype)


def analyze_pcm(pcm: PcmBuffer, config: Optional[SpectrogramConfig] = None) -> Tuple[Optional[Spectrogram], RenderReport]:
  """Run the analysis half of the pipeline and stop at the spectrogram."""
  config = config or SpectrogramConfig()
  report = RenderReport(
    sample_rate=pcm.sample_rate,
    channels=pcm.channels,
    sample_count=int(pcm.samples.size),
    frame_size=config.frame_size,
    hop_size=config.hop_size,
  )

  mono = pcm.to_mono(max_amplitude=_max_amplitude(pcm))
  if mono.size == 0:
    report.empty = True
    report.reason = "no audio samples"
    logger.warning("[STFT] input contains no audio samples; nothing to render")
    return None, report

  logger.info(
    "[STFT] analysing %d mono samples (channels=%d sr=%d frame=%d hop=%d)",
    mono.size,
    pcm.channels,
    pcm.sample_rate,
    config.frame_size,
    config.hop_size,
  )
  spectrogram = compute_spectrogram(mono, config.frame_size, config.hop_size, sample_rate=pcm.sample_rate)
  report.frame_count = spectrogram.frame_count
  report.bin_count = spectrogram.bin_count

  if spectrogram.is_empty:
    report.empty = True
    report.reason = "spectrogram has no frames"
    logger.warning("[STFT] spectrogram is empty; nothing to render")
    return None, report

  return spectrogram, report


def render_spectrogram(
  spectrogram: Spectrogram,
  modes: Optional[Iterable[str]] = None,
  config: Optional[SpectrogramConfig] = None,
) -> Dict[str, Raster]:
  """Render every requested mode from an already computed spectrogram."""
  config = config or SpectrogramConfig()
  rasters: Dict[str, Raster] = {}
  for mode in resolve_modes(modes, config):
    raster = synthesize(spectrogram, mode, upscale_factor=config.upscale_factor)
    if raster is not None:
      rasters[mode.name] = raster
  return rasters


def render_pcm(
  pcm: PcmBuffer,
  config: Optional[SpectrogramConfig] = None,
  modes: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Raster], RenderReport]:
  """Turn decoded PCM into one raster per requested render mode."""
  config = config or SpectrogramConfig()
  # fail on bad mode names before doing any transform work
  resolved = [mode.name for mode in resolve_modes(modes, config)]

  spectrogram, report = analyze_pcm(pcm, config)
  if spectrogram is None:
    return {}, report

  rasters = render_spectrogram(spectrogram, resolved, config)
  report.modes = list(rasters)
  if rasters:
    first = next(iter(rasters.values()))
    report.width = first.width
    report.height = first.height

  logger.info(
    "[RENDER] rendered modes=%s at %dx%d from %d frames",
    ",".join(report.modes),
    report.width,
    report.height,
    report.frame_count,
  )
  return rasters, report
