"""Lay spectrogram intensities out as an image and resample it.

Time runs left to right. Frequency is inverted: bin 0 (DC) lands on the
bottom row and the highest analysed bin on row 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image

from ..errors import InvariantViolation
from .analyzer import Spectrogram
from .intensity import IntensityMapper
from .modes import RenderMode

logger = logging.getLogger("spectrogram_dsp.stft.synthesis")


@dataclass
class Raster:
  """uint8 pixels, [height, width] or [height, width, 3]."""

  pixels: np.ndarray
  mode: str

  @property
  def height(self) -> int:
    return int(self.pixels.shape[0])

  @property
  def width(self) -> int:
    return int(self.pixels.shape[1])

  @property
  def channels(self) -> int:
    return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])


def layout_raster(spectrogram: Spectrogram, mapper: IntensityMapper, channels: int = 1) -> np.ndarray:
  """Map magnitudes through ``mapper`` into a [bins, frames(, 3)] image."""
  if channels not in (1, 3):
    raise InvariantViolation("synthesis", f"unsupported channel count {channels}")

  intensities = np.asarray(mapper(spectrogram.magnitudes), dtype=np.uint8)
  if intensities.shape != spectrogram.magnitudes.shape:
    raise InvariantViolation(
      "synthesis",
      f"mapper returned shape {intensities.shape}, expected {spectrogram.magnitudes.shape}",
    )

  # [frame, bin] -> [bin, frame], then flip so bin 0 is the bottom row
  gray = np.ascontiguousarray(np.flipud(intensities.T))
  if channels == 1:
    return gray
  return np.repeat(gray[:, :, np.newaxis], channels, axis=2)


def upscale(pixels: np.ndarray, factor: int) -> np.ndarray:
  """Lanczos-resample to ``factor`` times the height; width is unchanged."""
  if factor < 1:
    raise InvariantViolation("synthesis", f"upscale factor must be positive, got {factor}")
  if factor == 1:
    return pixels

  height, width = pixels.shape[:2]
  image = Image.fromarray(pixels)
  resized = image.resize((width, height * factor), Image.Resampling.LANCZOS)
  return np.array(resized, dtype=np.uint8)


def synthesize(spectrogram: Spectrogram, mode: RenderMode, upscale_factor: int = 2) -> Optional[Raster]:
  """Render one mode of ``spectrogram``; returns None for an empty spectrogram."""
  if spectrogram.is_empty:
    logger.warning("[RENDER] spectrogram has no frames; skipping %s image", mode.name)
    return None

  pixels = layout_raster(spectrogram, mode.mapper, channels=mode.channels)
  pixels = upscale(pixels, upscale_factor)

  logger.info(
    "[RENDER] mode=%s size=%dx%d channels=%d",
    mode.name,
    pixels.shape[1],
    pixels.shape[0],
    mode.channels,
  )
  return Raster(pixels=pixels, mode=mode.name)
