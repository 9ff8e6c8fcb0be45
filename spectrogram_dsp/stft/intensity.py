"""Magnitude -> 8-bit intensity mappings.

Two independent policies: a log-compressed one for the perceptual view and
a linear one for the raw-magnitude view. Both are vectorised and stateless,
so a caller can render either or both from one spectrogram.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np

from ..config import DEFAULT_LOG_OFFSET, DEFAULT_LOG_SCALE

INTENSITY_MAX = 255
# log10(0) is undefined; magnitudes are floored here before the log
LOG_EPSILON = 1e-12


def _to_uint8(values: np.ndarray) -> np.ndarray:
  values = np.nan_to_num(values, nan=0.0, posinf=float(INTENSITY_MAX), neginf=0.0)
  return np.clip(np.rint(values), 0, INTENSITY_MAX).astype(np.uint8)


def log_intensity(
  magnitudes,
  offset: float = DEFAULT_LOG_OFFSET,
  scale: float = DEFAULT_LOG_SCALE,
) -> np.ndarray:
  """clamp(round((log10(v) + offset) * scale), 0, 255)"""
  v = np.maximum(np.asarray(magnitudes, dtype=np.float64), LOG_EPSILON)
  return _to_uint8((np.log10(v) + offset) * scale)


def linear_intensity(magnitudes) -> np.ndarray:
  """clamp(round(v * 255), 0, 255); anything above 1.0 saturates."""
  v = np.asarray(magnitudes, dtype=np.float64)
  return _to_uint8(v * float(INTENSITY_MAX))


class IntensityMapper(Protocol):
  name: str

  def __call__(self, magnitudes: np.ndarray) -> np.ndarray:
    ...


@dataclass(frozen=True)
class LogIntensity:
  offset: float = DEFAULT_LOG_OFFSET
  scale: float = DEFAULT_LOG_SCALE
  name: str = "log"

  def __call__(self, magnitudes: np.ndarray) -> np.ndarray:
    return log_intensity(magnitudes, offset=self.offset, scale=self.scale)


@dataclass(frozen=True)
class LinearIntensity:
  name: str = "linear"

  def __call__(self, magnitudes: np.ndarray) -> np.ndarray:
    return linear_intensity(magnitudes)
