"""Downmix interleaved integer PCM into a normalised mono signal."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import SUPPORTED_SAMPLE_DTYPES
from ..errors import InvariantViolation


def max_amplitude_for(dtype: np.dtype) -> float:
  """Largest positive value the integer sample type can hold."""
  dtype = np.dtype(dtype)
  if not np.issubdtype(dtype, np.integer):
    raise InvariantViolation("normalizer", f"expected integer PCM samples, got {dtype}")
  return float(np.iinfo(dtype).max)


def downmix(samples: np.ndarray, channels: int, max_amplitude: Optional[float] = None) -> np.ndarray:
  """Average interleaved channels and scale into [-1, 1].

  Args:
    samples: 1-D interleaved integer samples (L, R, L, R, ... for stereo).
    channels: number of interleaved channels, >= 1.
    max_amplitude: divisor; defaults to the dtype's maximum (32767 for int16).

  A trailing partial frame (fewer than ``channels`` samples) is dropped.
  """
  if isinstance(channels, bool) or not isinstance(channels, (int, np.integer)) or channels < 1:
    raise InvariantViolation("normalizer", f"channel count must be a positive integer, got {channels!r}")

  samples = np.asarray(samples)
  if samples.ndim != 1:
    raise InvariantViolation("normalizer", f"expected interleaved 1-D samples, got shape {samples.shape}")

  if max_amplitude is None:
    max_amplitude = max_amplitude_for(samples.dtype)
  elif max_amplitude <= 0:
    raise InvariantViolation("normalizer", f"max_amplitude must be positive, got {max_amplitude}")

  usable = (samples.size // channels) * channels
  if usable == 0:
    return np.zeros(0, dtype=np.float64)

  frames = samples[:usable].astype(np.float64).reshape(-1, channels)
  mono = frames[:, 0] if channels == 1 else frames.mean(axis=1)
  # only the most negative integer (e.g. -32768) can land outside the range
  return np.clip(mono / float(max_amplitude), -1.0, 1.0)


@dataclass(frozen=True)
class PcmBuffer:
  """Interleaved integer PCM as delivered by the audio decoder.

  ``sample_rate`` is informational; none of the transform math uses it.
  """

  samples: np.ndarray
  channels: int
  sample_rate: int

  @classmethod
  def from_interleaved(cls, samples, channels: int, sample_rate: int, dtype="int16") -> "PcmBuffer":
    """Wrap in-memory integer samples, storing them as ``dtype``.

    Int16/int32 arrays are kept as they are. Other integer input (a plain
    Python list becomes int64) is converted to ``dtype`` and must fit its
    range. Float input is rejected rather than truncated.
    """
    if dtype not in SUPPORTED_SAMPLE_DTYPES:
      raise InvariantViolation("normalizer", f"sample dtype must be one of {', '.join(SUPPORTED_SAMPLE_DTYPES)}, got {dtype!r}")

    arr = np.asarray(samples).reshape(-1)
    if arr.size == 0:
      arr = arr.astype(dtype)
    elif arr.dtype.name in SUPPORTED_SAMPLE_DTYPES and isinstance(samples, np.ndarray):
      pass
    elif np.issubdtype(arr.dtype, np.integer):
      info = np.iinfo(dtype)
      if arr.min() < info.min or arr.max() > info.max:
        raise InvariantViolation("normalizer", f"samples exceed the {dtype} range [{info.min}, {info.max}]")
      arr = arr.astype(dtype)
    else:
      raise InvariantViolation("normalizer", f"expected integer PCM samples, got {arr.dtype}")
    return cls(samples=arr, channels=int(channels), sample_rate=int(sample_rate))

  @property
  def frame_count(self) -> int:
    return self.samples.size // self.channels if self.channels > 0 else 0

  @property
  def duration(self) -> float:
    return self.frame_count / float(self.sample_rate) if self.sample_rate > 0 else 0.0

  def to_mono(self, max_amplitude: Optional[float] = None) -> np.ndarray:
    return downmix(self.samples, self.channels, max_amplitude=max_amplitude)
