"""Per-frame FFT magnitudes and the spectrogram buffer that holds them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from scipy import fft as sp_fft

from ..errors import InvariantViolation
from .framer import frame_count, iter_frames

logger = logging.getLogger("spectrogram_dsp.stft.analyzer")


@dataclass
class Spectrogram:
  """Magnitudes laid out as [frame, bin]; row order is time order.

  Bin 0 is DC and bin ``frame_size // 2 - 1`` sits just below Nyquist.
  """

  magnitudes: np.ndarray
  frame_size: int
  hop_size: int
  sample_rate: Optional[int] = None

  def __post_init__(self) -> None:
    if self.magnitudes.ndim != 2:
      raise InvariantViolation("spectrogram", f"expected a [frames, bins] buffer, got shape {self.magnitudes.shape}")
    if self.magnitudes.shape[1] != self.frame_size // 2:
      raise InvariantViolation(
        "spectrogram",
        f"bin count {self.magnitudes.shape[1]} does not match frame_size {self.frame_size}",
      )

  @property
  def frame_count(self) -> int:
    return int(self.magnitudes.shape[0])

  @property
  def bin_count(self) -> int:
    return int(self.magnitudes.shape[1])

  @property
  def is_empty(self) -> bool:
    return self.frame_count == 0

  @classmethod
  def from_spectra(
    cls,
    spectra: Sequence[np.ndarray],
    frame_size: int,
    hop_size: int,
    sample_rate: Optional[int] = None,
  ) -> "Spectrogram":
    """Stack individually computed spectra, rejecting ragged input."""
    bins = frame_size // 2
    buffer = np.zeros((len(spectra), bins), dtype=np.float64)
    for index, spectrum in enumerate(spectra):
      spectrum = np.asarray(spectrum, dtype=np.float64)
      if spectrum.shape != (bins,):
        raise InvariantViolation(
          "spectrogram",
          f"spectrum has {spectrum.shape[0] if spectrum.ndim else 0} bins, expected {bins}",
          index=index,
        )
      buffer[index] = spectrum
    return cls(buffer, frame_size=frame_size, hop_size=hop_size, sample_rate=sample_rate)


def analyze_frame(frame: np.ndarray, frame_size: int, index: Optional[int] = None) -> np.ndarray:
  """Magnitudes of the first ``frame_size // 2`` bins of a forward FFT.

  The frame is promoted to complex with zero imaginary parts. Magnitudes
  are raw transform magnitudes; nothing is divided by ``frame_size``.
  """
  frame = np.asarray(frame)
  if frame.ndim != 1 or frame.shape[0] != frame_size:
    raise InvariantViolation(
      "analyzer",
      f"frame length {frame.shape[0] if frame.ndim else 0} != frame_size {frame_size}",
      index=index,
    )
  spectrum = sp_fft.fft(frame.astype(np.complex128))
  return np.abs(spectrum[: frame_size // 2])


def compute_spectrogram(
  signal: np.ndarray,
  frame_size: int,
  hop_size: int,
  sample_rate: Optional[int] = None,
) -> Spectrogram:
  """Run framer and analyzer over the whole signal into a pre-sized buffer."""
  signal = np.asarray(signal, dtype=np.float64)
  n_frames = frame_count(signal.shape[0], hop_size)
  magnitudes = np.zeros((n_frames, frame_size // 2), dtype=np.float64)

  for index, frame in enumerate(iter_frames(signal, frame_size, hop_size)):
    magnitudes[index] = analyze_frame(frame, frame_size, index=index)
    logger.debug("[STFT] processed frame %d of %d", index + 1, n_frames)

  logger.info("[STFT] spectrogram ready: frames=%d bins=%d", n_frames, frame_size // 2)
  return Spectrogram(magnitudes, frame_size=frame_size, hop_size=hop_size, sample_rate=sample_rate)
