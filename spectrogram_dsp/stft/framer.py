"""Slice a mono signal into fixed-size, overlapping analysis frames.

Frames use an implicit rectangular window. The final frame is zero-padded
when the signal runs out, which leaks some energy across bins; that is
accepted because no tapering window is applied anywhere in the pipeline.
"""
from __future__ import annotations

import logging
from typing import Iterator

import numpy as np

from ..errors import InvariantViolation

logger = logging.getLogger("spectrogram_dsp.stft.framer")


def _check_params(frame_size: int, hop_size: int) -> None:
  if frame_size < 1:
    raise InvariantViolation("framer", f"frame_size must be positive, got {frame_size}")
  if hop_size < 1:
    raise InvariantViolation("framer", f"hop_size must be positive, got {hop_size}")


def frame_count(signal_length: int, hop_size: int) -> int:
  """Number of frames for a signal: ceil(signal_length / hop_size)."""
  if hop_size < 1:
    raise InvariantViolation("framer", f"hop_size must be positive, got {hop_size}")
  return -(-int(signal_length) // int(hop_size))


def extract_frame(signal: np.ndarray, index: int, frame_size: int, hop_size: int) -> np.ndarray:
  """Copy frame ``index`` out of ``signal``, zero-filling any shortfall."""
  start = index * hop_size
  chunk = signal[start : start + frame_size]
  frame = np.zeros(frame_size, dtype=np.float64)
  frame[: chunk.shape[0]] = chunk
  return frame


def iter_frames(signal: np.ndarray, frame_size: int, hop_size: int) -> Iterator[np.ndarray]:
  """Lazily yield every frame of ``signal`` in time order."""
  _check_params(frame_size, hop_size)
  signal = np.asarray(signal, dtype=np.float64)
  for index in range(frame_count(signal.shape[0], hop_size)):
    yield extract_frame(signal, index, frame_size, hop_size)


def frame_signal(signal: np.ndarray, frame_size: int, hop_size: int) -> np.ndarray:
  """Return all frames as one pre-sized [frame_count, frame_size] buffer."""
  _check_params(frame_size, hop_size)
  signal = np.asarray(signal, dtype=np.float64)
  n_frames = frame_count(signal.shape[0], hop_size)
  frames = np.empty((n_frames, frame_size), dtype=np.float64)
  for index in range(n_frames):
    frames[index] = extract_frame(signal, index, frame_size, hop_size)

  logger.debug("[STFT] framed %d samples into %d frames (size=%d hop=%d)", signal.shape[0], n_frames, frame_size, hop_size)
  return frames
