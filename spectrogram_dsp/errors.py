"""Exception types shared by the spectrogram pipeline and its service layer.

Empty input is deliberately absent here: a recording with no samples is a
reported outcome of the pipeline (see ``RenderReport.empty``), not a failure.
"""

from __future__ import annotations

from typing import Optional


class SpectrogramError(Exception):
    """Base class for every error raised by ``spectrogram_dsp``."""


class InvariantViolation(SpectrogramError):
    """A contract between two pipeline stages was broken.

    ``stage`` names the component that detected the problem and ``index``
    (when known) points at the offending frame or spectrum.
    """

    def __init__(self, stage: str, message: str, index: Optional[int] = None) -> None:
        self.stage = stage
        self.index = index
        location = f"{stage}" if index is None else f"{stage}[{index}]"
        super().__init__(f"{location}: {message}")


class ConfigurationError(InvariantViolation):
    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__("config", f"{field} {message}")


class AudioDecodeError(SpectrogramError):
    """The audio container could not be decoded into integer PCM."""
