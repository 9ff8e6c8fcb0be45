"""Configuration surface consumed by the STFT pipeline.

Every value has a default and is validated on construction, so a
``SpectrogramConfig`` that exists is always safe to hand to the pipeline.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Optional

from .errors import ConfigurationError

logger = logging.getLogger("spectrogram_dsp.config")

DEFAULT_FRAME_SIZE = 2048
DEFAULT_LOG_OFFSET = 3.0
DEFAULT_LOG_SCALE = 85.0
DEFAULT_UPSCALE_FACTOR = 2
SUPPORTED_SAMPLE_DTYPES = ("int16", "int32")


def _require_int(field: str, value: Any, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(field, f"must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigurationError(field, f"must be >= {minimum}, got {value}")
    return value


def _require_positive_float(field: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(field, f"must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number <= 0.0:
        raise ConfigurationError(field, f"must be a finite positive number, got {value!r}")
    return number


@dataclass(frozen=True)
class SpectrogramConfig:
    """STFT and rendering parameters.

    frame_size:      FFT length in samples (power of two recommended).
    hop_size:        Distance between frame starts; defaults to frame_size // 4.
    log_offset:      Added to log10(magnitude) before scaling.
    log_scale:       Multiplier applied after the offset.
    upscale_factor:  Vertical resampling factor for the final raster.
    sample_dtype:    Integer type the decoder produces.
    """

    frame_size: int = DEFAULT_FRAME_SIZE
    hop_size: Optional[int] = None
    log_offset: float = DEFAULT_LOG_OFFSET
    log_scale: float = DEFAULT_LOG_SCALE
    upscale_factor: int = DEFAULT_UPSCALE_FACTOR
    sample_dtype: str = "int16"

    def __post_init__(self) -> None:
        frame_size = _require_int("frame_size", self.frame_size, 2)
        if frame_size & (frame_size - 1):
            logger.warning("[CONFIG] frame_size=%d is not a power of two; FFT will be slower", frame_size)

        hop_size = self.hop_size if self.hop_size is not None else max(1, frame_size // 4)
        # frozen dataclass: normalised values go through object.__setattr__
        object.__setattr__(self, "hop_size", _require_int("hop_size", hop_size, 1))
        object.__setattr__(self, "log_offset", _require_positive_float("log_offset", self.log_offset))
        object.__setattr__(self, "log_scale", _require_positive_float("log_scale", self.log_scale))
        _require_int("upscale_factor", self.upscale_factor, 1)

        if self.sample_dtype not in SUPPORTED_SAMPLE_DTYPES:
            raise ConfigurationError(
                "sample_dtype",
                f"must be one of {', '.join(SUPPORTED_SAMPLE_DTYPES)}, got {self.sample_dtype!r}",
            )

    def replace(self, **overrides: Any) -> "SpectrogramConfig":
        """Return a revalidated copy with ``None`` overrides ignored.

        Changing ``frame_size`` without an explicit ``hop_size`` recomputes
        the default hop for the new frame size.
        """

        changes = {key: value for key, value in overrides.items() if value is not None}
        if "frame_size" in changes and "hop_size" not in changes:
            changes["hop_size"] = None
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls) -> "SpectrogramConfig":
        """Build a config from ``SPECTROGRAM_*`` environment variables."""

        def _get(name: str, cast):
            raw = os.getenv(f"SPECTROGRAM_{name}")
            if raw is None or raw.strip() == "":
                return None
            try:
                return cast(raw)
            except ValueError as exc:
                raise ConfigurationError(name.lower(), f"has unparsable value {raw!r}") from exc

        values = {
            "frame_size": _get("FRAME_SIZE", int),
            "hop_size": _get("HOP_SIZE", int),
            "log_offset": _get("LOG_OFFSET", float),
            "log_scale": _get("LOG_SCALE", float),
            "upscale_factor": _get("UPSCALE_FACTOR", int),
            "sample_dtype": _get("SAMPLE_DTYPE", str),
        }
        return cls(**{key: value for key, value in values.items() if value is not None})
