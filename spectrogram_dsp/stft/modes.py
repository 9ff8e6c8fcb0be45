"""Render modes: an intensity mapper paired with a channel count.

The pipeline renders every requested mode through one generic synthesis
call, so the grayscale and RGB views share a single code path.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..config import SpectrogramConfig
from ..errors import ConfigurationError
from .intensity import IntensityMapper, LinearIntensity, LogIntensity


@dataclass(frozen=True)
class RenderMode:
  name: str
  mapper: IntensityMapper
  channels: int
  description: str = ""

  def __post_init__(self) -> None:
    if self.channels not in (1, 3):
      raise ConfigurationError("channels", f"must be 1 or 3, got {self.channels}")


@dataclass(frozen=True)
class ModeInfo:
  name: str
  mapper: str
  channels: int
  description: str


RENDER_MODES: Dict[str, RenderMode] = {
  "rgb": RenderMode(
    name="rgb",
    mapper=LogIntensity(),
    channels=3,
    description="Log-compressed magnitudes for visual clarity",
  ),
  "gray": RenderMode(
    name="gray",
    mapper=LinearIntensity(),
    channels=1,
    description="Linear raw-magnitude grayscale view; magnitudes above 1.0 saturate",
  ),
}

DEFAULT_MODES = ("rgb", "gray")


def resolve_modes(names: Optional[Iterable[str]], config: Optional[SpectrogramConfig] = None) -> List[RenderMode]:
  """Look up modes by name, applying the configured log constants."""
  config = config or SpectrogramConfig()
  requested = list(DEFAULT_MODES if names is None else names)
  if not requested:
    raise ConfigurationError("modes", "must name at least one render mode")

  resolved: List[RenderMode] = []
  seen = set()
  for raw in requested:
    key = raw.strip().lower()
    if key in seen:
      continue
    base = RENDER_MODES.get(key)
    if base is None:
      raise ConfigurationError("modes", f"unknown render mode {raw!r} (known: {', '.join(RENDER_MODES)})")
    mapper = base.mapper
    if isinstance(mapper, LogIntensity):
      mapper = LogIntensity(offset=config.log_offset, scale=config.log_scale)
    resolved.append(RenderMode(name=base.name, mapper=mapper, channels=base.channels, description=base.description))
    seen.add(key)
  return resolved


def list_modes() -> List[ModeInfo]:
  return [
    ModeInfo(name=mode.name, mapper=mode.mapper.name, channels=mode.channels, description=mode.description)
    for mode in RENDER_MODES.values()
  ]
