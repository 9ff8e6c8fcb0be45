"""Pydantic response models for the HTTP service."""

from typing import Dict, List, Optional

from pydantic import BaseModel


class AnalysisResponse(BaseModel):
    status: str
    sample_rate: int
    channels: int
    duration: float
    frame_size: int
    hop_size: int
    frame_count: int
    bin_count: int
    bin_resolution_hz: float = 0.0
    peak_magnitude: float = 0.0
    peak_frequency_hz: float = 0.0
    mean_magnitude: float = 0.0
    message: Optional[str] = None


class RenderResponse(BaseModel):
    status: str
    output_files: Dict[str, str]
    modes: List[str]
    width: int
    height: int
    frame_count: int
    frame_size: int
    hop_size: int
    sample_rate: int
    message: Optional[str] = None
