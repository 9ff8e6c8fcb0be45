"""Persist rendered rasters with Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .stft.synthesis import Raster

logger = logging.getLogger("spectrogram_dsp.image_io")

_SUFFIX_FORMATS = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".bmp": "BMP",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}


def to_image(raster: Raster) -> Image.Image:
    return Image.fromarray(raster.pixels)


def save_raster(raster: Raster, path: Union[str, Path], format: Optional[str] = None) -> Path:
    """Write ``raster`` to ``path``; the format follows the suffix, PNG otherwise."""

    path = Path(path)
    fmt = format or _SUFFIX_FORMATS.get(path.suffix.lower(), "PNG")
    path.parent.mkdir(parents=True, exist_ok=True)
    to_image(raster).save(path, format=fmt)
    logger.info("[IO] saved %s raster %dx%d to %s", raster.mode, raster.width, raster.height, path)
    return path


def encode_raster(raster: Raster, format: str = "PNG") -> bytes:
    buf = io.BytesIO()
    to_image(raster).save(buf, format=format)
    return buf.getvalue()
