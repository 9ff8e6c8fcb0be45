import logging
import tempfile
from typing import Any, Dict, Iterable, Optional

from spectrogram_dsp.audio_io import read_pcm
from spectrogram_dsp.config import SpectrogramConfig
from spectrogram_dsp.image_io import save_raster
from spectrogram_dsp.storage import upload_file_to_s3
from spectrogram_dsp.stft.pipeline import render_pcm

logger = logging.getLogger("spectrogram_dsp.engine")


def render_upload(
    file,
    config: Optional[SpectrogramConfig] = None,
    modes: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Render an uploaded recording and store one PNG per render mode.

    - Reads the uploaded file via soundfile as integer PCM
    - Runs the STFT pipeline for the requested modes
    - Writes each raster to a temp PNG and hands it to storage

    Returns a dict with ``status`` ("rendered" or "empty"), the
    ``output_files`` map (mode -> path or URL) and the pipeline report.
    """

    config = config or SpectrogramConfig()
    pcm = read_pcm(file.file, dtype=config.sample_dtype)
    rasters, report = render_pcm(pcm, config, modes)

    if report.empty:
        logger.info("[RENDER] nothing to render: %s", report.reason)
        return {"status": "empty", "output_files": {}, "report": report}

    output_files: Dict[str, str] = {}
    for name, raster in rasters.items():
        out_file = tempfile.NamedTemporaryFile(delete=False, suffix=f"_{name}.png")
        out_file.close()
        save_raster(raster, out_file.name)
        output_files[name] = upload_file_to_s3(out_file.name)

    return {"status": "rendered", "output_files": output_files, "report": report}
