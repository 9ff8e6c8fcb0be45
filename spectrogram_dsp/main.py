from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

import logging
from fastapi import FastAPI, UploadFile, File, Form, HTTPException

from spectrogram_dsp.analysis import analyze_upload
from spectrogram_dsp.config import SpectrogramConfig
from spectrogram_dsp.engine import render_upload
from spectrogram_dsp.errors import AudioDecodeError, ConfigurationError, InvariantViolation
from spectrogram_dsp.models import AnalysisResponse, RenderResponse
from spectrogram_dsp.stft.modes import list_modes

logger = logging.getLogger("spectrogram_dsp")

app = FastAPI(title="Spectrogram DSP Service")


def _parse_modes(raw: Optional[str]) -> Optional[List[str]]:
    if raw is None or not raw.strip():
        return None
    return [part for part in (p.strip() for p in raw.split(",")) if part]


def _run(action: Callable[[], Dict[str, Any]], file: UploadFile) -> Dict[str, Any]:
    """Run a pipeline call and translate its failures into HTTP errors."""

    try:
        return action()
    except AudioDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=422,
            detail={"error": "INVALID_CONFIGURATION", "field": exc.field, "message": str(exc)},
        ) from exc
    except InvariantViolation as exc:
        logger.exception("[DSP] Invariant violation in stage=%s index=%s", exc.stage, exc.index)
        raise HTTPException(
            status_code=500,
            detail={"error": "DSP_INVARIANT_VIOLATION", "stage": exc.stage, "message": str(exc)},
        ) from exc
    except MemoryError as exc:  # pragma: no cover - defensive
        # long recordings keep signal and spectrogram fully in memory
        logger.exception("[DSP] MemoryError while rendering %s", file.filename)
        raise HTTPException(status_code=500, detail={"error": "DSP_MEMORY_ERROR", "message": str(exc)}) from exc
    except Exception as exc:
        logger.exception("[DSP] Rendering failed for %s: %s", file.filename, exc)
        raise HTTPException(status_code=500, detail={"error": "DSP_PROCESSING_FAILED", "message": str(exc)}) from exc
    finally:
        try:
            file.file.close()
        except Exception:  # pragma: no cover - best effort
            pass


def _config_from_form(**overrides: Any) -> SpectrogramConfig:
    try:
        return SpectrogramConfig.from_env().replace(**overrides)
    except ConfigurationError as exc:
        raise HTTPException(
            status_code=422,
            detail={"error": "INVALID_CONFIGURATION", "field": exc.field, "message": str(exc)},
        ) from exc


@app.get("/health")
async def health():
    """Static liveness payload; does not touch the DSP stack."""

    return {"status": "ok"}


@app.get("/modes")
async def modes():
    """Catalogue of render modes accepted by ``/render``."""

    return {"modes": [asdict(m) for m in list_modes()]}


@app.post("/analyze", response_model=AnalysisResponse)
def analyze(
    file: UploadFile = File(...),
    frame_size: Optional[int] = Form(None),
    hop_size: Optional[int] = Form(None),
):
    """Summarise the spectrogram of an uploaded recording without rendering it."""

    config = _config_from_form(frame_size=frame_size, hop_size=hop_size)
    return _run(lambda: analyze_upload(file, config), file)


@app.post("/render", response_model=RenderResponse)
def render(
    file: UploadFile = File(...),
    frame_size: Optional[int] = Form(None),
    hop_size: Optional[int] = Form(None),
    log_offset: Optional[float] = Form(None),
    log_scale: Optional[float] = Form(None),
    upscale_factor: Optional[int] = Form(None),
    modes: Optional[str] = Form(None),
):
    """Render spectrogram images for an uploaded recording.

    ``modes`` is a comma separated list (``rgb``, ``gray``); both are
    rendered when it is omitted. An upload with no samples returns
    ``status="empty"`` and no files.
    """

    config = _config_from_form(
        frame_size=frame_size,
        hop_size=hop_size,
        log_offset=log_offset,
        log_scale=log_scale,
        upscale_factor=upscale_factor,
    )
    requested = _parse_modes(modes)

    result = _run(lambda: render_upload(file, config, requested), file)
    report = result["report"]

    return {
        "status": result["status"],
        "output_files": result["output_files"],
        "modes": report.modes,
        "width": report.width,
        "height": report.height,
        "frame_count": report.frame_count,
        "frame_size": report.frame_size,
        "hop_size": report.hop_size,
        "sample_rate": report.sample_rate,
        "message": report.reason,
    }
