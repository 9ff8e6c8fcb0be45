import inspect
import os

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from spectrogram_dsp.main import app


@pytest.fixture
def client():
    return TestClient(app)


def _upload(path):
    return {"file": (path.name, path.read_bytes(), "audio/wav")}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_modes_catalogue(client):
    modes = {m["name"]: m for m in client.get("/modes").json()["modes"]}
    assert modes["rgb"]["channels"] == 3
    assert modes["gray"]["channels"] == 1


def test_render_writes_one_png_per_mode(client, tone_wav):
    response = client.post("/render", files=_upload(tone_wav), data={"frame_size": "256"})
    assert response.status_code == 200
    body = response.json()

    assert body["status"] == "rendered"
    assert set(body["output_files"]) == {"rgb", "gray"}
    assert body["height"] == 256
    assert body["width"] == body["frame_count"] == 32

    try:
        with Image.open(body["output_files"]["rgb"]) as img:
            assert img.mode == "RGB"
            assert img.size == (32, 256)
        with Image.open(body["output_files"]["gray"]) as img:
            assert img.mode == "L"
    finally:
        for path in body["output_files"].values():
            os.unlink(path)


def test_render_selected_mode(client, tone_wav):
    response = client.post(
        "/render",
        files=_upload(tone_wav),
        data={"frame_size": "128", "modes": "gray", "upscale_factor": "1"},
    )
    body = response.json()
    assert body["modes"] == ["gray"]
    assert body["height"] == 64
    os.unlink(body["output_files"]["gray"])


def test_render_empty_audio_reports_empty(client, empty_wav):
    response = client.post("/render", files=_upload(empty_wav))
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "empty"
    assert body["output_files"] == {}


def test_render_rejects_unknown_mode(client, tone_wav):
    response = client.post("/render", files=_upload(tone_wav), data={"modes": "sepia"})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "modes"


def test_render_rejects_bad_frame_size(client, tone_wav):
    response = client.post("/render", files=_upload(tone_wav), data={"frame_size": "0"})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "frame_size"


def test_undecodable_upload_is_a_client_error(client):
    response = client.post("/render", files={"file": ("x.wav", b"not audio at all", "audio/wav")})
    assert response.status_code == 400


def test_analyze_reports_tone_frequency(client, tone_wav):
    response = client.post("/analyze", files=_upload(tone_wav), data={"frame_size": "256"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "analyzed"
    assert body["sample_rate"] == 8000
    assert body["channels"] == 2
    assert body["bin_count"] == 128
    assert body["bin_resolution_hz"] == pytest.approx(31.25)
    assert body["peak_frequency_hz"] == pytest.approx(1000.0)
    assert body["duration"] == pytest.approx(0.25)


def test_analyze_empty_audio(client, empty_wav):
    body = client.post("/analyze", files=_upload(empty_wav)).json()
    assert body["status"] == "empty"
    assert body["frame_count"] == 0


def test_pipeline_endpoints_run_in_threadpool():
    from spectrogram_dsp.main import analyze, render

    assert not inspect.iscoroutinefunction(analyze)
    assert not inspect.iscoroutinefunction(render)
