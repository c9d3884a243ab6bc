"""
Tests for the upload / status HTTP endpoints.
"""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from configs.config import get_config
from main import app
from src.storage.job_repository import mark_job_completed
from src.transcription.exceptions import TranscriptionServiceError

client = TestClient(app)
cfg = get_config()


def _upload(name="talk.mp3", content=b"fake audio", content_type="audio/mpeg"):
    return client.post("/upload", files={"mediaFile": (name, content, content_type)})


@patch("src.routes.transcription_routes.run_job_in_background")
def test_upload_accepts_media_and_queues_job(mock_run_job):
    response = _upload()

    assert response.status_code == 202
    result = response.json()
    assert result["status"] == "processing"
    assert result["message"] == "File uploaded successfully. Processing started."
    job_id = result["fileId"]
    assert job_id.startswith("job_")

    stored_path = os.path.join(cfg.UPLOAD_DIR, f"{job_id}.mp3")
    mock_run_job.assert_called_once_with(job_id, stored_path, "talk.mp3")
    with open(stored_path, "rb") as stored:
        assert stored.read() == b"fake audio"


@patch("src.routes.transcription_routes.run_job_in_background")
def test_upload_accepts_video_mime(mock_run_job):
    assert _upload("clip.MOV", content_type="video/quicktime").status_code == 202


@pytest.mark.parametrize(
    "name, content_type",
    [
        ("notes.txt", "text/plain"),
        ("song.mp3", "text/plain"),
        ("movie.mkv", "video/x-matroska"),
    ],
)
@patch("src.routes.transcription_routes.run_job_in_background")
def test_upload_rejects_non_media(mock_run_job, name, content_type):
    response = _upload(name, content_type=content_type)

    assert response.status_code == 400
    assert "Only audio and video files are allowed" in response.json()["detail"]
    mock_run_job.assert_not_called()


def test_upload_without_file_is_rejected():
    response = client.post("/upload", data={"other": "x"})

    assert response.status_code == 400
    assert response.json()["detail"] == "No file uploaded"


@patch("src.routes.transcription_routes.run_job_in_background")
def test_upload_too_large_is_rejected(mock_run_job, monkeypatch):
    monkeypatch.setattr(cfg, "MAX_UPLOAD_SIZE", 10)
    before = set(os.listdir(cfg.UPLOAD_DIR))

    response = _upload(content=b"x" * 11)

    assert response.status_code == 413
    assert set(os.listdir(cfg.UPLOAD_DIR)) == before
    mock_run_job.assert_not_called()


def test_status_of_unknown_job_is_processing():
    response = client.get("/status/job_zzzz9999")

    assert response.status_code == 200
    assert response.json() == {"status": "processing"}


def test_status_rejects_malformed_job_id():
    assert client.get("/status/..%2Fsecrets").status_code in (400, 404)
    assert client.get("/status/not-a-job").status_code == 400


def test_completed_status_and_download():
    job_id = "job_done0001"
    with open(os.path.join(cfg.OUTPUT_DIR, f"{job_id}.srt"), "w", encoding="utf-8") as srt:
        srt.write("1\n00:00:00,000 --> 00:00:01,000\nHi\n\n")
    mark_job_completed(job_id, f"{job_id}_raw.srt", f"{job_id}.srt", "hi.wav", refined=True)

    status = client.get(f"/status/{job_id}").json()
    assert status["status"] == "completed"
    assert status["improved"] == f"/downloads/{job_id}.srt"

    download = client.get(status["improved"])
    assert download.status_code == 200
    assert "Hi" in download.text


def test_transcription_failure_is_reported_through_status():
    with patch("src.transcription.worker.AssemblyAIClient") as client_cls:
        client_cls.from_config.return_value.transcribe.side_effect = (
            TranscriptionServiceError("Transcription error: file does not appear to contain audio")
        )
        response = _upload("silence.wav", content_type="audio/wav")

    job_id = response.json()["fileId"]
    status = client.get(f"/status/{job_id}").json()

    assert status == {
        "status": "error",
        "error": "Transcription error: file does not appear to contain audio",
    }
    assert not os.path.exists(os.path.join(cfg.OUTPUT_DIR, f"{job_id}_raw.srt"))
    assert not os.path.exists(os.path.join(cfg.OUTPUT_DIR, f"{job_id}.srt"))


def test_home_page_serves_upload_form():
    response = client.get("/")

    assert response.status_code == 200
    assert "mediaFile" in response.text
