"""
AssemblyAI speech-to-text client.

Uploads a local media file, submits a transcription request for it and
polls until the transcript is finished.  All three calls go through one
``requests.Session`` carrying the API key.
"""

import logging
import time
from typing import Callable, Optional

import requests
from pydantic import ValidationError

from src.transcription.exceptions import (
    TranscriptionServiceError,
    TranscriptionTimeoutError,
    TranscriptionTransportError,
)
from src.transcription.models import TranscriptionResult

logger = logging.getLogger(__name__)

# Feature flags sent with every transcription request
TRANSCRIPTION_FEATURES = {
    "speaker_labels": True,
    "punctuate": True,
    "format_text": True,
    "dual_channel": False,
    "word_boost": [],
    "boost_param": "default",
    "auto_highlights": True,
    "entity_detection": True,
    "disfluencies": False,
    "sentiment_analysis": False,
    "iab_categories": False,
    "content_safety": False,
}


class AssemblyAIClient:
    """
    Client for the AssemblyAI v2 REST API.

    Polling stops after ``max_poll_attempts`` status checks spaced
    ``poll_interval`` seconds apart.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.assemblyai.com/v2",
        language_code: str = "en",
        poll_interval: float = 3.0,
        max_poll_attempts: int = 1200,
        timeout: float = 120,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not api_key:
            raise ValueError(
                "ASSEMBLY_API_KEY environment variable is not set. "
                "Cannot connect to AssemblyAI."
            )
        self.base_url = base_url.rstrip("/")
        self.language_code = language_code
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.timeout = timeout
        self._sleep = sleep
        self.session = session or requests.Session()
        self.session.headers.update({"authorization": api_key})

    @classmethod
    def from_config(cls, cfg) -> "AssemblyAIClient":
        return cls(
            api_key=cfg.ASSEMBLY_API_KEY,
            base_url=cfg.ASSEMBLYAI_BASE_URL,
            language_code=cfg.TRANSCRIPT_LANGUAGE,
            poll_interval=cfg.POLL_INTERVAL_SECONDS,
            max_poll_attempts=cfg.POLL_MAX_ATTEMPTS,
            timeout=cfg.REQUEST_TIMEOUT_SECONDS,
        )

    # ── HTTP helper ──────────────────────────────────────────────────────

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise TranscriptionTransportError(
                f"AssemblyAI request {method} {path} failed: {exc}"
            ) from exc
        except ValueError as exc:
            raise TranscriptionTransportError(
                f"AssemblyAI returned an invalid JSON body for {method} {path}"
            ) from exc

    @staticmethod
    def _require(payload: dict, key: str, context: str):
        value = payload.get(key)
        if not value:
            raise TranscriptionTransportError(
                f"AssemblyAI {context} response is missing '{key}'"
            )
        return value

    # ── API calls ────────────────────────────────────────────────────────

    def upload_file(self, file_path: str) -> str:
        """Upload raw media bytes and return the service-side upload URL."""
        logger.info("Uploading %s to AssemblyAI", file_path)
        with open(file_path, "rb") as media_file:
            payload = self._request(
                "POST",
                "/upload",
                data=media_file,
                headers={"content-type": "application/octet-stream"},
            )
        upload_url = self._require(payload, "upload_url", "upload")
        logger.info("File uploaded to AssemblyAI")
        return upload_url

    def submit_transcription(self, audio_url: str) -> str:
        """Request a transcript for ``audio_url`` and return its id."""
        body = {
            "audio_url": audio_url,
            **TRANSCRIPTION_FEATURES,
            "language_code": self.language_code,
        }
        payload = self._request("POST", "/transcript", json=body)
        transcript_id = self._require(payload, "id", "submission")
        logger.info("Transcription job submitted, ID: %s", transcript_id)
        return transcript_id

    def wait_for_completion(self, transcript_id: str) -> TranscriptionResult:
        """Poll the transcript until it completes, fails or runs out of attempts."""
        for attempt in range(1, self.max_poll_attempts + 1):
            payload = self._request("GET", f"/transcript/{transcript_id}")
            status = payload.get("status")

            if status == "completed":
                logger.info("Transcription %s completed", transcript_id)
                try:
                    return TranscriptionResult.model_validate(payload)
                except ValidationError as exc:
                    raise TranscriptionServiceError(
                        f"Transcription {transcript_id} returned an invalid transcript: {exc}"
                    ) from exc

            if status == "error":
                raise TranscriptionServiceError(
                    f"Transcription error: {payload.get('error', 'unknown error')}"
                )

            logger.debug(
                "Transcription %s status: %s (attempt %d/%d), waiting...",
                transcript_id, status, attempt, self.max_poll_attempts,
            )
            if attempt < self.max_poll_attempts:
                self._sleep(self.poll_interval)

        raise TranscriptionTimeoutError(
            f"Transcription {transcript_id} not completed after "
            f"{self.max_poll_attempts} status checks"
        )

    def transcribe(self, file_path: str) -> TranscriptionResult:
        """Upload, submit and wait for a transcript of ``file_path``."""
        upload_url = self.upload_file(file_path)
        transcript_id = self.submit_transcription(upload_url)
        return self.wait_for_completion(transcript_id)
