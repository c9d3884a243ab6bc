"""
Best-effort subtitle refinement through the Anthropic Messages API.

Claude is asked to re-break the raw SRT at natural pauses.  Refinement is
optional: any failure leaves the raw SRT untouched and is only logged.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

REFINEMENT_PROMPT = """I have an SRT subtitle file that needs improvement with better phrasing breaks. Please analyze this subtitle file and improve it by:

1. Ensuring subtitle breaks occur at natural pauses in speech
2. Keeping each subtitle to 1-2 lines maximum (about 42 characters per line)
3. Maintaining proper sentence structure and meaning
4. Avoiding breaking subtitles in the middle of a grammatical clause when possible
5. Preserving all original timing information
6. Returning only the improved SRT file with no explanations

Here's the SRT file:

{srt_content}"""


@dataclass(frozen=True)
class RefinementResult:
    """Refined SRT text, and whether it actually came from the model."""

    text: str
    refined: bool


class SubtitleRefiner:
    """Sends raw SRT text to Claude and returns the improved version."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-sonnet-20240229",
        max_tokens: int = 4000,
        api_url: str = "https://api.anthropic.com/v1/messages",
        anthropic_version: str = "2023-06-01",
        timeout: float = 120,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.api_url = api_url
        self.anthropic_version = anthropic_version
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, cfg) -> "SubtitleRefiner":
        return cls(
            api_key=cfg.CLAUDE_API_KEY,
            model=cfg.CLAUDE_MODEL,
            max_tokens=cfg.CLAUDE_MAX_TOKENS,
            api_url=cfg.ANTHROPIC_API_URL,
            anthropic_version=cfg.ANTHROPIC_VERSION,
            timeout=cfg.REQUEST_TIMEOUT_SECONDS,
        )

    def build_request(self, srt_content: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": REFINEMENT_PROMPT.format(srt_content=srt_content),
                }
            ],
        }

    def _call_model(self, srt_content: str) -> str:
        response = self.session.post(
            self.api_url,
            json=self.build_request(srt_content),
            headers={
                "content-type": "application/json",
                "x-api-key": self.api_key,
                "anthropic-version": self.anthropic_version,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        improved = response.json()["content"][0]["text"]
        if not isinstance(improved, str) or not improved.strip():
            raise ValueError("Claude returned an empty response")
        return improved

    def refine(self, srt_content: str) -> RefinementResult:
        """
        Return improved SRT text, or ``srt_content`` unchanged on any failure.

        The model output is returned verbatim; it is not checked for SRT
        well-formedness.
        """
        if not self.api_key:
            logger.warning("CLAUDE_API_KEY is not set; skipping subtitle refinement")
            return RefinementResult(text=srt_content, refined=False)
        if not srt_content.strip():
            logger.info("Empty SRT content; nothing to refine")
            return RefinementResult(text=srt_content, refined=False)

        logger.info("Sending SRT to Claude for improvement...")
        try:
            improved = self._call_model(srt_content)
        except Exception as exc:
            logger.error(
                "Error improving phrasing with Claude, keeping raw SRT: %s", exc
            )
            return RefinementResult(text=srt_content, refined=False)

        logger.info("Claude has improved the SRT file")
        return RefinementResult(text=improved, refined=True)
