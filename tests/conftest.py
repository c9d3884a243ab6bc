"""
Shared pytest setup.

Environment variables are set before any application module is imported,
because the configuration is read once and cached.
"""

import os
import tempfile

_TMP_ROOT = tempfile.mkdtemp(prefix="subtitle-generator-tests-")

os.environ["ENVIRONMENT"] = "production"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_ROOT, "uploads")
os.environ["OUTPUT_DIR"] = os.path.join(_TMP_ROOT, "downloads")
os.environ["LOG_DIR"] = os.path.join(_TMP_ROOT, "logs")
os.environ["ALLOWED_HOSTS"] = "testserver,localhost"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ASSEMBLY_API_KEY"] = "test-assembly-key"
os.environ["CLAUDE_API_KEY"] = "test-claude-key"
os.environ["POLL_INTERVAL_SECONDS"] = "0"

import pytest  # noqa: E402

from src.transcription.models import Word  # noqa: E402


@pytest.fixture
def make_words():
    """Build Word objects from bare strings, 100 ms apart."""

    def _make(*texts):
        return [
            Word(text=text, start=i * 100, end=i * 100 + 90)
            for i, text in enumerate(texts)
        ]

    return _make
