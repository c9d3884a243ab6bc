"""
Centralized configuration loader.

Reads the ENVIRONMENT env-var and merges the correct environment module
(config_prod or config_local) into a single settings namespace.

Usage:
    from configs.config import get_config
    cfg = get_config()
    print(cfg.OUTPUT_DIR)
"""

import os
import importlib
import logging
from types import SimpleNamespace

logger = logging.getLogger(__name__)

# ── Environment detection ────────────────────────────────────────────────
ENVIRONMENT = os.getenv("ENVIRONMENT", "production")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ── Shared constants (environment-independent) ───────────────────────────

# File storage
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "tmp/uploads")
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "public/downloads")
DOWNLOADS_URL_PREFIX = "/downloads"
DELETE_UPLOADS_AFTER_PROCESSING = _env_flag("DELETE_UPLOADS_AFTER_PROCESSING", "true")

# Upload policy
MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50 MiB
UPLOAD_FIELD_NAME = "mediaFile"

ALLOWED_EXTENSIONS = frozenset({
    ".mp3", ".mp4", ".wav", ".avi", ".mov",
    ".m4a", ".webm", ".ogg", ".aac", ".flac",
})

# AssemblyAI transcription
ASSEMBLY_API_KEY = os.getenv("ASSEMBLY_API_KEY", "")
ASSEMBLYAI_BASE_URL = "https://api.assemblyai.com/v2"
TRANSCRIPT_LANGUAGE = os.getenv("TRANSCRIPT_LANGUAGE", "en")
POLL_INTERVAL_SECONDS = float(os.getenv("POLL_INTERVAL_SECONDS", "3"))
POLL_MAX_ATTEMPTS = int(os.getenv("POLL_MAX_ATTEMPTS", "1200"))  # 1 hour at 3 s
REQUEST_TIMEOUT_SECONDS = 120

# Claude refinement
CLAUDE_API_KEY = os.getenv("CLAUDE_API_KEY", "")
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-3-sonnet-20240229")
CLAUDE_MAX_TOKENS = 4000

# Rate limiting
RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", "true")
UPLOAD_RATE_LIMIT = "10/hour"
STATUS_RATE_LIMIT = "120/minute"
HOME_RATE_LIMIT = "30/minute"

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "Origin",
    "X-Requested-With",
    "X-Request-ID",
]

# Logging
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FILE_APP = "app.log"
LOG_FILE_ERRORS = "errors.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 5


# ── Config loader ────────────────────────────────────────────────────────

_config_cache = None


def get_config() -> SimpleNamespace:
    """
    Return a merged configuration namespace.

    Environment-specific values from config_local or config_prod
    override the shared defaults defined above.
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    # Start with all module-level constants
    base = {
        key: value
        for key, value in globals().items()
        if key.isupper() and not key.startswith("_")
    }

    # Overlay environment-specific settings
    env_module_name = (
        "configs.config_local" if ENVIRONMENT == "development"
        else "configs.config_prod"
    )
    try:
        env_module = importlib.import_module(env_module_name)
        for key in dir(env_module):
            if key.isupper():
                base[key] = getattr(env_module, key)
        logger.info("Loaded configuration from %s", env_module_name)
    except ImportError:
        logger.warning(
            "Environment config '%s' not found; using shared defaults.",
            env_module_name,
        )

    _config_cache = SimpleNamespace(**base)
    return _config_cache
