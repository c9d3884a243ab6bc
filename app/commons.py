"""
Shared utility functions and singletons used across multiple modules.
"""

import os
import random
import string
import tempfile

from slowapi import Limiter
from slowapi.util import get_remote_address

from configs.config import get_config

cfg = get_config()

FILE_MODE = 0o644

# ── Shared rate-limiter instance ─────────────────────────────────────────
# Created here (not in main.py) so that route modules can import it
# without a circular dependency.
limiter = Limiter(key_func=get_remote_address, enabled=cfg.RATE_LIMIT_ENABLED)


def generate_job_id() -> str:
    """Generate a short, URL-safe job ID (e.g., 'job_a1b2c3d4')."""
    chars = string.ascii_lowercase + string.digits
    random_part = "".join(random.choices(chars, k=8))
    return f"job_{random_part}"


def atomic_write_text(path: str, content: str) -> None:
    """
    Write ``content`` to ``path`` so readers never see a partial file.

    The text goes to a temporary file in the same directory first and is
    then renamed over the destination.
    """
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".part")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp_file:
            tmp_file.write(content)
        # mkstemp creates the file as 0600; artifacts must stay world-readable
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
