"""
File-backed status records for subtitle jobs.

Each job owns exactly one ``<job_id>.json`` file in the output directory.
A job without a file is still processing; once written, a record is
terminal and never replaced.  Files are written atomically, so a
concurrent reader sees either nothing or the complete record.
"""

import json
import logging
import os
from typing import Dict, Optional

from commons import atomic_write_text
from configs.config import get_config
from src.transcription.models import JobStatus

logger = logging.getLogger(__name__)

cfg = get_config()


def _status_path(job_id: str) -> str:
    return os.path.join(cfg.OUTPUT_DIR, f"{job_id}.json")


def artifact_url(filename: str) -> str:
    """Public download URL for a file stored in the output directory."""
    return f"{cfg.DOWNLOADS_URL_PREFIX.rstrip('/')}/{filename}"


# ── Read ─────────────────────────────────────────────────────────────────


def get_job_status(job_id: str) -> Dict:
    """Return the stored status record, or ``processing`` when none exists."""
    path = _status_path(job_id)
    if not os.path.exists(path):
        logger.debug("No status record for job %s yet", job_id)
        return {"status": JobStatus.PROCESSING.value}

    with open(path, "r", encoding="utf-8") as status_file:
        return json.load(status_file)


# ── Write ────────────────────────────────────────────────────────────────


def save_job_status(job_id: str, record: Dict) -> bool:
    """Persist a terminal record unless the job already has one."""
    path = _status_path(job_id)
    if os.path.exists(path):
        logger.warning(
            "Job %s already has a status record; ignoring %s",
            job_id, record.get("status"),
        )
        return False

    atomic_write_text(path, json.dumps(record))
    logger.info("Job %s status recorded as %s", job_id, record.get("status"))
    return True


def mark_job_completed(
    job_id: str,
    raw_filename: str,
    improved_filename: str,
    original_filename: Optional[str],
    refined: bool,
) -> bool:
    """Record a finished job and the download URLs of both SRT files."""
    return save_job_status(
        job_id,
        {
            "status": JobStatus.COMPLETED.value,
            "raw": artifact_url(raw_filename),
            "improved": artifact_url(improved_filename),
            "originalFileName": original_filename,
            "refined": refined,
        },
    )


def mark_job_failed(job_id: str, error: str) -> bool:
    """Record a failed job with its error message."""
    return save_job_status(
        job_id,
        {
            "status": JobStatus.ERROR.value,
            "error": error or "Unknown error occurred",
        },
    )
