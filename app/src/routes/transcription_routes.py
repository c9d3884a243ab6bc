"""
Subtitle job API routes.

Endpoints:
    POST   /upload              — upload media & start a subtitle job
    GET    /status/{job_id}     — poll job status

Finished SRT files are served as static files under /downloads.
"""

import logging
import os
from typing import Optional

from fastapi import (
    APIRouter,
    BackgroundTasks,
    File,
    HTTPException,
    Request,
    UploadFile,
)

from commons import generate_job_id, limiter
from configs.config import get_config
from security import safe_error_response, validate_job_id, validate_media_file
from src.storage.job_repository import get_job_status
from src.transcription.models import JobStatus
from src.transcription.worker import run_job_in_background

logger = logging.getLogger(__name__)

cfg = get_config()

router = APIRouter(tags=["subtitles"])


# ── Upload & Create ──────────────────────────────────────────────────────


@router.post("/upload", status_code=202)
@limiter.limit(cfg.UPLOAD_RATE_LIMIT)
async def upload_media(
    request: Request,
    background_tasks: BackgroundTasks,
    media_file: Optional[UploadFile] = File(default=None, alias=cfg.UPLOAD_FIELD_NAME),
) -> dict:
    """Store an uploaded media file and generate its subtitles in the background."""
    if media_file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    ext = validate_media_file(media_file.filename, media_file.content_type)

    job_id = generate_job_id()
    media_path = os.path.join(cfg.UPLOAD_DIR, f"{job_id}{ext}")
    logger.info("Creating new job %s for file: %s", job_id, media_file.filename)

    try:
        total_bytes = 0
        with open(media_path, "wb") as stored_file:
            while True:
                chunk = await media_file.read(1024 * 1024)
                if not chunk:
                    break
                total_bytes += len(chunk)
                if total_bytes > cfg.MAX_UPLOAD_SIZE:
                    stored_file.close()
                    os.remove(media_path)
                    raise HTTPException(
                        status_code=413,
                        detail=(
                            f"File too large. Maximum allowed size is "
                            f"{cfg.MAX_UPLOAD_SIZE // (1024 ** 2)} MB."
                        ),
                    )
                stored_file.write(chunk)
        logger.debug("File saved to %s (%d bytes)", media_path, total_bytes)

        background_tasks.add_task(
            run_job_in_background, job_id, media_path, media_file.filename
        )
        logger.info("Background task queued for job %s", job_id)

        return {
            "message": "File uploaded successfully. Processing started.",
            "fileId": job_id,
            "status": JobStatus.PROCESSING.value,
        }

    except HTTPException:
        raise
    except Exception as exc:
        safe_error_response(exc, context="upload")


# ── Status ───────────────────────────────────────────────────────────────


@router.get("/status/{job_id}")
@limiter.limit(cfg.STATUS_RATE_LIMIT)
def get_status(request: Request, job_id: str) -> dict:
    """Return the job's status record, or ``processing`` while none exists."""
    validate_job_id(job_id)
    logger.debug("Status check for job %s", job_id)
    try:
        return get_job_status(job_id)
    except Exception as exc:
        safe_error_response(exc, context="status")
