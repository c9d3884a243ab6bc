"""
Background subtitle worker.

Transcribes an uploaded media file with AssemblyAI, turns the transcript
into SRT, asks Claude to improve the phrasing and records the outcome in
the job's status file.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import anyio
import anyio.to_thread

from configs.config import get_config
from src.storage.job_repository import mark_job_completed, mark_job_failed
from src.transcription.assemblyai_client import AssemblyAIClient
from src.transcription.refiner import SubtitleRefiner
from src.transcription.srt_utils import convert_to_srt, write_srt

logger = logging.getLogger(__name__)
cfg = get_config()


@dataclass(frozen=True)
class SubtitleOutputs:
    raw_srt_path: str
    improved_srt_path: str
    refined: bool


def output_paths(media_path: str, output_dir: str):
    """Return the (raw, improved) SRT paths derived from the media file name."""
    stem = os.path.splitext(os.path.basename(media_path))[0]
    return (
        os.path.join(output_dir, f"{stem}_raw.srt"),
        os.path.join(output_dir, f"{stem}.srt"),
    )


def generate_subtitles(
    media_path: str,
    output_dir: str,
    transcriber: AssemblyAIClient,
    refiner: SubtitleRefiner,
) -> SubtitleOutputs:
    """
    Run the full pipeline for one media file.

    1. Transcribe with AssemblyAI
    2. Convert the transcript to SRT and save it as ``<name>_raw.srt``
    3. Improve the phrasing with Claude and save it as ``<name>.srt``

    Errors from steps 1–2 propagate.  Refinement never fails: on error the
    raw SRT is saved as the improved file.
    """
    logger.info("Processing file: %s", media_path)
    raw_path, improved_path = output_paths(media_path, output_dir)

    transcript = transcriber.transcribe(media_path)

    raw_srt = convert_to_srt(transcript)
    write_srt(raw_srt, raw_path)

    refinement = refiner.refine(raw_srt)
    write_srt(refinement.text, improved_path)

    return SubtitleOutputs(
        raw_srt_path=raw_path,
        improved_srt_path=improved_path,
        refined=refinement.refined,
    )


def process_job(
    job_id: str,
    media_path: str,
    original_filename: Optional[str] = None,
) -> None:
    """Background entry point: run the pipeline and record the job outcome."""
    logger.info("Starting subtitle job %s", job_id)
    try:
        outputs = generate_subtitles(
            media_path,
            cfg.OUTPUT_DIR,
            transcriber=AssemblyAIClient.from_config(cfg),
            refiner=SubtitleRefiner.from_config(cfg),
        )
        mark_job_completed(
            job_id,
            raw_filename=os.path.basename(outputs.raw_srt_path),
            improved_filename=os.path.basename(outputs.improved_srt_path),
            original_filename=original_filename,
            refined=outputs.refined,
        )
        logger.info(
            "Job %s completed successfully (refined=%s)", job_id, outputs.refined
        )
    except Exception as exc:
        logger.error("Job %s failed: %s", job_id, exc, exc_info=True)
        mark_job_failed(job_id, str(exc))
    finally:
        if cfg.DELETE_UPLOADS_AFTER_PROCESSING:
            _remove_upload(media_path)


def _remove_upload(media_path: str) -> None:
    try:
        os.remove(media_path)
        logger.debug("Removed uploaded file %s", media_path)
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", media_path, exc)


async def run_job_in_background(
    job_id: str,
    media_path: str,
    original_filename: Optional[str] = None,
) -> None:
    """
    Run ``process_job`` in a worker thread outside the shared request pool.

    Each job gets its own capacity limiter, so a job blocked in the
    transcript poll loop never holds a thread that sync endpoints and
    static files need.
    """
    await anyio.to_thread.run_sync(
        process_job,
        job_id,
        media_path,
        original_filename,
        limiter=anyio.CapacityLimiter(1),
    )
