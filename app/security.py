"""
Security utilities for the FastAPI application.
Provides middlewares, validators, and helpers for hardening the server.
"""

import os
import re
import uuid
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from fastapi import HTTPException

from configs.config import get_config

logger = logging.getLogger(__name__)

cfg = get_config()

# --------------- Input Validation Patterns ---------------

JOB_ID_PATTERN = re.compile(r"^job_[a-z0-9]{8}$")

ALLOWED_MIME_MAJOR_TYPES = frozenset({"audio", "video"})


# --------------- Middlewares ---------------


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject standard security headers on every response."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=()"
        )
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "connect-src 'self'"
        )
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a unique X-Request-ID to every request / response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


# --------------- Validators ---------------


def validate_job_id(job_id: str) -> str:
    """Validate and return a safe job_id, or raise 400."""
    if not JOB_ID_PATTERN.match(job_id):
        logger.warning("Rejected invalid job_id: %r", job_id)
        raise HTTPException(status_code=400, detail="Invalid job ID format")
    return job_id


def validate_media_file(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Check an upload against the audio/video allow-list, or raise 400.

    The extension must be allow-listed; the MIME type must be audio/* or
    video/*, or name one of the allowed extensions (e.g. ``audio/x-flac``).
    Returns the lower-cased extension.
    """
    if not filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    ext = os.path.splitext(filename)[1].lower()
    mime = (content_type or "").lower()
    major_type = mime.split("/", 1)[0]
    mime_names_extension = any(
        allowed.lstrip(".") in mime for allowed in cfg.ALLOWED_EXTENSIONS
    )

    if ext not in cfg.ALLOWED_EXTENSIONS or not (
        major_type in ALLOWED_MIME_MAJOR_TYPES or mime_names_extension
    ):
        logger.warning(
            "Rejected upload %r with content type %r", filename, content_type
        )
        raise HTTPException(
            status_code=400,
            detail=(
                "Only audio and video files are allowed! "
                f"Allowed: {', '.join(sorted(cfg.ALLOWED_EXTENSIONS))}"
            ),
        )
    return ext


# --------------- Error Helpers ---------------


def safe_error_response(
    exc: Exception, context: str = "operation", status_code: int = 500
):
    """
    Log the real exception but return a sanitized message to the client.
    In development mode, the real error is included for debugging.
    """
    logger.error("Error in %s: %s", context, exc, exc_info=True)
    if cfg.ENVIRONMENT == "development":
        detail = f"[DEV] {context}: {exc}"
    else:
        detail = (
            f"An internal error occurred during {context}. "
            "Please try again later."
        )
    raise HTTPException(status_code=status_code, detail=detail)
