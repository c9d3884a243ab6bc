"""
Development / local environment configuration overrides.

Only values that DIFFER from production need to be declared here.
The base config.py merges these on top of the production defaults.
"""

import os

# FastAPI docs are enabled in development
DOCS_ENABLED = True

# Keep uploads around locally (unless asked otherwise) so failed jobs can
# be replayed with cli.py
DELETE_UPLOADS_AFTER_PROCESSING = os.getenv(
    "DELETE_UPLOADS_AFTER_PROCESSING", "false"
).strip().lower() in ("1", "true", "yes", "on")

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8000",
]

ALLOWED_HOSTS = [
    "localhost",
    "127.0.0.1",
    "testserver",
]
