import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.staticfiles import StaticFiles

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from commons import limiter
from configs.config import get_config
from logging_config import setup_logging
from security import SecurityHeadersMiddleware, RequestIdMiddleware
from src.routes.transcription_routes import router as transcription_router

# ── Logging ──────────────────────────────────────────────────────────────────
setup_logging()
logger = logging.getLogger(__name__)

cfg = get_config()

# ── Directories ──────────────────────────────────────────────────────────────
os.makedirs(cfg.UPLOAD_DIR, exist_ok=True)
os.makedirs(cfg.OUTPUT_DIR, exist_ok=True)

# ── App Factory ──────────────────────────────────────────────────────────────
app = FastAPI(
    title="Subtitle Generator API",
    docs_url="/docs" if cfg.DOCS_ENABLED else None,
    redoc_url="/redoc" if cfg.DOCS_ENABLED else None,
    openapi_url="/openapi.json" if cfg.DOCS_ENABLED else None,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ── Middleware Stack (order matters – outermost first) ───────────────────────

# 1. Request-ID tracking
app.add_middleware(RequestIdMiddleware)

# 2. Security response headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Trusted hosts
app.add_middleware(TrustedHostMiddleware, allowed_hosts=cfg.ALLOWED_HOSTS)

# 4. CORS – explicit methods & headers instead of wildcards
app.add_middleware(
    CORSMiddleware,
    allow_origins=cfg.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=cfg.CORS_METHODS,
    allow_headers=cfg.CORS_HEADERS,
)

# ── Routes ───────────────────────────────────────────────────────────────────
app.include_router(transcription_router)
app.mount(
    cfg.DOWNLOADS_URL_PREFIX,
    StaticFiles(directory=cfg.OUTPUT_DIR),
    name="downloads",
)


# ═══════════════════════════════════════════════════════════════════════════
#  HOMEPAGE
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/", response_class=HTMLResponse)
@limiter.limit(cfg.HOME_RATE_LIMIT)
def home(request: Request):
    """Serve the upload page from template"""
    template_path = os.path.join(os.path.dirname(__file__), "templates", "home.html")
    try:
        with open(template_path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        logger.error("Template not found at %s", template_path)
        return """
        <html>
        <body style="font-family: sans-serif; padding: 20px;">
            <h1>Subtitle Generator API</h1>
            <p>API is running, but the upload page template was not found.</p>
            <p>POST a media file as <code>mediaFile</code> to <code>/upload</code>.</p>
        </body>
        </html>
        """


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="Run Subtitle Generator")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")), help="Port to bind to (default: $PORT or 3000)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload on code changes")

    args = parser.parse_args()

    logger.info("Starting HTTP server on %s:%s", args.host, args.port)
    logger.info("Subtitle generator app listening at http://localhost:%s", args.port)

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
