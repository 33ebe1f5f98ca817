"""
app/main.py

FastAPI application entry point.

Responsibilities:
  - Create the FastAPI app with metadata from config
  - Enable CORS for browser clients
  - Register all API routers
  - Add a global exception handler for uncaught AppBaseException
  - Expose a /health endpoint for liveness probes
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.compress_controller import router as compress_router
from app.core.config import settings
from app.core.exceptions import AppBaseException, ClientInputError
from app.core.logger import get_logger
from app.models.compress_models import ErrorResponse

logger = get_logger(__name__)

# ── App instance ───────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Accepts a single uploaded file, compresses or repackages it "
        "according to its type, and returns the result as a download."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# ── Routers ────────────────────────────────────────────────────────────────────

app.include_router(compress_router)

# ── Global exception handler ───────────────────────────────────────────────────

@app.exception_handler(AppBaseException)
async def app_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
    """
    Safety-net for any AppBaseException that escapes controller-level handling.
    Returns the error shape: { "error": "...", "details"?: "..." }
    400 for client input errors, 500 for everything else.
    """
    if isinstance(exc, ClientInputError):
        logger.warning("Client error on %s: %s", request.url.path, exc)
        status = 400
    else:
        logger.exception("Unhandled application error on %s: %s", request.url.path, exc)
        status = 500
    body = ErrorResponse(error=exc.message, details=exc.details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


# ── Health endpoint ────────────────────────────────────────────────────────────

@app.get("/health", tags=["Health"], summary="Liveness probe")
async def health() -> dict:
    """Returns 200 OK when the service is running."""
    return {"status": "ok", "version": settings.app_version}
