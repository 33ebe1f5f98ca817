"""
app/api/compress_controller.py

Handles incoming requests to POST /compress.

This layer is responsible only for HTTP concerns:
  - Rejecting requests whose declared body size is over the cap before
    the multipart form is parsed.
  - Extracting the single 'file' field from the form.
  - Delegating staging, classification and the transform to CompressService.
  - Translating service-level errors into the JSON error shape.
  - Returning the artifact as a download whose lease is released when the
    transfer ends.

Responses:
  200  The compressed artifact, sent as an attachment named
       'compressed-<original filename>'.
  400  The request was rejected before any transform ran: no file, an
       unsupported extension, an oversized upload or a .pdf that does not
       start with the PDF signature.
  500  The transform or the storage area failed.
"""

import anyio
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.api.artifact_response import ArtifactResponse
from app.core.constants import MULTIPART_OVERHEAD_BYTES, UPLOAD_FIELD_NAME
from app.core.exceptions import AppBaseException, ClientInputError
from app.core.logger import get_logger
from app.models.compress_models import ErrorResponse
from app.services.compress_service import compress_service
from app.storage.lease import ArtifactLease

logger = get_logger(__name__)

router = APIRouter(tags=["Compress"])

# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400, details: str | None = None) -> JSONResponse:
    """Return a JSON error response matching ErrorResponse."""
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def _declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


# ── Endpoint ───────────────────────────────────────────────────────────────────

@router.post(
    "/compress",
    summary="Compress a single uploaded file",
    response_class=Response,
    responses={
        200: {"content": {"application/octet-stream": {}}, "description": "The compressed artifact."},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def compress(request: Request) -> Response:
    """
    Accept one file as multipart/form-data:  -F "file=@report.txt"

    Text files come back gzipped, images downscaled and re-encoded, PDFs
    structurally rewritten, and Word documents or archives wrapped in a zip.
    """
    # ── 1. Reject oversized bodies before parsing ──────────────────────────────
    limit = compress_service.max_upload_bytes
    declared = _declared_length(request)
    if declared is not None and declared > limit + MULTIPART_OVERHEAD_BYTES:
        logger.warning("Request rejected: Content-Length %d bytes.", declared)
        return _err("File too large", details=f"Maximum upload size is {limit} bytes.")

    # ── 2. Parse multipart form ────────────────────────────────────────────────
    try:
        form = await request.form()
    except Exception:
        return _err("No file uploaded", details="Invalid multipart/form-data payload.")

    lease: ArtifactLease | None = None
    try:
        try:
            upload = form.get(UPLOAD_FIELD_NAME)
            if not isinstance(upload, StarletteUploadFile) or not upload.filename:
                return _err("No file uploaded")

            logger.info("Compress request received: '%s'.", upload.filename)

            # ── 3. Delegate to service ─────────────────────────────────────────
            try:
                lease = await compress_service.process(upload)

            except ClientInputError as exc:
                return _err(exc.message, details=exc.details)

            except AppBaseException as exc:
                logger.exception("Compression error for '%s': %s", upload.filename, exc)
                return _err("Compression failed", status=500, details=exc.details or exc.message)

            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error compressing '%s': %s", upload.filename, exc)
                return _err("Compression failed", status=500)
        finally:
            # The framework's own spooled copy is no longer needed.
            with anyio.CancelScope(shield=True):
                await form.close()

        logger.info("Compress complete: sending '%s'.", lease.artifact.download_name)
        return ArtifactResponse(lease)
    except BaseException:
        # Nobody will stream the artifact, so nobody else will release it.
        if lease is not None:
            await lease.release()
        raise
