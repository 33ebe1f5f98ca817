"""
app/services/compress_service.py

Orchestrates the upload-to-artifact pipeline for one request:

    UploadFile
      └─ StorageArea.save_upload()     → UploadedFile   (size cap enforced)
           └─ classify(extension)      → FileCategory
                └─ Transform.validate() / apply()  (worker thread)
                     └─ ArtifactLease  → handed to the HTTP layer

The uploaded source is deleted as soon as the transform has finished,
whatever the outcome. A partial artifact is deleted on failure; a finished
one is owned by the returned lease, which the caller must release.

Storage and transforms are constructor-injected so tests can point the
service at a temporary directory or at fake transforms; the module-level
singleton wires in the production implementations.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Mapping

import anyio
import anyio.to_thread
from fastapi import UploadFile

from app.core.config import settings
from app.core.constants import OUTPUT_PREFIX
from app.core.exceptions import (
    AppBaseException,
    NoFileUploadedError,
    StorageError,
    TransformError,
    UnsupportedFileTypeError,
    UploadTooLargeError,
)
from app.core.logger import get_logger
from app.storage.base import CompressedArtifact, StorageArea, UploadedFile
from app.storage.lease import ArtifactLease
from app.storage.local_storage import LocalStorageArea
from app.transforms import FileCategory, Transform, classify, default_transforms

logger = get_logger(__name__)


def _client_filename(raw: str | None) -> str:
    """Last path component of a client-supplied filename ("" if missing)."""
    if not raw:
        return ""
    return PurePath(raw.replace("\\", "/")).name


class CompressService:
    """
    Runs one upload through classification, transform and cleanup.

    Design choices:
    - **Exhaustive dispatch**: construction fails unless every category
      except UNSUPPORTED has a transform.
    - **Early source cleanup**: the staged upload is deleted right after the
      transform, before the artifact is streamed.
    - **Scrubbed errors**: error details never contain storage-area paths.
    """

    def __init__(
        self,
        storage: StorageArea | None = None,
        transforms: Mapping[FileCategory, Transform] | None = None,
        max_upload_bytes: int | None = None,
    ) -> None:
        self._storage: StorageArea = storage or LocalStorageArea()
        self._transforms: Mapping[FileCategory, Transform] = (
            transforms if transforms is not None else default_transforms()
        )
        self.max_upload_bytes: int = max_upload_bytes or settings.max_upload_bytes

        missing = [
            category.value
            for category in FileCategory
            if category is not FileCategory.UNSUPPORTED and category not in self._transforms
        ]
        if missing:
            raise ValueError(f"No transform registered for: {', '.join(missing)}.")

    @property
    def storage(self) -> StorageArea:
        return self._storage

    # ── Public API ─────────────────────────────────────────────────────────────

    async def process(self, upload: UploadFile) -> ArtifactLease:
        """
        Stage ``upload`` and compress it.

        Returns:
            A lease on the artifact. The caller must release it once the
            response is finished.

        Raises:
            ClientInputError: No file, too large, unsupported type, invalid PDF.
            TransformError:   The transform or the staging copy failed.
        """
        uploaded = await self.stage_upload(upload)
        return await self.compress(uploaded)

    async def stage_upload(self, upload: UploadFile) -> UploadedFile:
        """
        Copy the upload into the storage area.

        Raises:
            NoFileUploadedError: The upload has no filename or no content.
            UploadTooLargeError: The upload exceeds ``max_upload_bytes``.
            TransformError:      The copy could not be written.
        """
        filename = _client_filename(upload.filename)
        if not filename:
            raise NoFileUploadedError("No file uploaded")

        declared = getattr(upload, "size", None)
        if isinstance(declared, int) and declared > self.max_upload_bytes:
            logger.warning("'%s' rejected: declared size %d bytes.", filename, declared)
            raise UploadTooLargeError(
                "File too large",
                details=f"Maximum upload size is {self.max_upload_bytes} bytes.",
            )

        try:
            uploaded = await self._storage.save_upload(upload, filename, self.max_upload_bytes)
        except StorageError as exc:
            details = self._scrub(exc.details) if exc.details else None
            raise TransformError("Compression failed", details=details) from exc

        if uploaded.size == 0:
            await self._storage.delete(uploaded.path)
            raise NoFileUploadedError("No file uploaded")

        logger.info("'%s' staged (%d bytes).", filename, uploaded.size)
        return uploaded

    async def compress(self, uploaded: UploadedFile) -> ArtifactLease:
        """
        Classify and transform a staged upload.

        The source is always deleted before this returns. On failure any
        partial artifact is deleted too.

        Raises:
            UnsupportedFileTypeError: The extension maps to no transform.
            InvalidPDFError:          A .pdf without the PDF signature.
            TransformError:           Anything failed inside the transform.
        """
        target: Path | None = None
        succeeded = False
        try:
            category = classify(uploaded.extension)
            if category is FileCategory.UNSUPPORTED:
                logger.warning(
                    "'%s' rejected: unsupported extension '%s'.",
                    uploaded.original_filename,
                    uploaded.extension,
                )
                raise UnsupportedFileTypeError("Unsupported file type")

            transform = self._transforms[category]
            await self._run(transform.validate, uploaded)

            target = self._storage.allocate(transform.output_name(uploaded))
            logger.debug(
                "'%s' → %s via %s.",
                uploaded.original_filename,
                category.value,
                type(transform).__name__,
            )
            await self._run(transform.apply, uploaded, target)

            artifact = CompressedArtifact(
                path=target,
                download_name=f"{OUTPUT_PREFIX}{uploaded.original_filename}",
                media_type=transform.media_type_for(uploaded),
            )
            succeeded = True
        finally:
            with anyio.CancelScope(shield=True):
                await self._storage.delete(uploaded.path)
                if not succeeded and target is not None:
                    await self._storage.delete(target)

        return ArtifactLease(self._storage, artifact)

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _run(self, fn, *args) -> None:
        """Run a blocking transform step in a worker thread, normalising errors."""
        try:
            await anyio.to_thread.run_sync(fn, *args)
        except AppBaseException as exc:
            if exc.details:
                exc.details = self._scrub(exc.details)
            raise
        except Exception as exc:
            raise TransformError("Compression failed", details=self._scrub(str(exc))) from exc

    def _scrub(self, message: str) -> str:
        """Remove storage-area paths from an error message."""
        root = str(self._storage.root)
        return message.replace(root + os.sep, "").replace(root, "")


# ── Module-level singleton ─────────────────────────────────────────────────────
# Controllers import this instance. Tests construct CompressService directly
# with a temporary storage area.

compress_service = CompressService()
