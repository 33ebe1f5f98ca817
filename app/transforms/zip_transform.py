"""
app/transforms/zip_transform.py

Wraps a file, unmodified, as the single entry of a new zip archive.

Used for Word documents and for files that are already archives. The
latter are wrapped again even though they usually grow slightly.
"""

from __future__ import annotations

import zipfile
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import TransformError
from app.core.logger import get_logger
from app.storage.base import UploadedFile
from app.transforms.base import Transform

logger = get_logger(__name__)


class ZipTransform(Transform):
    """Document / archive → ``<stem>.zip`` holding the original file."""

    media_type = "application/zip"

    def __init__(self, level: int | None = None) -> None:
        self.level: int = level or settings.zip_level

    def output_name(self, source: UploadedFile) -> str:
        return f"{source.stem}.zip"

    def apply(self, source: UploadedFile, target: Path) -> None:
        try:
            with zipfile.ZipFile(
                target, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=self.level
            ) as archive:
                archive.write(source.path, arcname=source.original_filename)
        except OSError as exc:
            raise TransformError(
                f"Failed to package '{source.original_filename}'.", details=exc.strerror
            ) from exc

        logger.info(
            "'%s' packaged: %d -> %d bytes.",
            source.original_filename,
            source.size,
            target.stat().st_size,
        )
