"""
app/transforms/gzip_transform.py

Stream-compresses text files with gzip.

The source is copied in fixed-size chunks so memory use does not grow
with the size of the upload.
"""

from __future__ import annotations

import gzip
import shutil
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import TransformError
from app.core.logger import get_logger
from app.storage.base import UploadedFile
from app.transforms.base import Transform

logger = get_logger(__name__)


class GzipTransform(Transform):
    """Text → ``<stem>.gz``."""

    media_type = "application/gzip"

    def __init__(self, level: int | None = None, chunk_size: int | None = None) -> None:
        """
        Args:
            level      : DEFLATE compression level (1-9). Defaults to ``settings.gzip_level``.
            chunk_size : Bytes copied per step. Defaults to ``settings.stream_chunk_size``.
        """
        self.level: int = level or settings.gzip_level
        self.chunk_size: int = chunk_size or settings.stream_chunk_size

    def output_name(self, source: UploadedFile) -> str:
        return f"{source.stem}.gz"

    def apply(self, source: UploadedFile, target: Path) -> None:
        try:
            with open(source.path, "rb") as src, open(target, "wb") as raw:
                # The gzip header records the original name, not the storage path.
                with gzip.GzipFile(
                    filename=source.original_filename,
                    mode="wb",
                    compresslevel=self.level,
                    fileobj=raw,
                ) as gz:
                    shutil.copyfileobj(src, gz, self.chunk_size)
        except OSError as exc:
            raise TransformError(
                f"Failed to gzip '{source.original_filename}'.", details=exc.strerror
            ) from exc

        logger.info(
            "'%s' gzipped: %d -> %d bytes.",
            source.original_filename,
            source.size,
            target.stat().st_size,
        )
