"""
app/storage/local_storage.py

Storage area backed by a local directory.

Files are stored flat under the configured directory as
``<uuid4 hex>_<sanitised name>``. Uploads are written with aiofiles so the
event loop is never blocked by disk I/O.
"""

from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import List

import aiofiles
import aiofiles.os
import anyio
from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import StorageError, UploadTooLargeError
from app.core.logger import get_logger
from app.storage.base import StorageArea, UploadedFile, extension_of

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_MAX_NAME_LENGTH = 120


def _safe_component(name: str) -> str:
    """Reduce ``name`` to characters that are valid on every filesystem."""
    cleaned = _UNSAFE_CHARS.sub("_", name)
    return cleaned[-_MAX_NAME_LENGTH:] or "file"


class LocalStorageArea(StorageArea):
    """
    Flat directory of transient files.

    The directory is created on construction. Nothing here is shared
    between requests except the directory itself.
    """

    def __init__(self, root: str | Path | None = None, chunk_size: int | None = None) -> None:
        """
        Args:
            root       : Directory to use. Defaults to ``settings.storage_dir``.
            chunk_size : Bytes per read/write step when saving uploads.
                         Defaults to ``settings.stream_chunk_size``.
        """
        self._root = Path(root or settings.storage_dir).resolve()
        self._chunk_size = chunk_size or settings.stream_chunk_size
        self._root.mkdir(parents=True, exist_ok=True)
        logger.debug("Storage area ready at '%s'.", self._root)

    # ── Public API ─────────────────────────────────────────────────────────────

    @property
    def root(self) -> Path:
        return self._root

    def allocate(self, name: str) -> Path:
        return self._root / f"{uuid.uuid4().hex}_{_safe_component(name)}"

    async def save_upload(self, upload: UploadFile, filename: str, limit: int) -> UploadedFile:
        path = self.allocate(filename)
        written = 0
        succeeded = False
        try:
            async with aiofiles.open(path, "wb") as out:
                while True:
                    chunk = await upload.read(self._chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > limit:
                        logger.warning("'%s' rejected: exceeds %d bytes.", filename, limit)
                        raise UploadTooLargeError(
                            "File too large",
                            details=f"Maximum upload size is {limit} bytes.",
                        )
                    await out.write(chunk)
            succeeded = True
        except UploadTooLargeError:
            raise
        except OSError as exc:
            raise StorageError("Failed to store uploaded file.", details=exc.strerror) from exc
        except Exception as exc:
            raise StorageError("Failed to read uploaded file.", details=str(exc)) from exc
        finally:
            if not succeeded:
                with anyio.CancelScope(shield=True):
                    await self.delete(path)

        logger.debug("Stored '%s' (%d bytes) as '%s'.", filename, written, path.name)
        return UploadedFile(
            path=path,
            original_filename=filename,
            size=written,
            extension=extension_of(filename),
        )

    async def delete(self, path: Path) -> bool:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Error deleting file '%s': %s", path, exc)
            return False
        logger.debug("Deleted '%s'.", path.name)
        return True

    def list_entries(self) -> List[str]:
        return sorted(entry.name for entry in self._root.iterdir())
