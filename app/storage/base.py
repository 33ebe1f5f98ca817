"""
app/storage/base.py

Abstract interface for the transient storage area.

Design goals:
  - The orchestrator depends only on this interface, never on a concrete
    directory layout.
  - UploadedFile and CompressedArtifact are the shared vocabulary between
    storage, transforms and the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List

from fastapi import UploadFile


def extension_of(filename: str) -> str:
    """
    Return the lowercased text after the final dot, with the dot, or "" if none.

    A name made only of an extension still has one.

    >>> extension_of("Report.TXT")
    '.txt'
    >>> extension_of(".txt")
    '.txt'
    >>> extension_of("README")
    ''
    """
    if "." not in filename:
        return ""
    return "." + filename.rsplit(".", 1)[1].lower()


# ── Shared data-transfer objects ──────────────────────────────────────────────

@dataclass(frozen=True)
class UploadedFile:
    """
    An upload copied into the storage area, ready to be transformed.

    Attributes:
        path              : Unique location inside the storage area.
        original_filename : Client-supplied name, reduced to its last path component.
        size              : Number of bytes written.
        extension         : Lowercased dotted suffix (e.g. ".png"), "" if none.
    """

    path: Path
    original_filename: str
    size: int
    extension: str

    @property
    def stem(self) -> str:
        """Original filename without its extension (may be empty)."""
        if self.extension:
            return self.original_filename[: -len(self.extension)]
        return self.original_filename


@dataclass(frozen=True)
class CompressedArtifact:
    """
    The output of one transform.

    Attributes:
        path          : Unique location inside the storage area.
        download_name : Filename suggested to the client.
        media_type    : MIME type sent with the download.
    """

    path: Path
    download_name: str
    media_type: str


# ── Abstract storage ──────────────────────────────────────────────────────────

class StorageArea(ABC):
    """
    Contract every storage backend must fulfil.

    Every name handed out is unique, so concurrent requests never share a
    file even when clients upload the same filename.
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Directory holding every transient file."""

    @abstractmethod
    def allocate(self, name: str) -> Path:
        """
        Reserve a unique path for a file derived from ``name``.

        Nothing is created on disk; the caller writes to the returned path.
        """

    @abstractmethod
    async def save_upload(self, upload: UploadFile, filename: str, limit: int) -> UploadedFile:
        """
        Stream an upload into the storage area.

        Args:
            upload   : The multipart file as parsed by the framework.
            filename : Sanitised original filename.
            limit    : Maximum number of bytes accepted.

        Returns:
            The stored UploadedFile.

        Raises:
            UploadTooLargeError: More than ``limit`` bytes were sent. The
                                 partial copy has already been deleted.
            StorageError:        Reading the upload or writing the copy failed.
        """

    @abstractmethod
    async def delete(self, path: Path) -> bool:
        """
        Remove ``path`` if it exists.

        Idempotent: returns False when nothing was there. Failures are
        logged and swallowed so cleanup never masks the original outcome.
        """

    @abstractmethod
    def list_entries(self) -> List[str]:
        """Return the names of all files currently held, sorted."""
