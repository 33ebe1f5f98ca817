"""
app/transforms/classifier.py

Maps a filename extension to the category that decides which transform runs.

The lookup is a pure table lookup: case-insensitive, total, and free of
side effects. Anything not in a table is UNSUPPORTED. ``extension_of`` is
re-exported from the storage layer, which computes the extension of every
staged upload the same way.
"""

from __future__ import annotations

from enum import Enum

from app.core.constants import (
    ARCHIVE_EXTENSIONS,
    DOCUMENT_EXTENSIONS,
    IMAGE_EXTENSIONS,
    PDF_EXTENSIONS,
    TEXT_EXTENSIONS,
)
from app.storage.base import extension_of

__all__ = ["FileCategory", "classify", "extension_of"]


class FileCategory(str, Enum):
    """Closed set of upload categories. Every member except UNSUPPORTED has a transform."""

    TEXT = "text"
    IMAGE = "image"
    PDF = "pdf"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    UNSUPPORTED = "unsupported"


_TABLE = {
    FileCategory.TEXT: TEXT_EXTENSIONS,
    FileCategory.IMAGE: IMAGE_EXTENSIONS,
    FileCategory.PDF: PDF_EXTENSIONS,
    FileCategory.DOCUMENT: DOCUMENT_EXTENSIONS,
    FileCategory.ARCHIVE: ARCHIVE_EXTENSIONS,
}

_BY_EXTENSION = {ext: category for category, exts in _TABLE.items() for ext in exts}


def classify(extension: str) -> FileCategory:
    """
    Return the category for an extension.

    Accepts a bare extension ("png"), a dotted one (".png") or a whole
    filename ("IMG.PNG"); only the text after the final dot counts.
    """
    tail = extension.rsplit(".", 1)[-1].lower()
    if not tail:
        return FileCategory.UNSUPPORTED
    return _BY_EXTENSION.get(f".{tail}", FileCategory.UNSUPPORTED)
