"""
app/transforms/base.py

Abstract interface for the transform layer.

Design goals:
  - The orchestrator depends only on this interface, never on Pillow,
    PyMuPDF or the DEFLATE modules directly.
  - ``apply`` is synchronous and blocking; the orchestrator runs it in a
    worker thread so the event loop stays free.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from app.storage.base import UploadedFile


class Transform(ABC):
    """
    Contract every compression / repackaging strategy must fulfil.

    A transform reads ``source.path`` and writes one artifact to the
    target path it is given. It never deletes anything; cleanup belongs to
    the orchestrator.
    """

    #: MIME type of the artifact unless ``media_type_for`` says otherwise.
    media_type: str = "application/octet-stream"

    def validate(self, source: UploadedFile) -> None:
        """
        Pre-flight check, run before any artifact path is allocated.

        Raises:
            ClientInputError: The upload is malformed for this transform.
        """

    def media_type_for(self, source: UploadedFile) -> str:
        return self.media_type

    @abstractmethod
    def output_name(self, source: UploadedFile) -> str:
        """Base filename of the artifact produced for ``source``."""

    @abstractmethod
    def apply(self, source: UploadedFile, target: Path) -> None:
        """
        Produce the artifact.

        Args:
            source : The staged upload.
            target : Where to write the artifact. Does not exist yet.

        Raises:
            TransformError: Decoding, encoding or writing failed.
        """
