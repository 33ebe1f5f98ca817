"""
app/transforms/pdf_transform.py

Rewrites PDF documents with PyMuPDF (fitz) to shrink structural overhead.

The object graph is re-serialised with object streams and a compressed
cross-reference stream; unused objects are dropped and uncompressed
streams are deflated. Page content and document metadata are left as
they are.
"""

from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF

from app.core.constants import OUTPUT_PREFIX, PDF_SIGNATURE
from app.core.exceptions import InvalidPDFError, TransformError
from app.core.logger import get_logger
from app.storage.base import UploadedFile
from app.transforms.base import Transform

logger = get_logger(__name__)


class PdfTransform(Transform):
    """PDF → ``compressed-<original>``."""

    media_type = "application/pdf"

    def validate(self, source: UploadedFile) -> None:
        """
        Reject files that do not start with ``%PDF-``.

        Raises:
            InvalidPDFError: The signature is missing.
        """
        with open(source.path, "rb") as fh:
            head = fh.read(len(PDF_SIGNATURE))
        if head != PDF_SIGNATURE:
            logger.warning("'%s' rejected: missing PDF signature.", source.original_filename)
            raise InvalidPDFError(
                "Invalid PDF file",
                details="The uploaded file is not a valid PDF document",
            )

    def output_name(self, source: UploadedFile) -> str:
        return f"{OUTPUT_PREFIX}{source.original_filename}"

    def apply(self, source: UploadedFile, target: Path) -> None:
        name = source.original_filename
        try:
            doc = fitz.open(str(source.path), filetype="pdf")
        except Exception as exc:
            raise TransformError(
                f"'{name}' could not be opened as a PDF.", details=str(exc)
            ) from exc

        try:
            if doc.needs_pass:
                raise TransformError(f"'{name}' is password-protected.")
            page_count = len(doc)
            doc.save(str(target), garbage=1, deflate=True, use_objstms=1)
        except TransformError:
            raise
        except Exception as exc:
            raise TransformError(f"Failed to rewrite '{name}'.", details=str(exc)) from exc
        finally:
            doc.close()

        logger.info(
            "'%s' rewritten: %d page(s), %d -> %d bytes.",
            name,
            page_count,
            source.size,
            target.stat().st_size,
        )
