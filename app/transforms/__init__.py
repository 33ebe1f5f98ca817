"""app/transforms/__init__.py: public API of the transforms package."""

from typing import Dict

from app.transforms.base import Transform
from app.transforms.classifier import FileCategory, classify, extension_of
from app.transforms.gzip_transform import GzipTransform
from app.transforms.image_transform import ImageTransform
from app.transforms.pdf_transform import PdfTransform
from app.transforms.zip_transform import ZipTransform


def default_transforms() -> Dict[FileCategory, Transform]:
    """Production wiring: one transform per supported category."""
    packager = ZipTransform()
    return {
        FileCategory.TEXT: GzipTransform(),
        FileCategory.IMAGE: ImageTransform(),
        FileCategory.PDF: PdfTransform(),
        FileCategory.DOCUMENT: packager,
        FileCategory.ARCHIVE: packager,
    }


__all__ = [
    "Transform",
    "FileCategory",
    "classify",
    "extension_of",
    "GzipTransform",
    "ImageTransform",
    "PdfTransform",
    "ZipTransform",
    "default_transforms",
]
