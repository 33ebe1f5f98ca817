"""
app/transforms/image_transform.py

Downscales and re-encodes raster images with Pillow.

Images wider than the configured maximum are resized to that width with
their aspect ratio preserved; narrower images keep their size. The encoder
is picked from the file extension:

    .jpg / .jpeg → JPEG, low quality, progressive, optimised Huffman tables
    .png         → PNG, maximum zlib level, reduced to a 256-colour palette
    .webp        → WEBP, low quality, lossy
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from PIL import Image, UnidentifiedImageError

from app.core.config import settings
from app.core.constants import IMAGE_FORMATS, OUTPUT_PREFIX
from app.core.exceptions import TransformError
from app.core.logger import get_logger
from app.storage.base import UploadedFile
from app.transforms.base import Transform

logger = get_logger(__name__)

_MEDIA_TYPES: Dict[str, str] = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


class ImageTransform(Transform):
    """Image → ``compressed-<original>`` in the same format."""

    def __init__(
        self,
        max_width: int | None = None,
        jpeg_quality: int | None = None,
        webp_quality: int | None = None,
        png_compress_level: int | None = None,
    ) -> None:
        """
        Args:
            max_width          : Width cap in pixels. Defaults to ``settings.image_max_width``.
            jpeg_quality       : JPEG quality (1-95). Defaults to ``settings.jpeg_quality``.
            webp_quality       : WEBP quality (1-100). Defaults to ``settings.webp_quality``.
            png_compress_level : zlib level (0-9). Defaults to ``settings.png_compress_level``.
        """
        self.max_width: int = max_width or settings.image_max_width
        self.jpeg_quality: int = jpeg_quality or settings.jpeg_quality
        self.webp_quality: int = webp_quality or settings.webp_quality
        self.png_compress_level: int = (
            png_compress_level if png_compress_level is not None else settings.png_compress_level
        )

    # ── Transform API ──────────────────────────────────────────────────────────

    def output_name(self, source: UploadedFile) -> str:
        return f"{OUTPUT_PREFIX}{source.original_filename}"

    def media_type_for(self, source: UploadedFile) -> str:
        return _MEDIA_TYPES.get(IMAGE_FORMATS.get(source.extension, ""), self.media_type)

    def apply(self, source: UploadedFile, target: Path) -> None:
        name = source.original_filename
        fmt = IMAGE_FORMATS.get(source.extension)
        if fmt is None:
            raise TransformError(f"No image encoder for '{source.extension}' files.")

        try:
            with Image.open(source.path) as img:
                img.load()
                original_size = img.size
                resized = self._downscale(img)
                encoded = self._prepare(resized, fmt)
                encoded.save(target, format=fmt, **self._save_options(fmt))
        except UnidentifiedImageError as exc:
            raise TransformError(f"'{name}' is not a readable image.") from exc
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise TransformError(f"Failed to re-encode '{name}'.", details=str(exc)) from exc

        logger.info(
            "'%s' re-encoded as %s: %dx%d -> %dx%d, %d -> %d bytes.",
            name,
            fmt,
            original_size[0],
            original_size[1],
            encoded.width,
            encoded.height,
            source.size,
            target.stat().st_size,
        )

    # ── Internals ──────────────────────────────────────────────────────────────

    def _downscale(self, img: Image.Image) -> Image.Image:
        """Resize to ``max_width`` keeping the aspect ratio. Never upscales."""
        if img.width <= self.max_width:
            return img
        height = max(1, round(img.height * self.max_width / img.width))
        return img.resize((self.max_width, height), Image.Resampling.LANCZOS)

    def _prepare(self, img: Image.Image, fmt: str) -> Image.Image:
        """Convert ``img`` to a mode the target encoder accepts."""
        if fmt == "JPEG":
            if img.mode not in ("RGB", "L", "CMYK"):
                return img.convert("RGB")
            return img
        if fmt == "PNG":
            # Palette reduction only applies to true-colour input.
            if img.mode == "RGBA":
                return img.quantize(colors=256, method=Image.Quantize.FASTOCTREE)
            if img.mode == "RGB":
                return img.quantize(colors=256)
            return img
        if img.mode not in ("RGB", "RGBA"):
            return img.convert("RGBA")
        return img

    def _save_options(self, fmt: str) -> Dict[str, Any]:
        if fmt == "JPEG":
            return {"quality": self.jpeg_quality, "progressive": True, "optimize": True}
        if fmt == "PNG":
            return {"compress_level": self.png_compress_level, "optimize": True}
        return {"quality": self.webp_quality, "lossless": False}
