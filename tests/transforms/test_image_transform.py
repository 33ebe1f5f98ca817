"""
tests/transforms/test_image_transform.py

Tests for ImageTransform.

Images are generated with Pillow in conftest, so the suite has no binary
fixtures on disk.
"""

from pathlib import Path

import pytest
from PIL import Image

from app.core.exceptions import TransformError
from app.transforms.image_transform import ImageTransform


def _run(stage, tmp_path: Path, filename: str, data: bytes) -> Image.Image:
    source = stage(filename, data)
    target = tmp_path / f"out-{filename}"
    ImageTransform().apply(source, target)
    img = Image.open(target)
    img.load()
    return img


class TestDownscale:

    def test_wide_png_is_resized_to_600(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "wide.png", make_image(1200, 800))
        assert img.size == (600, 400)

    def test_aspect_ratio_rounds_height(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "banner.jpg", make_image(1000, 333, fmt="JPEG"))
        assert img.size == (600, 200)

    def test_narrow_image_is_not_upscaled(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "icon.webp", make_image(320, 240, fmt="WEBP"))
        assert img.size == (320, 240)

    def test_exactly_600_is_untouched(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "edge.png", make_image(600, 900))
        assert img.size == (600, 900)

    def test_custom_max_width(self, stage, make_image, tmp_path: Path) -> None:
        source = stage("wide.png", make_image(800, 400))
        target = tmp_path / "small.png"

        ImageTransform(max_width=200).apply(source, target)

        assert Image.open(target).size == (200, 100)


class TestEncoders:

    def test_jpeg_is_progressive(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "photo.jpeg", make_image(800, 600, fmt="JPEG"))
        assert img.format == "JPEG"
        assert img.info.get("progressive") == 1

    def test_rgba_input_saved_as_jpeg(self, stage, make_image, tmp_path: Path) -> None:
        """JPEG has no alpha channel; RGBA content is flattened to RGB."""
        source = stage("odd.jpg", make_image(100, 100, fmt="PNG", mode="RGBA"))
        target = tmp_path / "odd.jpg"

        ImageTransform().apply(source, target)

        img = Image.open(target)
        assert img.format == "JPEG"
        assert img.mode == "RGB"

    def test_png_is_palette_reduced(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "chart.png", make_image(700, 300))
        assert img.format == "PNG"
        assert img.mode == "P"

    def test_rgba_png_is_palette_reduced(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "logo.png", make_image(200, 200, mode="RGBA"))
        assert img.mode == "P"

    def test_grayscale_png_keeps_mode(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "scan.png", make_image(200, 200, mode="L"))
        assert img.mode == "L"

    def test_webp_output(self, stage, make_image, tmp_path: Path) -> None:
        img = _run(stage, tmp_path, "hero.webp", make_image(1600, 900, fmt="WEBP"))
        assert img.format == "WEBP"
        assert img.size == (600, 338)


class TestNamingAndErrors:

    def test_output_name_is_prefixed(self, stage) -> None:
        assert ImageTransform().output_name(stage("cat.PNG", b"x")) == "compressed-cat.PNG"

    @pytest.mark.parametrize(
        "filename,media_type",
        [("a.jpg", "image/jpeg"), ("a.JPEG", "image/jpeg"), ("a.png", "image/png"), ("a.webp", "image/webp")],
    )
    def test_media_type_follows_extension(self, stage, filename: str, media_type: str) -> None:
        assert ImageTransform().media_type_for(stage(filename, b"x")) == media_type

    def test_corrupt_image_raises_transform_error(self, stage, tmp_path: Path) -> None:
        source = stage("broken.png", b"\x89PNG\r\n\x1a\n this is not really a png")

        with pytest.raises(TransformError, match="not a readable image"):
            ImageTransform().apply(source, tmp_path / "broken.png")

    def test_unknown_extension_raises_transform_error(self, stage, make_image, tmp_path: Path) -> None:
        source = stage("photo.bmp", make_image(10, 10, fmt="BMP"))

        with pytest.raises(TransformError):
            ImageTransform().apply(source, tmp_path / "photo.bmp")
