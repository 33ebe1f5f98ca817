"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest, no import needed.
Every test gets its own storage area under ``tmp_path`` so leak checks can
simply list the directory.
"""

import io
from pathlib import Path
from typing import Callable

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.api import compress_controller
from app.main import app
from app.services.compress_service import CompressService
from app.storage.base import UploadedFile
from app.storage.local_storage import LocalStorageArea
from app.transforms.classifier import extension_of


# ── Storage & service fixtures ─────────────────────────────────────────────────

@pytest.fixture
def storage(tmp_path: Path) -> LocalStorageArea:
    """An empty storage area private to one test."""
    return LocalStorageArea(tmp_path / "uploads")


@pytest.fixture
def service(storage: LocalStorageArea) -> CompressService:
    """CompressService with the production transforms and a private storage area."""
    return CompressService(storage=storage)


@pytest.fixture
def patched_service(service: CompressService, monkeypatch: pytest.MonkeyPatch) -> CompressService:
    """Route the /compress endpoint through ``service``."""
    monkeypatch.setattr(compress_controller, "compress_service", service)
    return service


# ── Core client fixture ────────────────────────────────────────────────────────

@pytest.fixture
def client(patched_service: CompressService) -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    Function-scoped so each test sees its own storage area.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


# ── Sample file fixtures ───────────────────────────────────────────────────────

def _image_bytes(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
    """Encode a two-axis gradient so encoders have real content to work on."""
    size = (width, height)
    horizontal = Image.linear_gradient("L").rotate(90).resize(size)
    vertical = Image.linear_gradient("L").resize(size)
    if mode == "L":
        img = horizontal
    else:
        bands = [horizontal, vertical, Image.new("L", size, 128)]
        if mode == "RGBA":
            bands.append(Image.new("L", size, 200))
        img = Image.merge(mode, bands)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory: make_image(width, height, fmt="PNG", mode="RGB") → encoded bytes."""
    return _image_bytes


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A two-page PDF with text and metadata, built with PyMuPDF."""
    doc = fitz.open()
    for text in ("Quarterly report, page one.", "Appendix, page two."):
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=12)
    doc.set_metadata({"title": "Quarterly Report", "author": "Finance Team"})
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def stage(tmp_path: Path) -> Callable[[str, bytes], UploadedFile]:
    """
    Factory: stage(filename, data) → UploadedFile.

    Writes ``data`` to a scratch directory, the way the storage area would.
    """
    scratch = tmp_path / "staged"
    scratch.mkdir()

    def _stage(filename: str, data: bytes) -> UploadedFile:
        path = scratch / f"src_{filename}"
        path.write_bytes(data)
        return UploadedFile(
            path=path,
            original_filename=filename,
            size=len(data),
            extension=extension_of(filename),
        )

    return _stage
