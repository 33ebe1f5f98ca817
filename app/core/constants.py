"""
app/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

from typing import Dict, FrozenSet

# ── Upload form ────────────────────────────────────────────────────────────────

#: Name of the multipart field carrying the uploaded file.
UPLOAD_FIELD_NAME: str = "file"

#: Allowance for multipart boundaries and part headers on top of the file
#: size cap when the request Content-Length is checked.
MULTIPART_OVERHEAD_BYTES: int = 64 * 1024

# ── Extension tables ───────────────────────────────────────────────────────────

TEXT_EXTENSIONS: FrozenSet[str] = frozenset({".txt", ".log", ".json"})
IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({".jpg", ".jpeg", ".png", ".webp"})
PDF_EXTENSIONS: FrozenSet[str] = frozenset({".pdf"})
DOCUMENT_EXTENSIONS: FrozenSet[str] = frozenset({".doc", ".docx"})
ARCHIVE_EXTENSIONS: FrozenSet[str] = frozenset({".zip", ".gz", ".rar", ".7z"})

#: Pillow encoder name for each supported image extension.
IMAGE_FORMATS: Dict[str, str] = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".webp": "WEBP",
}

# ── Artifacts ──────────────────────────────────────────────────────────────────

#: Every PDF must start with this byte sequence.
PDF_SIGNATURE: bytes = b"%PDF-"

#: Prefix of the suggested download name and of re-encoded artifact names.
OUTPUT_PREFIX: str = "compressed-"
