"""
app/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; Docker Compose injects these at runtime.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "File Compression API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"          # overridden to DEBUG when debug=True
    cors_allow_origins: List[str] = ["*"]

    # ── Storage area ───────────────────────────────────────────────────────────
    storage_dir: str = "./data/uploads"
    max_upload_bytes: int = 20 * 1024 * 1024   # 20 MiB per uploaded file
    stream_chunk_size: int = 64 * 1024         # bytes per read/write step

    # ── Transforms ─────────────────────────────────────────────────────────────
    gzip_level: int = 9
    zip_level: int = 9
    image_max_width: int = 600    # pixels; images are never upscaled
    jpeg_quality: int = 30
    webp_quality: int = 30
    png_compress_level: int = 9

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Single shared instance, import this everywhere.
settings = Settings()
