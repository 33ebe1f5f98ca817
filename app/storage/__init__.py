"""app/storage/__init__.py: public API of the storage package."""

from app.storage.base import CompressedArtifact, StorageArea, UploadedFile
from app.storage.lease import ArtifactLease
from app.storage.local_storage import LocalStorageArea

__all__ = [
    "StorageArea",
    "UploadedFile",
    "CompressedArtifact",
    "ArtifactLease",
    "LocalStorageArea",
]
