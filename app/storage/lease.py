"""
app/storage/lease.py

Scoped ownership of a compressed artifact.

The orchestrator acquires a lease when a transform succeeds; whoever
finishes the response releases it. Release deletes the artifact exactly
once, no matter how many exit paths call it.
"""

from __future__ import annotations

import anyio

from app.core.logger import get_logger
from app.storage.base import CompressedArtifact, StorageArea

logger = get_logger(__name__)


class ArtifactLease:
    """
    Owns one CompressedArtifact until released.

    Usage
    -----
    >>> async with lease as artifact:
    ...     await send_file(artifact.path)
    """

    def __init__(self, storage: StorageArea, artifact: CompressedArtifact) -> None:
        self._storage = storage
        self._artifact = artifact
        self._released = False

    @property
    def artifact(self) -> CompressedArtifact:
        return self._artifact

    @property
    def released(self) -> bool:
        return self._released

    async def release(self) -> None:
        """Delete the artifact. Only the first call does anything."""
        if self._released:
            return
        self._released = True
        # Must complete even when the surrounding request is being cancelled.
        with anyio.CancelScope(shield=True):
            await self._storage.delete(self._artifact.path)
        logger.debug("Released artifact '%s'.", self._artifact.download_name)

    async def __aenter__(self) -> CompressedArtifact:
        return self._artifact

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.release()
        return False
