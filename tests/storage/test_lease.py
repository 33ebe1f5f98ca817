"""
tests/storage/test_lease.py

Tests for ArtifactLease. The artifact must be deleted exactly once on
every exit path, including cancellation.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import anyio
import pytest

from app.storage.base import CompressedArtifact
from app.storage.lease import ArtifactLease
from app.storage.local_storage import LocalStorageArea


def _artifact(storage: LocalStorageArea) -> CompressedArtifact:
    path = storage.allocate("out.gz")
    path.write_bytes(b"artifact")
    return CompressedArtifact(path=path, download_name="compressed-out.txt", media_type="application/gzip")


class TestArtifactLease:

    @pytest.mark.asyncio
    async def test_release_deletes_artifact(self, storage: LocalStorageArea) -> None:
        lease = ArtifactLease(storage, _artifact(storage))

        await lease.release()

        assert lease.released
        assert storage.list_entries() == []

    @pytest.mark.asyncio
    async def test_release_runs_once(self) -> None:
        storage = MagicMock()
        storage.delete = AsyncMock(return_value=True)
        artifact = CompressedArtifact(path=Path("/nowhere"), download_name="x", media_type="y")
        lease = ArtifactLease(storage, artifact)

        await lease.release()
        await lease.release()
        await lease.release()

        storage.delete.assert_awaited_once_with(Path("/nowhere"))

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_error(self, storage: LocalStorageArea) -> None:
        lease = ArtifactLease(storage, _artifact(storage))

        with pytest.raises(RuntimeError):
            async with lease as artifact:
                assert artifact.path.exists()
                raise RuntimeError("transfer failed")

        assert storage.list_entries() == []

    @pytest.mark.asyncio
    async def test_release_survives_cancellation(self, storage: LocalStorageArea) -> None:
        lease = ArtifactLease(storage, _artifact(storage))

        with anyio.CancelScope() as scope:
            scope.cancel()
            await lease.release()

        assert storage.list_entries() == []
