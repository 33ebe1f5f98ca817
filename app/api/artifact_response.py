"""
app/api/artifact_response.py

A FileResponse that owns an ArtifactLease.

The lease is released once the ASGI call ends, whether the body was fully
sent, sending raised, the client went away or the request was cancelled.
A client disconnect is an ordinary way for a download to end, so it is
logged and not re-raised.
"""

from __future__ import annotations

from starlette.requests import ClientDisconnect
from starlette.responses import FileResponse
from starlette.types import Receive, Scope, Send

from app.core.logger import get_logger
from app.storage.lease import ArtifactLease

logger = get_logger(__name__)


class ArtifactResponse(FileResponse):
    """Streams ``lease.artifact`` as an attachment, then deletes it."""

    def __init__(self, lease: ArtifactLease) -> None:
        artifact = lease.artifact
        super().__init__(
            path=artifact.path,
            media_type=artifact.media_type,
            filename=artifact.download_name,
        )
        self.lease = lease

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except (ClientDisconnect, OSError) as exc:
            logger.info(
                "Transfer of '%s' aborted by the client: %s",
                self.lease.artifact.download_name,
                exc.__class__.__name__,
            )
        finally:
            await self.lease.release()
