"""
Remote asset lifecycle on the Gemini file store: upload, wait until ready, delete.
"""

import asyncio
import logging
from typing import Any

from google import genai
from google.genai import types

from .errors import AssetProcessingError, AssetTimeoutError, UploadError
from .models import AssetState, LocalAudioAsset, RemoteAsset
from .retrying import is_unsent_upload_error, retrying

logger = logging.getLogger("lexicast")


def to_asset_state(raw: Any) -> AssetState:
    """Map the service's file state (enum or string) onto AssetState."""
    name = str(getattr(raw, "name", raw) or "").upper()
    if name in ("", "STATE_UNSPECIFIED"):
        return AssetState.UPLOADING
    try:
        return AssetState(name)
    except ValueError:
        logger.warning("Unknown remote file state %r, treating as FAILED", name)
        return AssetState.FAILED


def to_remote_asset(file: Any, fallback_mime_type: str = "") -> RemoteAsset:
    return RemoteAsset(
        name=file.name,
        uri=getattr(file, "uri", None) or "",
        mime_type=getattr(file, "mime_type", None) or fallback_mime_type,
        state=to_asset_state(getattr(file, "state", None)),
    )


class RemoteAssetManager:
    """
    Owns the remote copy of the audio for one or more invocations.

    The client is a process-wide ``genai.Client``; the manager keeps no
    per-invocation state, so a single instance is safe to share.
    """

    def __init__(
        self,
        client: genai.Client,
        *,
        poll_interval: float = 2.0,
        max_wait: float = 600.0,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff

    async def upload(self, local: LocalAudioAsset) -> RemoteAsset:
        """Upload the local audio file and return its remote handle."""
        logger.info("Step 3: uploading audio to Gemini...")
        config = types.UploadFileConfig(
            mime_type=local.mime_type,
            display_name=local.path.name,
        )
        try:
            async for attempt in retrying(
                self.retry_attempts, backoff=self.retry_backoff, predicate=is_unsent_upload_error
            ):
                with attempt:
                    file = await self.client.aio.files.upload(file=str(local.path), config=config)
        except Exception as e:
            raise UploadError(f"Upload failed: {e}") from e

        asset = to_remote_asset(file, local.mime_type)
        logger.info("Upload complete, file URI: %s", asset.uri)
        return asset

    async def refresh(self, asset: RemoteAsset) -> RemoteAsset:
        """Fetch the current state of the remote file."""
        try:
            async for attempt in retrying(self.retry_attempts, backoff=self.retry_backoff):
                with attempt:
                    file = await self.client.aio.files.get(name=asset.name)
        except Exception as e:
            raise UploadError(f"Polling {asset.name} failed: {e}") from e
        return to_remote_asset(file, asset.mime_type)

    async def await_ready(self, asset: RemoteAsset) -> RemoteAsset:
        """
        Poll until the file leaves its non-terminal states.

        Returns the ACTIVE asset. Raises AssetProcessingError for any other
        terminal state and AssetTimeoutError once ``max_wait`` has elapsed.
        """
        logger.info("Step 4: waiting for file processing...")
        loop = asyncio.get_running_loop()
        started = loop.time()
        deadline = started + self.max_wait
        while True:
            asset = await self.refresh(asset)
            logger.debug("File %s state: %s", asset.name, asset.state.value)
            if asset.state == AssetState.ACTIVE:
                logger.info("File processing complete")
                return asset
            if asset.state.is_terminal:
                raise AssetProcessingError(asset.name, asset.state.value)
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise AssetTimeoutError(asset.name, asset.state.value, loop.time() - started)
            await asyncio.sleep(min(self.poll_interval, remaining))

    async def delete(self, asset: RemoteAsset) -> None:
        """Delete the remote file; failures are logged, never raised."""
        try:
            await self.client.aio.files.delete(name=asset.name)
            logger.info("Deleted remote file %s", asset.name)
        except Exception as e:
            logger.warning("Failed to delete remote file %s: %s", asset.name, e)
