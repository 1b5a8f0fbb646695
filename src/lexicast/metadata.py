"""
Best-effort video metadata probe.
"""

import json
import logging

from pydantic import ValidationError

from .chapters import normalize_native_chapters
from .config import Settings
from .models import VideoMetadata, VideoRequest
from .ytdlp import metadata_command, run

logger = logging.getLogger("lexicast")


class MetadataProber:
    """Fetch title, thumbnail, duration and native chapters without downloading media."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def probe(self, request: VideoRequest) -> VideoMetadata:
        """Return metadata for the video, or empty metadata on any failure."""
        logger.info("Step 1: probing video metadata...")
        cmd = metadata_command(request.url, self.settings)
        try:
            stdout = await run(cmd, timeout=self.settings.metadata_timeout)
            info = json.loads(stdout)
            if not isinstance(info, dict):
                raise ValueError("metadata output is not a JSON object")
            metadata = self._from_info(info)
        except Exception as e:
            logger.warning("Metadata probe failed, continuing without it: %s", e)
            return VideoMetadata()

        logger.info(
            "Metadata: %s (%s chapters)",
            metadata.title,
            len(metadata.native_chapters),
        )
        return metadata

    @staticmethod
    def _from_info(info: dict) -> VideoMetadata:
        duration = info.get("duration")
        chapters = normalize_native_chapters(info.get("chapters"), duration)
        try:
            return VideoMetadata(
                id=info.get("id"),
                title=info.get("title"),
                thumbnail=info.get("thumbnail"),
                duration=duration,
                upload_date=info.get("upload_date"),
                chapters=chapters or None,
            )
        except ValidationError as e:
            raise ValueError(f"unexpected metadata fields: {e}") from e
