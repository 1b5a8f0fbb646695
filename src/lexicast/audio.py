"""
Audio extraction with yt-dlp.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from pydub.utils import mediainfo

from .config import Settings
from .errors import ExtractionError, ToolError, ToolTimeoutError
from .models import LocalAudioAsset, VideoRequest
from .ytdlp import audio_command, run

logger = logging.getLogger("lexicast")

AUDIO_FORMAT = "mp3"
AUDIO_MIME_TYPE = "audio/mpeg"


def probe_duration(path: Path) -> Optional[float]:
    """Audio duration in seconds via ffprobe, or None if it cannot be read."""
    try:
        info = mediainfo(str(path))
        return float(info["duration"])
    except Exception as e:
        logger.debug("Could not read duration of %s: %s", path, e)
        return None


class AudioExtractor:
    """Download the best audio stream of a video into a per-invocation workdir."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def extract(self, request: VideoRequest, workdir: Path) -> LocalAudioAsset:
        """
        Download and transcode the audio track.

        ``workdir`` must be exclusive to this invocation; every file with the
        expected extension found there afterwards is treated as ours.
        """
        logger.info("Step 2: downloading audio...")
        template = str(workdir / "%(id)s.%(ext)s")
        cmd = audio_command(request.url, template, self.settings, audio_format=AUDIO_FORMAT)
        try:
            await run(cmd, timeout=self.settings.download_timeout)
        except (ToolError, ToolTimeoutError) as e:
            raise ExtractionError(f"Audio download failed: {e}") from e
        except OSError as e:
            raise ExtractionError(f"Could not start {self.settings.ytdlp_bin}: {e}") from e

        files = sorted(workdir.glob(f"*.{AUDIO_FORMAT}"))
        if not files:
            raise ExtractionError(f"Audio download failed, no {AUDIO_FORMAT} file found")
        if len(files) > 1:
            logger.warning("Found %d audio files, using %s", len(files), files[0].name)

        path = files[0]
        asset = LocalAudioAsset(
            path=path,
            size_bytes=path.stat().st_size,
            mime_type=AUDIO_MIME_TYPE,
            duration_seconds=await asyncio.to_thread(probe_duration, path),
        )
        logger.info("Audio downloaded: %s (%.2f MB)", path.name, asset.size_mb)
        return asset
