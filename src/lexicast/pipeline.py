"""
Media analysis pipeline: metadata -> audio -> upload -> wait -> analyze -> parse.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from google import genai

from .analyzer import ContentAnalyzer
from .audio import AudioExtractor
from .chapters import reconcile_chapters
from .cleanup import ResourceReclaimer
from .config import Settings
from .cost import estimate_costs
from .errors import PipelineTimeoutError
from .metadata import MetadataProber
from .models import AnalysisResult, LocalAudioAsset, VideoMetadata, VideoRequest
from .remote import RemoteAssetManager
from .sanitize import parse_analysis

logger = logging.getLogger("lexicast")


@dataclass(frozen=True)
class PipelineOutcome:
    """Successful result of one invocation."""

    analysis: AnalysisResult
    metadata: VideoMetadata

    def to_response(self) -> dict:
        return {
            "success": True,
            "data": self.analysis.to_dict(),
            "metadata": self.metadata.to_dict(),
        }


class AnalysisPipeline:
    """
    Runs one video through every stage and always reclaims its resources.

    Components are injected so that a single process-wide Gemini client and
    yt-dlp configuration can be shared by concurrent invocations.
    """

    def __init__(
        self,
        *,
        prober: MetadataProber,
        extractor: AudioExtractor,
        assets: RemoteAssetManager,
        analyzer: ContentAnalyzer,
        scratch_dir: Path,
        timeout: Optional[float] = None,
    ):
        self.prober = prober
        self.extractor = extractor
        self.assets = assets
        self.analyzer = analyzer
        self.scratch_dir = Path(scratch_dir)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, client: genai.Client) -> "AnalysisPipeline":
        return cls(
            prober=MetadataProber(settings),
            extractor=AudioExtractor(settings),
            assets=RemoteAssetManager(
                client,
                poll_interval=settings.poll_interval,
                max_wait=settings.max_wait,
                retry_attempts=settings.retry_attempts,
            ),
            analyzer=ContentAnalyzer(
                client,
                model=settings.model,
                retry_attempts=settings.retry_attempts,
            ),
            scratch_dir=settings.scratch_dir,
            timeout=settings.pipeline_timeout,
        )

    async def run(self, url: str) -> PipelineOutcome:
        """Analyze one video; raises a PipelineError subclass on failure."""
        request = VideoRequest(url=url)
        logger.info("Processing video: %s", request.url)
        if not self.timeout:
            return await self._run(request)
        try:
            return await asyncio.wait_for(self._run(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            msg = f"Pipeline did not finish within {self.timeout:.0f}s"
            logger.error(msg)
            raise PipelineTimeoutError(msg) from None

    async def _run(self, request: VideoRequest) -> PipelineOutcome:
        metadata_task = asyncio.create_task(self._probe_metadata(request))
        try:
            async with ResourceReclaimer(self.assets) as reclaimer:
                workdir = reclaimer.make_workdir(self.scratch_dir)
                audio = await self.extractor.extract(request, workdir)
                reclaimer.track_local(audio)

                remote = await self.assets.upload(audio)
                reclaimer.track_remote(remote)
                remote = await self.assets.await_ready(remote)

                raw_text = await self.analyzer.analyze(remote)
                analysis = parse_analysis(raw_text)

            metadata = await metadata_task
        finally:
            if not metadata_task.done():
                metadata_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await metadata_task

        self._log_cost(audio, metadata)
        chapters = reconcile_chapters(metadata.native_chapters, analysis.chapters)
        analysis = analysis.model_copy(update={"chapters": chapters})
        logger.info("Analysis finished: %s", metadata.title or request.url)
        return PipelineOutcome(analysis=analysis, metadata=metadata)

    async def _probe_metadata(self, request: VideoRequest) -> VideoMetadata:
        try:
            return await self.prober.probe(request)
        except Exception as e:
            logger.warning("Metadata probe raised, continuing without it: %s", e)
            return VideoMetadata()

    @staticmethod
    def _log_cost(audio: LocalAudioAsset, metadata: VideoMetadata) -> None:
        seconds = audio.duration_seconds or metadata.duration
        if not seconds:
            return
        est = estimate_costs(seconds / 60.0)
        logger.info(
            "Estimated usage for %.1f min: %d input / %d output tokens, ~$%.4f",
            seconds / 60.0,
            est["tokens_in"],
            est["tokens_out"],
            est["total"],
        )
