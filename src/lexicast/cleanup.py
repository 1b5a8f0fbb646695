"""
Scoped release of per-invocation resources.
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from .models import LocalAudioAsset, RemoteAsset
from .remote import RemoteAssetManager

logger = logging.getLogger("lexicast")


class ResourceReclaimer:
    """
    Async context manager that releases everything an invocation acquired.

    Usage::

        async with ResourceReclaimer(assets) as reclaimer:
            workdir = reclaimer.make_workdir(scratch_dir)
            audio = await extractor.extract(request, workdir)
            reclaimer.track_local(audio)
            remote = await assets.upload(audio)
            reclaimer.track_remote(remote)
            ...

    On exit, whether the body returned, raised or was cancelled, the local
    file, the workdir and the remote asset are removed. Each step is
    best-effort and only logged, so the body's own exception is never masked.
    """

    def __init__(self, assets: RemoteAssetManager):
        self.assets = assets
        self.workdir: Optional[Path] = None
        self.local: Optional[LocalAudioAsset] = None
        self.remote: Optional[RemoteAsset] = None
        self._reclaimed = False

    async def __aenter__(self) -> "ResourceReclaimer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.reclaim()
        return False

    def make_workdir(self, scratch_dir: Path) -> Path:
        """Create a unique subdirectory of ``scratch_dir`` owned by this invocation."""
        workdir = Path(scratch_dir) / uuid.uuid4().hex
        workdir.mkdir(parents=True, exist_ok=False)
        self.workdir = workdir
        return workdir

    def track_local(self, asset: LocalAudioAsset) -> None:
        self.local = asset

    def track_remote(self, asset: RemoteAsset) -> None:
        if self.remote is not None and self.remote.name != asset.name:
            raise RuntimeError(f"Remote asset {self.remote.name} is already tracked")
        self.remote = asset

    async def reclaim(self) -> None:
        """Delete the local file, the workdir and the remote asset (once)."""
        if self._reclaimed:
            return
        self._reclaimed = True
        logger.info("Step 6: cleaning up resources...")

        if self.local is not None:
            try:
                self.local.path.unlink(missing_ok=True)
                logger.info("Deleted local file %s", self.local.path.name)
            except OSError as e:
                logger.warning("Failed to delete local file %s: %s", self.local.path, e)

        if self.workdir is not None:
            try:
                shutil.rmtree(self.workdir)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Failed to remove workdir %s: %s", self.workdir, e)

        if self.remote is not None:
            try:
                await self.assets.delete(self.remote)
            except Exception as e:
                logger.warning("Failed to delete remote file %s: %s", self.remote.name, e)
