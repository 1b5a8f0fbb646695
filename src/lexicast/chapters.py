"""
Chapter normalization and reconciliation.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from .models import TIMESTAMP_TOLERANCE, Chapter
from .timecode import format_time

logger = logging.getLogger("lexicast")


def normalize_native_chapters(
    raw_chapters: Optional[list[dict[str, Any]]], duration: Optional[float] = None
) -> list[Chapter]:
    """
    Convert yt-dlp chapter dicts ({start_time, end_time, title}) to Chapters.

    A missing end is taken from the next chapter's start, or from the total
    duration for the last chapter. Entries that still have no valid span are
    dropped.
    """
    if not raw_chapters:
        return []

    chapters: list[Chapter] = []
    for i, item in enumerate(raw_chapters):
        start = item.get("start_time")
        end = item.get("end_time")
        if end is None:
            if i + 1 < len(raw_chapters):
                end = raw_chapters[i + 1].get("start_time")
            else:
                end = duration
        title = (item.get("title") or "").strip() or f"Chapter {i + 1}"
        if start is None or end is None:
            logger.debug("Skipping chapter without timing: %s", item)
            continue
        try:
            chapter = Chapter(title=title, start=start, end=end)
        except ValidationError as e:
            logger.debug("Skipping invalid chapter %r: %s", title, e)
            continue
        if chapter.is_empty:
            logger.debug("Skipping zero-length chapter %r", title)
            continue
        chapters.append(chapter)
    return chapters


def contiguity_gap(chapters: list[Chapter]) -> Optional[tuple[Chapter, Chapter]]:
    """Return the first adjacent pair whose boundary is off by more than the tolerance."""
    for prev, cur in zip(chapters, chapters[1:]):
        if abs(cur.start_time - prev.end_time) > TIMESTAMP_TOLERANCE:
            return prev, cur
    return None


def usable_ai_chapters(ai: list[Chapter]) -> list[Chapter]:
    """
    Drop zero-length AI chapters and check the rest are contiguous.

    A gapped or overlapping list is discarded as a whole with a warning; a
    broken chapter list never fails the run.
    """
    chapters = [c for c in ai if not c.is_empty]
    if len(chapters) != len(ai):
        logger.debug("Dropped %d zero-length AI chapters", len(ai) - len(chapters))
    gap = contiguity_gap(chapters)
    if gap is not None:
        prev, cur = gap
        logger.warning(
            "AI chapters are not contiguous (%r ends %s, %r starts %s), discarding them",
            prev.title,
            format_time(prev.end_time),
            cur.title,
            format_time(cur.start_time),
        )
        return []
    return chapters


def reconcile_chapters(native: list[Chapter], ai: list[Chapter]) -> list[Chapter]:
    """Native chapters win outright; AI chapters are only used when there are none."""
    if native:
        logger.info("Using %d native chapters", len(native))
        return native
    chapters = usable_ai_chapters(ai)
    if chapters:
        logger.info("Using %d AI-generated chapters", len(chapters))
    return chapters
