"""
Data models for the analysis pipeline.

Shapes that cross the wire (model output, outbound JSON) are pydantic models so
they can be validated; per-invocation resource handles are plain dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from .timecode import format_time, parse_time

# Allowed slack between adjacent timed items, MM:SS rounding can shift a boundary.
TIMESTAMP_TOLERANCE = 1.0


class VideoRequest(BaseModel):
    """A single video to analyze."""

    model_config = ConfigDict(frozen=True)

    url: str

    @field_validator("url")
    @classmethod
    def strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("url must not be empty")
        return value


class _Timed(BaseModel):
    """Shared timestamp parsing/serialization for timed items."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("start_time", "end_time", mode="before", check_fields=False)
    @classmethod
    def parse_timestamp(cls, value):
        return parse_time(value)

    @field_serializer("start_time", "end_time", check_fields=False)
    def format_timestamp(self, value: float) -> str:
        return format_time(value)


class Chapter(_Timed):
    """A chapter with timing (seconds) and title."""

    title: str
    start_time: float = Field(alias="start")
    end_time: float = Field(alias="end")

    @model_validator(mode="after")
    def check_order(self):
        if self.end_time < self.start_time:
            raise ValueError(
                f"chapter {self.title!r} ends before it starts "
                f"({self.start_time} > {self.end_time})"
            )
        return self

    @property
    def is_empty(self) -> bool:
        return self.end_time <= self.start_time


class TranscriptSegment(_Timed):
    """A short bilingual transcript unit."""

    english_text: str = Field(alias="en")
    chinese_text: str = Field(alias="cn")
    start_time: float = Field(alias="start")
    end_time: float = Field(alias="end")

    @model_validator(mode="after")
    def check_order(self):
        if self.end_time < self.start_time:
            raise ValueError(
                f"segment ends before it starts ({self.start_time} > {self.end_time})"
            )
        return self


class VocabularyEntry(BaseModel):
    """Red list item: advanced vocabulary or idiom."""

    model_config = ConfigDict(frozen=True)

    word: str
    pronunciation: str = ""
    definition_cn: str = ""
    example: str = ""
    example_cn: str = ""


class TermEntry(BaseModel):
    """Blue list item: domain terminology."""

    model_config = ConfigDict(frozen=True)

    term: str
    definition_cn: str = ""


class AnalysisResult(BaseModel):
    """Validated payload produced by the model for one video."""

    model_config = ConfigDict(frozen=True)

    segments: list[TranscriptSegment]
    chapters: list[Chapter] = []
    red_list: list[VocabularyEntry] = []
    blue_list: list[TermEntry] = []

    @model_validator(mode="after")
    def check_segments(self):
        for prev, cur in zip(self.segments, self.segments[1:]):
            if cur.start_time < prev.end_time - TIMESTAMP_TOLERANCE:
                raise ValueError(
                    f"segments overlap at {format_time(cur.start_time)} "
                    f"(previous ends {format_time(prev.end_time)})"
                )
        return self

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class VideoMetadata(BaseModel):
    """Metadata from the extraction tool; every field is optional."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[float] = None
    upload_date: Optional[str] = None
    chapters: Optional[list[Chapter]] = None

    @property
    def native_chapters(self) -> list[Chapter]:
        return list(self.chapters or [])

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class LocalAudioAsset:
    """Audio file downloaded for a single pipeline invocation."""

    path: Path
    size_bytes: int
    mime_type: str = "audio/mpeg"
    duration_seconds: Optional[float] = None

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1024 / 1024


class AssetState(str, Enum):
    """Processing state of an uploaded file on the inference service."""

    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (AssetState.ACTIVE, AssetState.FAILED)


@dataclass(frozen=True)
class RemoteAsset:
    """A file held by the inference service."""

    name: str
    uri: str
    mime_type: str
    state: AssetState
