"""
Tests for the analysis payload schema.
"""

import copy

import pytest
from pydantic import ValidationError

from lexicast.models import AnalysisResult, AssetState, Chapter, TranscriptSegment, VideoMetadata, VideoRequest

from conftest import SAMPLE_ANALYSIS


def test_analysis_result_from_wire_format():
    """Wire keys map onto Python attributes and timestamps become seconds."""
    result = AnalysisResult.model_validate(SAMPLE_ANALYSIS)

    assert len(result.segments) == 2
    assert result.segments[1].english_text == "Today we talk about RAG."
    assert result.segments[1].chinese_text == "今天我们聊聊 RAG。"
    assert result.segments[1].start_time == 4.0
    assert result.chapters[1].end_time == 9.0
    assert result.red_list[0].example_cn.startswith("我们")
    assert result.blue_list[0].term == "RAG"


def test_analysis_result_serializes_back_to_wire_format():
    result = AnalysisResult.model_validate(SAMPLE_ANALYSIS)
    data = result.to_dict()

    assert data["segments"][0] == SAMPLE_ANALYSIS["segments"][0]
    assert data["chapters"] == SAMPLE_ANALYSIS["chapters"]
    assert set(data) == {"segments", "chapters", "red_list", "blue_list"}


def test_optional_lists_default_to_empty():
    result = AnalysisResult.model_validate({"segments": []})
    assert result.chapters == []
    assert result.red_list == []
    assert result.blue_list == []


def test_missing_segments_is_rejected():
    with pytest.raises(ValidationError):
        AnalysisResult.model_validate({"chapters": []})


def test_overlapping_segments_are_rejected():
    data = copy.deepcopy(SAMPLE_ANALYSIS)
    data["segments"][1]["start"] = "00:02"
    with pytest.raises(ValidationError, match="overlap"):
        AnalysisResult.model_validate(data)


def test_one_second_segment_overlap_is_tolerated():
    data = copy.deepcopy(SAMPLE_ANALYSIS)
    data["segments"][1]["start"] = "00:03"
    result = AnalysisResult.model_validate(data)
    assert result.segments[1].start_time == 3.0


def test_chapter_gap_is_left_to_reconciliation():
    """Contiguity only matters once AI chapters are chosen, so parsing accepts gaps."""
    data = copy.deepcopy(SAMPLE_ANALYSIS)
    data["chapters"][1]["start"] = "00:30"
    data["chapters"][1]["end"] = "00:40"
    result = AnalysisResult.model_validate(data)
    assert [c.start_time for c in result.chapters] == [0.0, 30.0]


def test_chapter_must_not_end_before_start():
    with pytest.raises(ValidationError, match="ends before it starts"):
        Chapter(title="Backwards", start="01:00", end="00:50")


def test_zero_length_chapter_parses_as_empty():
    chapter = Chapter(title="Rounded", start="01:00", end="01:00")
    assert chapter.is_empty


def test_segment_accepts_python_names():
    seg = TranscriptSegment(english_text="Hi", chinese_text="你好", start_time=1, end_time=2)
    assert seg.english_text == "Hi"
    assert seg.model_dump(mode="json", by_alias=True) == {"en": "Hi", "cn": "你好", "start": "00:01", "end": "00:02"}


def test_empty_metadata_serializes_to_empty_dict():
    assert VideoMetadata().to_dict() == {}
    assert VideoMetadata().native_chapters == []


def test_video_request_rejects_blank_url():
    with pytest.raises(ValidationError):
        VideoRequest(url="   ")


def test_asset_state_terminal():
    assert AssetState.ACTIVE.is_terminal
    assert AssetState.FAILED.is_terminal
    assert not AssetState.PROCESSING.is_terminal
    assert not AssetState.UPLOADING.is_terminal
