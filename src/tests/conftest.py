"""
Shared fixtures: fake Gemini client, fake extraction stages, sample responses.
"""

import json
from types import SimpleNamespace

import pytest

from lexicast.analyzer import ContentAnalyzer
from lexicast.models import LocalAudioAsset, VideoMetadata
from lexicast.pipeline import AnalysisPipeline
from lexicast.remote import RemoteAssetManager

SAMPLE_ANALYSIS = {
    "segments": [
        {"en": "Hello and welcome.", "cn": "大家好，欢迎。", "start": "00:00", "end": "00:04"},
        {"en": "Today we talk about RAG.", "cn": "今天我们聊聊 RAG。", "start": "00:04", "end": "00:09"},
    ],
    "chapters": [
        {"title": "Intro", "start": "00:00", "end": "00:04"},
        {"title": "RAG basics", "start": "00:04", "end": "00:09"},
    ],
    "red_list": [
        {
            "word": "flesh out",
            "pronunciation": "/fleʃ aʊt/",
            "definition_cn": "把想法充实、补充细节",
            "example": "We need to flesh out the plan before Monday.",
            "example_cn": "我们需要在周一前把计划充实起来。",
        }
    ],
    "blue_list": [{"term": "RAG", "definition_cn": "检索增强生成"}],
}


class FakeFiles:
    """Stands in for ``client.aio.files``."""

    def __init__(self, states=("ACTIVE",), *, upload_error=None, delete_error=None):
        self.states = list(states)
        self.upload_error = upload_error
        self.delete_error = delete_error
        self.uploaded = []
        self.polls = 0
        self.deleted = []

    def _file(self, state):
        return SimpleNamespace(
            name="files/abc123",
            uri="https://generativelanguage.googleapis.com/v1beta/files/abc123",
            mime_type="audio/mpeg",
            state=state,
        )

    async def upload(self, *, file, config=None):
        self.uploaded.append((file, config))
        if self.upload_error is not None:
            raise self.upload_error
        return self._file("PROCESSING")

    async def get(self, *, name):
        self.polls += 1
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        return self._file(state)

    async def delete(self, *, name):
        self.deleted.append(name)
        if self.delete_error is not None:
            raise self.delete_error


class FakeModels:
    """Stands in for ``client.aio.models``."""

    def __init__(self, text="", *, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, *, model, contents):
        self.calls.append((model, contents))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_client(files=None, models=None):
    return SimpleNamespace(
        aio=SimpleNamespace(files=files or FakeFiles(), models=models or FakeModels())
    )


class FakeExtractor:
    """Writes a small mp3 into the workdir instead of calling yt-dlp."""

    def __init__(self, error=None, duration=None):
        self.error = error
        self.duration = duration
        self.paths = []

    async def extract(self, request, workdir):
        path = workdir / "abc123.mp3"
        path.write_bytes(b"ID3" + b"\x00" * 1024)
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return LocalAudioAsset(path=path, size_bytes=path.stat().st_size, duration_seconds=self.duration)


class FakeProber:
    def __init__(self, metadata=None, error=None):
        self.metadata = metadata or VideoMetadata()
        self.error = error
        self.calls = 0

    async def probe(self, request):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.metadata


@pytest.fixture
def sample_response_text():
    return json.dumps(SAMPLE_ANALYSIS, ensure_ascii=False)


@pytest.fixture
def build_pipeline(tmp_path):
    """Factory returning (pipeline, files, models, extractor, prober)."""

    def _build(
        *,
        text="",
        states=("PROCESSING", "ACTIVE"),
        files=None,
        models=None,
        extractor=None,
        prober=None,
        timeout=None,
    ):
        files = files or FakeFiles(states)
        models = models or FakeModels(text)
        client = make_client(files, models)
        extractor = extractor or FakeExtractor()
        prober = prober or FakeProber()
        pipeline = AnalysisPipeline(
            prober=prober,
            extractor=extractor,
            assets=RemoteAssetManager(client, poll_interval=0, max_wait=5, retry_attempts=1),
            analyzer=ContentAnalyzer(client, model="gemini-test", retry_attempts=1),
            scratch_dir=tmp_path / "scratch",
            timeout=timeout,
        )
        return pipeline, files, models, extractor, prober

    return _build
