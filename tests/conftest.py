"""Fixtures y dobles de prueba compartidos."""

import random
import threading
from pathlib import Path

import httpx
import pytest
from tenacity import wait_none

from short_creator.config import Settings
from short_creator.domain.models import (
    Composition,
    FootageItem,
    Offsets,
    SpeechResult,
    TranscriptionRecord,
    TranscriptionToken,
)
from short_creator.infrastructure.pexels import FootageSelector, PexelsClient
from short_creator.music.library import MusicCatalog, MusicSelector

MUSIC_YAML = """
tracks:
  - file: calm.mp3
    mood: chill
  - file: calm2.mp3
    mood: chill
  - file: storm.mp3
    mood: dark
  - file: sunny.mp3
    mood: happy
"""


def pexels_video(video_id, duration=20, fps=30, files=None):
    """Item de respuesta de Pexels con una variante HD 1080x1920 por defecto."""
    if files is None:
        files = [{
            "id": video_id * 10,
            "quality": "hd",
            "width": 1080,
            "height": 1920,
            "fps": fps,
            "link": f"https://videos.pexels.com/{video_id}.mp4",
        }]
    return {"id": video_id, "duration": duration, "video_files": files}


def mock_client(handler, api_key="test-key") -> PexelsClient:
    return PexelsClient(api_key, transport=httpx.MockTransport(handler))


def make_selector(handler, seed=1, retries=3, api_key="test-key") -> FootageSelector:
    return FootageSelector(
        mock_client(handler, api_key=api_key),
        retries=retries,
        rng=random.Random(seed),
        retry_wait=wait_none(),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    settings = Settings(data_dir=tmp_path / "data", pexels_api_key="test-key")
    settings.ensure_dirs()
    return settings


@pytest.fixture
def music_catalog(tmp_path) -> MusicCatalog:
    catalog_path = tmp_path / "music.yaml"
    catalog_path.write_text(MUSIC_YAML, encoding="utf-8")
    music_dir = tmp_path / "music"
    music_dir.mkdir()
    return MusicCatalog(str(catalog_path), str(music_dir))


@pytest.fixture
def music_selector(music_catalog) -> MusicSelector:
    return MusicSelector(music_catalog, rng=random.Random(7))


class FakeSynthesizer:
    def __init__(self, durations):
        self.durations = list(durations)
        self.calls = []

    def generate(self, text, voice):
        self.calls.append((text, voice))
        return SpeechResult(audio=b"mp3-bytes", duration=self.durations[len(self.calls) - 1])


class FakeEncoder:
    def __init__(self):
        self.written = []

    def normalize(self, audio, output_path):
        Path(output_path).write_bytes(b"wav")
        self.written.append(Path(output_path))
        return Path(output_path)

    def encode(self, audio, output_path):
        Path(output_path).write_bytes(b"mp3")
        self.written.append(Path(output_path))
        return Path(output_path)


class FakeTranscriber:
    def __init__(self):
        self.paths = []

    def transcribe(self, audio_path):
        self.paths.append(Path(audio_path))
        assert Path(audio_path).exists()
        return [TranscriptionRecord(
            text=" Hello world",
            offsets=Offsets(from_=0, to=200),
            tokens=[
                TranscriptionToken(text=" Hel", offsets=Offsets(from_=0, to=50)),
                TranscriptionToken(text="lo", offsets=Offsets(from_=50, to=100)),
                TranscriptionToken(text=" world", offsets=Offsets(from_=100, to=200)),
            ],
        )]


class FakeFootageSelector:
    def __init__(self, fail_on_call=None):
        self.calls = []
        self.fail_on_call = fail_on_call
        self.closed = False

    def close(self):
        self.closed = True

    def find_video(self, search_terms, min_duration, exclude_ids=()):
        self.calls.append((list(search_terms), min_duration, set(exclude_ids)))
        if self.fail_on_call is not None and len(self.calls) - 1 == self.fail_on_call:
            from short_creator.domain.errors import NoFootageFoundError
            raise NoFootageFoundError("sin clips")
        video_id = f"clip-{len(self.calls)}"
        return FootageItem(id=video_id, url=f"https://videos/{video_id}.mp4", width=1080, height=1920)


class FakeRenderer:
    def __init__(self, output_dir, fail=False):
        self.output_dir = Path(output_dir)
        self.fail = fail
        self.compositions = []
        self.closed = False

    def close(self):
        self.closed = True

    def render(self, composition: Composition, job_id):
        self.compositions.append((composition, job_id))
        if self.fail:
            raise RuntimeError("render roto")
        output_path = self.output_dir / f"{job_id}.mp4"
        output_path.write_bytes(b"video")
        return output_path


class FakePipeline:
    """Pipeline controlable: registra el orden, puede bloquear y fallar."""

    def __init__(self, videos_dir):
        self.videos_dir = Path(videos_dir)
        self.order = []
        self.gate = threading.Event()
        self.gate.set()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def run(self, job):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            self.gate.wait(timeout=5)
            self.order.append(job.id)
            if job.scenes[0].text == "fail":
                raise RuntimeError("fallo simulado")
            output_path = self.videos_dir / f"{job.id}.mp4"
            output_path.write_bytes(b"video")
            return output_path
        finally:
            with self._lock:
                self.active -= 1
