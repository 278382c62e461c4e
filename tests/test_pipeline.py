"""Tests del pipeline de escenas."""

import httpx
import pytest

from short_creator.domain.errors import NoFootageFoundError, NoMatchingMusicError, PipelineError
from short_creator.domain.models import Caption, Job, MusicMood, RenderConfig, SceneInput
from short_creator.pipeline import ScenePipeline

from conftest import (
    FakeEncoder,
    FakeFootageSelector,
    FakeRenderer,
    FakeSynthesizer,
    FakeTranscriber,
    make_selector,
    pexels_video,
)


def make_job(count=3, padding=None, music=None, job_id="job1"):
    scenes = [
        SceneInput(text=f"Scene number {i}", search_terms=[f"term{i}a", f"term{i}b"])
        for i in range(count)
    ]
    return Job(id=job_id, scenes=scenes, config=RenderConfig(padding_back=padding, music=music))


@pytest.fixture
def parts(settings):
    return {
        "synthesizer": FakeSynthesizer([2.0, 3.0, 4.0]),
        "encoder": FakeEncoder(),
        "transcriber": FakeTranscriber(),
        "footage_selector": FakeFootageSelector(),
        "renderer": FakeRenderer(settings.videos_dir),
    }


def build(settings, music_selector, parts):
    return ScenePipeline(settings=settings, music_selector=music_selector, **parts)


def temp_files(settings):
    return list(settings.temp_dir.iterdir())


class TestScenePipeline:

    def test_produces_video(self, settings, music_selector, parts):
        output = build(settings, music_selector, parts).run(make_job())

        assert output == settings.videos_dir / "job1.mp4"
        assert output.exists()
        assert [c[0] for c in parts["synthesizer"].calls] == [
            "Scene number 0", "Scene number 1", "Scene number 2"
        ]
        assert all(voice == settings.voice for _, voice in parts["synthesizer"].calls)

    def test_scene_records(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job())

        composition, job_id = parts["renderer"].compositions[0]
        assert job_id == "job1"
        assert [s.video for s in composition.scenes] == [
            "https://videos/clip-1.mp4",
            "https://videos/clip-2.mp4",
            "https://videos/clip-3.mp4",
        ]
        assert composition.scenes[0].captions == [
            Caption(text=" Hello", start_ms=0, end_ms=100),
            Caption(text=" world", start_ms=100, end_ms=200),
        ]
        for scene in composition.scenes:
            assert scene.audio.url.startswith("file://")
            assert scene.audio.url.endswith(".mp3")

    def test_duration_without_padding(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job())

        composition, _ = parts["renderer"].compositions[0]
        assert [s.audio.duration for s in composition.scenes] == [2.0, 3.0, 4.0]
        assert composition.duration_ms == pytest.approx(9000)
        assert composition.padding_back is None

    def test_padding_counts_on_last_scene_and_total(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job(padding=1500))

        composition, _ = parts["renderer"].compositions[0]
        assert [s.audio.duration for s in composition.scenes] == [2.0, 3.0, 5.5]
        assert composition.duration_ms == pytest.approx(12000)
        assert composition.padding_back == 1500

    def test_footage_uses_spoken_duration_and_growing_exclusions(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job(padding=1500))

        calls = parts["footage_selector"].calls
        assert [c[0] for c in calls] == [
            ["term0a", "term0b"], ["term1a", "term1b"], ["term2a", "term2b"]
        ]
        assert [c[1] for c in calls] == [2.0, 3.0, 4.0]
        assert [c[2] for c in calls] == [set(), {"clip-1"}, {"clip-1", "clip-2"}]

    def test_music_mood_is_forwarded(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job(music=MusicMood.DARK))

        composition, _ = parts["renderer"].compositions[0]
        assert composition.music.mood == MusicMood.DARK

    def test_transcribes_normalized_audio(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job())

        assert all(p.suffix == ".wav" for p in parts["transcriber"].paths)
        assert len(parts["encoder"].written) == 6

    def test_temp_files_removed_on_success(self, settings, music_selector, parts):
        build(settings, music_selector, parts).run(make_job())

        assert parts["encoder"].written
        assert temp_files(settings) == []

    def test_scene_failure_aborts_job(self, settings, music_selector, parts):
        parts["footage_selector"] = FakeFootageSelector(fail_on_call=1)

        with pytest.raises(PipelineError) as exc_info:
            build(settings, music_selector, parts).run(make_job())

        assert exc_info.value.job_id == "job1"
        assert exc_info.value.scene_index == 1
        assert isinstance(exc_info.value.__cause__, NoFootageFoundError)
        assert parts["renderer"].compositions == []
        assert len(parts["synthesizer"].calls) == 2
        assert temp_files(settings) == []

    def test_render_failure_cleans_up(self, settings, music_selector, parts):
        parts["renderer"] = FakeRenderer(settings.videos_dir, fail=True)

        with pytest.raises(PipelineError) as exc_info:
            build(settings, music_selector, parts).run(make_job())

        assert exc_info.value.scene_index is None
        assert temp_files(settings) == []
        assert not (settings.videos_dir / "job1.mp4").exists()

    def test_missing_music_fails_job(self, settings, music_selector, parts):
        with pytest.raises(PipelineError) as exc_info:
            build(settings, music_selector, parts).run(make_job(music=MusicMood.ANGRY))

        assert isinstance(exc_info.value.__cause__, NoMatchingMusicError)
        assert parts["renderer"].compositions == []

    def test_public_url_for_audio(self, settings, music_selector, parts):
        settings.public_url = "http://localhost:3123/"

        build(settings, music_selector, parts).run(make_job(count=1))

        composition, _ = parts["renderer"].compositions[0]
        url = composition.scenes[0].audio.url
        assert url.startswith("http://localhost:3123/api/tmp/job1_")
        assert url.endswith(".mp3")


class TestPipelineWithPexels:

    def test_distinct_footage_across_scenes(self, settings, music_selector, parts):
        def handler(request):
            return httpx.Response(200, json={"videos": [pexels_video(i) for i in (1, 2, 3)]})

        parts["footage_selector"] = make_selector(handler)
        build(settings, music_selector, parts).run(make_job())

        composition, _ = parts["renderer"].compositions[0]
        urls = [s.video for s in composition.scenes]
        assert len(set(urls)) == 3

    def test_no_footage_found_leaves_no_temp_files(self, settings, music_selector, parts):
        def handler(request):
            return httpx.Response(200, json={"videos": []})

        parts["footage_selector"] = make_selector(handler)

        with pytest.raises(PipelineError) as exc_info:
            build(settings, music_selector, parts).run(make_job())

        assert isinstance(exc_info.value.__cause__, NoFootageFoundError)
        assert exc_info.value.scene_index == 0
        assert temp_files(settings) == []

    def test_close_releases_adapters(self, settings, music_selector, parts):
        build(settings, music_selector, parts).close()

        assert parts["footage_selector"].closed
        assert parts["renderer"].closed
