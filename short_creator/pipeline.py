"""
Pipeline de escenas.
Coordina TTS → audio → Whisper → Pexels → música → render para un trabajo.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional, Set

from .audio.captions import CaptionBuilder
from .config import Settings
from .domain.errors import PipelineError
from .domain.models import Composition, Job, Scene, SceneAudio, SceneInput
from .domain.ports import AudioEncoder, SpeechSynthesizer, Transcriber, VideoRenderer
from .infrastructure.pexels import FootageSelector
from .music.library import MusicSelector
from .utils.tempfiles import TempFileScope

logger = logging.getLogger(__name__)


class ScenePipeline:
    """Produce el video final de un trabajo, escena por escena."""

    def __init__(
        self,
        settings: Settings,
        synthesizer: SpeechSynthesizer,
        encoder: AudioEncoder,
        transcriber: Transcriber,
        footage_selector: FootageSelector,
        music_selector: MusicSelector,
        renderer: VideoRenderer,
        caption_builder: Optional[CaptionBuilder] = None,
    ):
        self.settings = settings
        self.synthesizer = synthesizer
        self.encoder = encoder
        self.transcriber = transcriber
        self.footage_selector = footage_selector
        self.music_selector = music_selector
        self.renderer = renderer
        self.caption_builder = caption_builder or CaptionBuilder()

    def run(self, job: Job) -> Path:
        """
        Ejecuta el pipeline completo para un trabajo.

        Returns:
            Ruta del video renderizado

        Raises:
            PipelineError: si falla cualquier paso; no queda video parcial
        """
        logger.info(f"🚀 Produciendo video {job.id} ({len(job.scenes)} escenas)")

        with TempFileScope(self.settings.temp_dir, prefix=job.id) as temp_files:
            scenes: List[Scene] = []
            exclude_ids: Set[str] = set()
            total_duration = 0.0
            padding_back = job.config.padding_back

            for index, scene_input in enumerate(job.scenes):
                is_last = index == len(job.scenes) - 1
                try:
                    scene, duration = self._process_scene(
                        scene_input, is_last, padding_back, exclude_ids, temp_files
                    )
                except Exception as e:
                    logger.error(f"Error en escena {index} del video {job.id}: {e}")
                    raise PipelineError(
                        f"Falló la escena {index} del video {job.id}: {e}",
                        job_id=job.id,
                        scene_index=index,
                    ) from e

                scenes.append(scene)
                total_duration += duration
                logger.info(f"  🎞️ Escena {index + 1}/{len(job.scenes)} lista ({duration:.2f}s)")

            if padding_back:
                total_duration += padding_back / 1000

            try:
                music = self.music_selector.select(total_duration, job.config.music)
                logger.debug(f"Música elegida para {job.id}: {music.file}")

                output_path = self.renderer.render(
                    Composition(
                        music=music,
                        scenes=scenes,
                        duration_ms=total_duration * 1000,
                        padding_back=padding_back,
                    ),
                    job.id,
                )
            except Exception as e:
                logger.error(f"Error renderizando el video {job.id}: {e}")
                raise PipelineError(f"Falló el render del video {job.id}: {e}", job_id=job.id) from e

        logger.info(f"✅ Video {job.id} listo: {output_path} ({total_duration:.1f}s)")
        return output_path

    def _process_scene(
        self,
        scene_input: SceneInput,
        is_last: bool,
        padding_back: Optional[int],
        exclude_ids: Set[str],
        temp_files: TempFileScope,
    ):
        """Procesa una escena y devuelve (Scene, duración contabilizada)."""
        speech = self.synthesizer.generate(scene_input.text, self.settings.voice)
        spoken_duration = speech.duration

        # El padding solo alarga la duración contabilizada, no el audio
        duration = spoken_duration
        if is_last and padding_back:
            duration += padding_back / 1000

        stem = uuid.uuid4().hex
        wav_path = temp_files.allocate(".wav", stem=stem)
        mp3_path = temp_files.allocate(".mp3", stem=stem)

        self.encoder.normalize(speech.audio, wav_path)
        captions = self.caption_builder.build(self.transcriber.transcribe(wav_path))

        self.encoder.encode(speech.audio, mp3_path)

        footage = self.footage_selector.find_video(
            scene_input.search_terms, spoken_duration, frozenset(exclude_ids)
        )
        exclude_ids.add(footage.id)

        scene = Scene(
            captions=captions,
            video=footage.url,
            audio=SceneAudio(url=self.settings.audio_url(mp3_path), duration=duration),
        )
        return scene, duration

    def close(self) -> None:
        """Cierra los clientes HTTP de los adaptadores."""
        self.footage_selector.close()
        self.renderer.close()
