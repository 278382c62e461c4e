"""
Compositor Visual
Ensambla escenas, voz, música y subtítulos para generar el video final.
"""
import logging
import os
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx
from moviepy import (
    AudioFileClip,
    CompositeAudioClip,
    CompositeVideoClip,
    TextClip,
    VideoFileClip,
    afx,
    concatenate_videoclips,
    vfx,
)

from ..domain.models import Caption, Composition
from ..utils.backoff import with_retry
from ..utils.tempfiles import TempFileScope

logger = logging.getLogger(__name__)


class VideoCompositor:
    """
    Motor de renderizado basado en MoviePy.
    """

    # Dimensiones para Shorts/Reels
    WIDTH = 1080
    HEIGHT = 1920
    FPS = 30

    def __init__(
        self,
        output_dir: str,
        temp_dir: str,
        font: Optional[str] = None,
        music_volume: float = 0.1,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            output_dir: Directorio de los videos finales
            temp_dir: Directorio para descargas temporales
            font: Fuente TTF para los subtítulos (None = fuente por defecto)
            music_volume: Volumen relativo de la música de fondo
            transport: Transporte httpx alternativo (tests)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.temp_dir = Path(temp_dir)
        self.font = font
        self.music_volume = music_volume
        self.client = httpx.Client(timeout=60.0, follow_redirects=True, transport=transport)

    def render(self, composition: Composition, job_id: str) -> Path:
        """
        Renderiza el video final uniendo las escenas.

        Returns:
            Path del video generado (<output_dir>/<job_id>.mp4)
        """
        output_path = self.output_dir / f"{job_id}.mp4"
        partial_path = self.output_dir / f"{job_id}.part.mp4"
        total = composition.duration
        opened = []

        logger.info(f"🎬 Iniciando composición de {len(composition.scenes)} escenas ({total:.1f}s)...")

        with TempFileScope(self.temp_dir, prefix=f"{job_id}_render") as downloads:
            try:
                video_clips = []
                audio_clips = []
                overlays = []
                current_time = 0.0

                for i, scene in enumerate(composition.scenes):
                    duration = scene.audio.duration

                    clip = VideoFileClip(str(self.resolve(scene.video, downloads, ".mp4")), audio=False)
                    opened.append(clip)
                    clip = self._fit_vertical(clip)
                    if clip.duration < duration:
                        clip = clip.with_effects([vfx.Loop(duration=duration)])
                    else:
                        clip = clip.subclipped(0, duration)
                    video_clips.append(clip)

                    voice = AudioFileClip(str(self.resolve(scene.audio.url, downloads, ".mp3")))
                    opened.append(voice)
                    audio_clips.append(voice.with_start(current_time))

                    overlays.extend(self._caption_clips(scene.captions, current_time))
                    current_time += duration
                    logger.debug(f"  🎞️ Escena {i + 1} procesada ({duration:.2f}s)")

                music = AudioFileClip(str(composition.music.path))
                opened.append(music)
                music = music.subclipped(composition.music.start, composition.music.end)
                audio_clips.append(music.with_effects([
                    afx.AudioLoop(duration=total),
                    afx.MultiplyVolume(self.music_volume),
                ]))

                base = concatenate_videoclips(video_clips, method="compose")
                final = CompositeVideoClip([base, *overlays], size=(self.WIDTH, self.HEIGHT))
                final = final.with_duration(total)
                final = final.with_audio(CompositeAudioClip(audio_clips).with_duration(total))
                opened.append(final)

                logger.info(f"🚀 Renderizando video final: {output_path}...")
                final.write_videofile(
                    str(partial_path),
                    fps=self.FPS,
                    codec="libx264",
                    audio_codec="aac",
                    threads=4,
                    preset="fast",
                    logger=None,
                )
                os.replace(partial_path, output_path)
                return output_path

            except Exception as e:
                logger.error(f"Error renderizando video {job_id}: {e}")
                partial_path.unlink(missing_ok=True)
                raise
            finally:
                for clip in opened:
                    try:
                        clip.close()
                    except Exception as e:
                        logger.debug(f"Error cerrando clip: {e}")

    def _fit_vertical(self, clip):
        width, height = clip.size
        if (width, height) == (self.WIDTH, self.HEIGHT):
            return clip

        # Escalar hasta cubrir el cuadro y recortar al centro
        scale = max(self.WIDTH / width, self.HEIGHT / height)
        clip = clip.resized(scale)
        return clip.cropped(
            x_center=clip.w / 2,
            y_center=clip.h / 2,
            width=self.WIDTH,
            height=self.HEIGHT,
        )

    def _caption_clips(self, captions: List[Caption], offset: float) -> list:
        clips = []
        for caption in captions:
            text = caption.text.strip()
            if not text:
                continue
            duration = max((caption.end_ms - caption.start_ms) / 1000, 0.05)
            clip = TextClip(
                font=self.font,
                text=text,
                font_size=90,
                color="white",
                stroke_color="black",
                stroke_width=5,
                method="caption",
                size=(self.WIDTH - 160, None),
                text_align="center",
            )
            clips.append(
                clip.with_start(offset + caption.start_ms / 1000)
                .with_duration(duration)
                .with_position(("center", int(self.HEIGHT * 0.7)))
            )
        return clips

    def resolve(self, url: str, downloads: TempFileScope, suffix: str) -> Path:
        """Devuelve una ruta local para la URL, descargándola si es remota."""
        parsed = urlparse(url)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path))
        if parsed.scheme in ("http", "https"):
            return self._download_file(url, downloads.allocate(suffix))
        return Path(url)

    @with_retry(max_attempts=3, min_wait=1.0, max_wait=10.0, exceptions=(httpx.HTTPError,))
    def _download_file(self, url: str, target_path: Path) -> Path:
        """Descarga un archivo a disco."""
        with self.client.stream("GET", url) as response:
            response.raise_for_status()
            with open(target_path, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
        return target_path

    def close(self):
        self.client.close()
