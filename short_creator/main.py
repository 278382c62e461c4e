"""
Entrada principal del creador de shorts.
"""
import argparse
import json
import logging
import random
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from .audio.captions import CaptionBuilder
from .audio.encoder import PydubAudioEncoder
from .audio.engine import WhisperTranscriber
from .config import DEFAULT_CONFIG_PATH, Settings
from .domain.errors import ConfigurationError
from .domain.models import RenderConfig, SceneInput, VideoStatus
from .infrastructure.compositor import VideoCompositor
from .infrastructure.pexels import FootageSelector, PexelsClient
from .music.library import MusicCatalog, MusicSelector
from .orchestrator import ShortCreator
from .pipeline import ScenePipeline
from .tts.edge_tts import EdgeTTSEngine

console = Console()


def build_short_creator(settings: Settings) -> ShortCreator:
    """Arma el orquestador con los motores reales."""
    rng = random.Random()
    catalog = MusicCatalog(settings.music_catalog, settings.music_dir)
    music_selector = MusicSelector(catalog, rng=rng)

    pipeline = ScenePipeline(
        settings=settings,
        synthesizer=EdgeTTSEngine(),
        encoder=PydubAudioEncoder(),
        transcriber=WhisperTranscriber(model_size=settings.whisper_model, device=settings.whisper_device),
        footage_selector=FootageSelector(
            PexelsClient(settings.pexels_api_key, timeout=settings.pexels_timeout),
            retries=settings.pexels_retries,
            rng=rng,
        ),
        music_selector=music_selector,
        renderer=VideoCompositor(
            output_dir=str(settings.videos_dir),
            temp_dir=str(settings.temp_dir),
            font=settings.caption_font,
        ),
        caption_builder=CaptionBuilder(),
    )
    return ShortCreator(pipeline, music_selector, settings.videos_dir)


def load_script(path: str):
    """Lee un guión JSON: {"scenes": [...], "config": {...}}."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    scenes = [SceneInput.model_validate(s) for s in data.get("scenes", [])]
    config = RenderConfig.model_validate(data.get("config") or {})
    return scenes, config


def produce_script(creator: ShortCreator, settings: Settings, script_path: str) -> bool:
    """Encola un guión, espera a que termine y devuelve True si quedó listo."""
    # Solo el render necesita los archivos de música
    MusicCatalog(settings.music_catalog, settings.music_dir).ensure_music_files_exist()

    scenes, config = load_script(script_path)
    console.print(Panel(
        f"[bold magenta]🎬 {len(scenes)} escenas[/bold magenta]\n"
        f"Guión: {Path(script_path).name}",
        title="Creador de Shorts"
    ))
    video_id = creator.enqueue(scenes, config)
    creator.wait_until_idle()

    if creator.status(video_id) == VideoStatus.READY:
        console.print(f"\n[bold green]🎬 Video listo: {creator.get_video_path(video_id)}[/bold green]\n")
        return True
    console.print(f"\n[red]✗ El video {video_id} falló (ver logs)[/red]\n")
    return False


def main(argv=None):
    "Punto de entrada CLI."
    parser = argparse.ArgumentParser(description="Creador de Shorts - Pipeline")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Archivo de configuración YAML")
    parser.add_argument("--script", help="Guión JSON a producir (espera a que termine)")
    parser.add_argument("--status", metavar="ID", help="Estado de un video")
    parser.add_argument("--tags", action="store_true", help="Listar moods de música disponibles")
    parser.add_argument("--delete", metavar="ID", help="Eliminar un video")
    args = parser.parse_args(argv)

    settings = Settings.load(args.config)
    logging.basicConfig(level=settings.log_level.upper())
    settings.ensure_dirs()

    try:
        settings.ensure_config()
    except ConfigurationError as e:
        console.print(f"[red]Error de configuración: {e}[/red]")
        sys.exit(1)

    creator = build_short_creator(settings)
    ok = True
    try:
        if args.tags:
            console.print("[cyan]Moods disponibles:[/cyan]")
            for mood in creator.list_music_tags():
                console.print(f"  • {mood.value}")
        elif args.status:
            console.print(f"{args.status}: {creator.status(args.status).value}")
        elif args.delete:
            creator.delete_video(args.delete)
            console.print(f"[green]✓ Video {args.delete} eliminado[/green]")
        elif args.script:
            ok = produce_script(creator, settings, args.script)
        else:
            parser.print_help()
    except ConfigurationError as e:
        console.print(f"[red]Error de configuración: {e}[/red]")
        ok = False
    finally:
        creator.shutdown()
        creator.pipeline.close()

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
