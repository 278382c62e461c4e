"""Modelos, errores y puertos del dominio."""

from .models import (
    Caption,
    Composition,
    FootageItem,
    Job,
    Music,
    MusicMood,
    RenderConfig,
    Scene,
    SceneAudio,
    SceneInput,
    SpeechResult,
    TranscriptionRecord,
    TranscriptionToken,
    VideoStatus,
)

__all__ = [
    "Caption",
    "Composition",
    "FootageItem",
    "Job",
    "Music",
    "MusicMood",
    "RenderConfig",
    "Scene",
    "SceneAudio",
    "SceneInput",
    "SpeechResult",
    "TranscriptionRecord",
    "TranscriptionToken",
    "VideoStatus",
]
