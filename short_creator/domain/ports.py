"""
Puertos hacia los motores externos (TTS, transcodificación, STT, render).
El pipeline solo depende de estas interfaces.
"""
from pathlib import Path
from typing import List, Protocol

from .models import Composition, SpeechResult, TranscriptionRecord


class SpeechSynthesizer(Protocol):
    def generate(self, text: str, voice: str) -> SpeechResult:
        ...


class AudioEncoder(Protocol):
    def normalize(self, audio: bytes, output_path: Path) -> Path:
        """Guarda una versión WAV normalizada, apta para transcripción."""
        ...

    def encode(self, audio: bytes, output_path: Path) -> Path:
        """Guarda una versión comprimida, apta para streaming."""
        ...


class Transcriber(Protocol):
    def transcribe(self, audio_path: Path) -> List[TranscriptionRecord]:
        ...


class VideoRenderer(Protocol):
    def render(self, composition: Composition, job_id: str) -> Path:
        ...

    def close(self) -> None:
        """Libera los recursos del renderizador."""
        ...
