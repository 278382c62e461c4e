"""
Motor de transcripción
Alineación precisa (Whisper) con timestamps a nivel de palabra.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.models import Offsets, TranscriptionRecord, TranscriptionToken

logger = logging.getLogger(__name__)


def _ms(seconds: float) -> int:
    return int(round(seconds * 1000))


class WhisperTranscriber:
    """
    Transcribe audio con Whisper y devuelve segmentos con sus tokens.
    El modelo se carga la primera vez que se usa.
    """

    def __init__(self, model_size: str = "medium.en", device: Optional[str] = None, language: str = "en"):
        """
        Args:
            model_size: Tamaño del modelo Whisper ('tiny', 'base', 'small', 'medium', 'large'...)
            device: Dispositivo ('cpu', 'cuda'). Si es None, se detecta automáticamente.
            language: Idioma del audio
        """
        self.model_size = model_size
        self.device = device
        self.language = language
        self._model = None

    def _load_model(self):
        if self._model is not None:
            return self._model

        import torch
        import whisper

        if not self.device:
            self.device = "cuda" if torch.cuda.is_available() else "cpu"

        logger.info(f"⏳ Cargando modelo Whisper '{self.model_size}' en {self.device}...")
        self._model = whisper.load_model(self.model_size, device=self.device)
        logger.info("✅ Modelo Whisper cargado")
        return self._model

    def transcribe(self, audio_path: Path) -> List[TranscriptionRecord]:
        """
        Transcribe un archivo de audio.

        Args:
            audio_path: Ruta al WAV normalizado

        Returns:
            Lista de TranscriptionRecord con tokens y offsets en ms
        """
        path = Path(audio_path)
        if not path.exists():
            raise FileNotFoundError(f"No se encuentra el archivo: {audio_path}")

        model = self._load_model()
        logger.info(f"🎙️ Transcribiendo {path.name}...")
        result = model.transcribe(
            str(path),
            word_timestamps=True,
            language=self.language,
            fp16=self.device == "cuda",
        )

        records = self.to_records(result.get("segments", []))
        logger.info(f"✅ Transcripción completada: {len(records)} segmentos")
        return records

    @staticmethod
    def to_records(segments: List[Dict[str, Any]]) -> List[TranscriptionRecord]:
        """Convierte los segmentos de Whisper (segundos) al formato de registros (ms)."""
        records = []
        for segment in segments:
            tokens = [
                TranscriptionToken(
                    text=word["word"],
                    offsets=Offsets(from_=_ms(word["start"]), to=_ms(word["end"])),
                )
                for word in segment.get("words", [])
            ]
            records.append(TranscriptionRecord(
                text=segment.get("text", ""),
                offsets=Offsets(from_=_ms(segment["start"]), to=_ms(segment["end"])),
                tokens=tokens,
            ))
        return records
