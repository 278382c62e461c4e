"""
Motor Edge-TTS para generación de voz.
Usa voces neurales de Microsoft Edge - rápido, estable, gratuito.
"""

import asyncio
import io
import logging
import re

from pydub import AudioSegment

from ..domain.models import SpeechResult

logger = logging.getLogger(__name__)

# Voces recomendadas para narración en inglés
ENGLISH_VOICES = {
    "en-US-AriaNeural": "Aria (EE.UU., femenino)",
    "en-US-GuyNeural": "Guy (EE.UU., masculino)",
    "en-US-JennyNeural": "Jenny (EE.UU., femenino)",
    "en-GB-SoniaNeural": "Sonia (Reino Unido, femenino)",
    "en-GB-RyanNeural": "Ryan (Reino Unido, masculino)",
    "en-AU-NatashaNeural": "Natasha (Australia, femenino)",
}

DEFAULT_VOICE = "en-US-AriaNeural"


def clean_text_for_tts(text: str) -> str:
    """
    Limpia texto para síntesis TTS, removiendo elementos problemáticos.
    """
    # Remover URLs
    text = re.sub(r'https?://\S+', '', text)
    text = re.sub(r'www\.\S+', '', text)

    # Remover caracteres de markdown
    text = re.sub(r'[*_~`|<>{}[\]\\]', '', text)

    # Normalizar espacios y puntuación
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'[.]{2,}', '.', text)

    return text.strip()


class EdgeTTSEngine:
    """Motor de Text-to-Speech usando Edge-TTS (Microsoft Neural Voices)."""

    def __init__(self, rate: str = "+0%", pitch: str = "+0Hz"):
        """
        Args:
            rate: Velocidad del habla (ej: "+10%", "-5%")
            pitch: Tono de voz (ej: "+5Hz", "-10Hz")
        """
        self.rate = rate
        self.pitch = pitch

    async def _synthesize_async(self, text: str, voice: str) -> bytes:
        import edge_tts

        communicate = edge_tts.Communicate(
            text=text,
            voice=voice,
            rate=self.rate,
            pitch=self.pitch
        )

        audio = bytearray()
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio.extend(chunk["data"])
        return bytes(audio)

    def generate(self, text: str, voice: str = DEFAULT_VOICE) -> SpeechResult:
        """
        Sintetiza el texto de una escena en memoria.

        Returns:
            SpeechResult con el MP3 y su duración en segundos
        """
        text = clean_text_for_tts(text)
        if not text:
            raise ValueError("Texto vacío después de limpieza")

        logger.info(f"🗣️ Sintetizando {len(text)} caracteres con {ENGLISH_VOICES.get(voice, voice)}")

        # El pipeline corre en su propio hilo, sin event loop activo
        audio = asyncio.run(self._synthesize_async(text, voice))
        if not audio:
            raise RuntimeError("Edge-TTS no devolvió audio")

        duration = len(AudioSegment.from_file(io.BytesIO(audio), format="mp3")) / 1000.0
        logger.info(f"✓ Audio generado ({duration:.2f}s)")
        return SpeechResult(audio=audio, duration=duration)
