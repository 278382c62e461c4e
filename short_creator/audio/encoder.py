"""
Codificación de audio con pydub.
Guarda el audio sintetizado en WAV normalizado (Whisper) y en MP3 (streaming).
"""
import io
import logging
from pathlib import Path

from pydub import AudioSegment

logger = logging.getLogger(__name__)


class PydubAudioEncoder:
    """Convierte el audio en memoria a los formatos que necesita el pipeline."""

    def __init__(self, sample_rate: int = 16000, bitrate: str = "128k", source_format: str = "mp3"):
        """
        Args:
            sample_rate: Frecuencia del WAV normalizado (Whisper trabaja a 16 kHz)
            bitrate: Bitrate del MP3 comprimido
            source_format: Formato del audio recibido del TTS
        """
        self.sample_rate = sample_rate
        self.bitrate = bitrate
        self.source_format = source_format

    def _load(self, audio: bytes) -> AudioSegment:
        return AudioSegment.from_file(io.BytesIO(audio), format=self.source_format)

    def normalize(self, audio: bytes, output_path: Path) -> Path:
        segment = (
            self._load(audio)
            .set_frame_rate(self.sample_rate)
            .set_channels(1)
            .set_sample_width(2)
        )
        segment.export(str(output_path), format="wav")
        logger.debug(f"WAV normalizado: {output_path}")
        return Path(output_path)

    def encode(self, audio: bytes, output_path: Path) -> Path:
        self._load(audio).export(str(output_path), format="mp3", bitrate=self.bitrate)
        logger.debug(f"MP3 generado: {output_path}")
        return Path(output_path)
