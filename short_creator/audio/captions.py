"""
Generador de subtítulos a partir de la transcripción por tokens.
Une los fragmentos de palabra en subtítulos con tiempos en milisegundos.
"""
import logging
from typing import Iterable, List

from ..domain.models import Caption, TranscriptionRecord

logger = logging.getLogger(__name__)

# Marcas internas de Whisper (timestamps, inicio de segmento...) que no son habla
NON_SPEECH_PREFIX = "[_TT"


class CaptionBuilder:
    """Convierte registros de transcripción en una lista ordenada de Caption."""

    def __init__(self, non_speech_prefix: str = NON_SPEECH_PREFIX):
        self.non_speech_prefix = non_speech_prefix

    def build(self, records: Iterable[TranscriptionRecord]) -> List[Caption]:
        captions: List[Caption] = []

        for record in records:
            if record.text == "":
                continue

            for token in record.tokens:
                if token.text.startswith(self.non_speech_prefix):
                    continue

                # Si el token no empieza con espacio y el anterior tampoco
                # termina en espacio, es la continuación de la misma palabra
                if (
                    captions
                    and not token.text.startswith(" ")
                    and not captions[-1].text.endswith(" ")
                ):
                    previous = captions[-1]
                    previous.text += token.text
                    previous.end_ms = token.offsets.to
                    continue

                captions.append(Caption(
                    text=token.text,
                    start_ms=token.offsets.from_,
                    end_ms=token.offsets.to,
                ))

        logger.debug(f"{len(captions)} subtítulos generados")
        return captions
