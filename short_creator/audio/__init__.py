"""Audio: subtítulos, codificación y transcripción."""

from .captions import CaptionBuilder
from .engine import WhisperTranscriber

__all__ = ["CaptionBuilder", "WhisperTranscriber"]
