"""Módulo de síntesis de voz."""

from .edge_tts import EdgeTTSEngine, DEFAULT_VOICE

__all__ = ["EdgeTTSEngine", "DEFAULT_VOICE"]
