"""Módulo de música de fondo."""

from .library import MusicCatalog, MusicSelector

__all__ = ["MusicCatalog", "MusicSelector"]
