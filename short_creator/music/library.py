"""
Biblioteca de música de fondo.
Carga el catálogo (YAML) y elige pistas por estado de ánimo.
"""
import logging
import random
from pathlib import Path
from typing import List, Optional

import yaml

from ..domain.errors import ConfigurationError, NoMatchingMusicError
from ..domain.models import Music, MusicMood

logger = logging.getLogger(__name__)


class MusicCatalog:
    """Catálogo fijo de pistas, de solo lectura."""

    def __init__(self, catalog_path: str, music_dir: str):
        """
        Args:
            catalog_path: Archivo YAML con la lista de pistas
            music_dir: Directorio donde viven los archivos de audio
        """
        self.catalog_path = Path(catalog_path)
        self.music_dir = Path(music_dir)
        self._tracks: Optional[List[Music]] = None

    def _load(self) -> List[Music]:
        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(f"Catálogo de música no encontrado: {self.catalog_path}") from e

        tracks = []
        for entry in data.get("tracks", []):
            music = Music(**entry)
            music.path = self.music_dir / music.file
            tracks.append(music)

        logger.info(f"Catálogo de música cargado: {len(tracks)} pistas")
        return tracks

    def music_list(self) -> List[Music]:
        if self._tracks is None:
            self._tracks = self._load()
        return list(self._tracks)

    def ensure_music_files_exist(self) -> None:
        """Verifica que todas las pistas del catálogo estén en disco."""
        missing = [m.file for m in self.music_list() if not m.path.exists()]
        if missing:
            raise ConfigurationError(
                f"Faltan {len(missing)} archivos de música en {self.music_dir}: {', '.join(missing)}"
            )


class MusicSelector:
    """Elige la música de fondo de un video."""

    def __init__(self, catalog: MusicCatalog, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    def select(self, duration: float, mood: Optional[MusicMood] = None) -> Music:
        """
        Elige una pista al azar, filtrando por mood si se indica.

        Raises:
            NoMatchingMusicError: si ninguna pista coincide
        """
        tracks = [m for m in self.catalog.music_list() if mood is None or m.mood == mood]
        if not tracks:
            mood_label = mood.value if mood else "cualquiera"
            raise NoMatchingMusicError(f"No hay música con mood '{mood_label}'")

        selected = self.rng.choice(tracks)
        logger.debug(f"Música elegida para {duration:.1f}s: {selected.file} ({selected.mood.value})")
        return selected

    def moods(self) -> List[MusicMood]:
        """Moods presentes en el catálogo, sin duplicados."""
        return list(dict.fromkeys(m.mood for m in self.catalog.music_list()))
