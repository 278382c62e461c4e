"""
Archivos temporales con alcance de trabajo.
Todo lo que se reserva aquí se borra al salir del bloque `with`, haya error o no.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class TempFileScope:
    """Reserva rutas temporales y las elimina al cerrar el contexto."""

    def __init__(self, temp_dir: Path, prefix: str = "tmp"):
        self.temp_dir = Path(temp_dir)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix
        self.paths: List[Path] = []

    def allocate(self, suffix: str, stem: Optional[str] = None) -> Path:
        """Devuelve una ruta nueva dentro del directorio temporal y la registra."""
        stem = stem or uuid.uuid4().hex
        path = self.temp_dir / f"{self.prefix}_{stem}{suffix}"
        self.paths.append(path)
        return path

    def cleanup(self) -> None:
        for path in self.paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"No se pudo borrar temporal {path}: {e}")
        self.paths.clear()

    def __enter__(self) -> "TempFileScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
