"""
Configuración del creador de shorts.
Combina config/config.yaml con variables de entorno (.env).
"""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from .domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/config.yaml"

# variable de entorno -> campo de Settings
ENV_VARS = {
    "PEXELS_API_KEY": "pexels_api_key",
    "DATA_DIR_PATH": "data_dir",
    "MUSIC_DIR": "music_dir",
    "MUSIC_CATALOG": "music_catalog",
    "PUBLIC_URL": "public_url",
    "TTS_VOICE": "voice",
    "WHISPER_MODEL": "whisper_model",
    "WHISPER_DEVICE": "whisper_device",
    "LOG_LEVEL": "log_level",
    "PEXELS_TIMEOUT": "pexels_timeout",
    "PEXELS_RETRIES": "pexels_retries",
    "CAPTION_FONT": "caption_font",
}


class Settings(BaseModel):
    """Parámetros de ejecución."""

    pexels_api_key: Optional[str] = None
    data_dir: Path = Path.home() / ".short-creator"
    music_dir: Path = Path("./assets/music")
    music_catalog: Path = Path("./config/music.yaml")
    public_url: Optional[str] = None
    voice: str = "en-US-AriaNeural"
    whisper_model: str = "medium.en"
    whisper_device: Optional[str] = None
    log_level: str = "INFO"
    pexels_timeout: float = 5.0
    pexels_retries: int = 3
    caption_font: Optional[str] = None

    @property
    def videos_dir(self) -> Path:
        return self.data_dir / "videos"

    @property
    def temp_dir(self) -> Path:
        return self.data_dir / "temp"

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> "Settings":
        """Carga YAML (si existe) y aplica encima las variables de entorno."""
        load_dotenv()

        values = {}
        path = Path(config_path)
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                values.update(yaml.safe_load(f) or {})
        else:
            logger.debug(f"Archivo de configuración no encontrado: {config_path}")

        for env_name, field_name in ENV_VARS.items():
            value = os.getenv(env_name)
            if value:
                values[field_name] = value

        return cls(**values)

    def ensure_dirs(self) -> None:
        for dir_path in [self.data_dir, self.videos_dir, self.temp_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    def ensure_config(self) -> None:
        if not self.pexels_api_key:
            raise ConfigurationError(
                "Falta la variable de entorno PEXELS_API_KEY. "
                "Consigue una API key gratuita en https://www.pexels.com/api/key/"
            )

    def audio_url(self, path: Path) -> str:
        """URL desde la que el renderizador puede leer un audio temporal."""
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/api/tmp/{Path(path).name}"
        return Path(path).resolve().as_uri()
