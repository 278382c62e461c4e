"""
Cliente Pexels - Infraestructura
Búsqueda de clips verticales y selección con términos de respaldo.
"""
import logging
import random
from typing import Collection, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError
from tenacity.wait import wait_base

from ..domain.errors import (
    ConfigurationError,
    NoFootageFoundError,
    ProviderDataError,
    ProviderError,
    ProviderTimeoutError,
)
from ..domain.models import FootageItem
from ..utils.backoff import retrying_on

logger = logging.getLogger(__name__)

# Términos genéricos ("comodines") cuando los del usuario no dan resultado
JOKER_TERMS = ["nature", "globe", "space", "ocean"]

DURATION_BUFFER_SECONDS = 3
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_RETRIES = 3

# Frame rate de referencia para calcular la duración efectiva
NORMAL_FPS = 25
TARGET_WIDTH = 1080
TARGET_HEIGHT = 1920


class PexelsVideoFile(BaseModel):
    id: Optional[int] = None
    quality: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    fps: Optional[float] = None
    link: str


class PexelsVideo(BaseModel):
    id: int
    duration: float
    video_files: List[PexelsVideoFile] = Field(default_factory=list)

    @property
    def effective_duration(self) -> float:
        """Duración corregida a 25 fps cuando el clip viene a menos cuadros."""
        fps = self.video_files[0].fps if self.video_files else None
        if fps is not None and fps < NORMAL_FPS:
            return self.duration * (fps / NORMAL_FPS)
        return self.duration

    def vertical_hd_file(self) -> Optional[PexelsVideoFile]:
        for video_file in self.video_files:
            if (
                video_file.quality == "hd"
                and video_file.width == TARGET_WIDTH
                and video_file.height == TARGET_HEIGHT
            ):
                return video_file
        return None


class PexelsClient:
    """
    Cliente para la API de videos de Pexels.
    Traduce los fallos de transporte a errores del dominio.
    """

    BASE_URL = "https://api.pexels.com"

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        per_page: int = 80,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            api_key: Clave de la API de Pexels
            timeout: Timeout por petición en segundos
            per_page: Resultados por página
            transport: Transporte httpx alternativo (tests)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.per_page = per_page

        if not self.api_key:
            logger.warning("🚫 PEXELS_API_KEY no encontrada. Las búsquedas fallarán.")

        self.client = httpx.Client(
            base_url=self.BASE_URL,
            headers={"Authorization": self.api_key} if self.api_key else {},
            timeout=timeout,
            transport=transport,
        )

    def search_videos(self, query: str) -> List[PexelsVideo]:
        """Busca videos verticales para una query dada."""
        if not self.api_key:
            raise ConfigurationError("API key de Pexels no configurada")

        logger.debug(f"Buscando '{query}' en Pexels")
        try:
            response = self.client.get(
                "/videos/search",
                params={
                    "orientation": "portrait",
                    "size": "medium",
                    "per_page": self.per_page,
                    "query": query,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(f"Timeout buscando '{query}': {e}") from e
        except httpx.HTTPError as e:
            raise ProviderDataError(f"Error HTTP buscando '{query}': {e}") from e
        except ValueError as e:
            raise ProviderDataError(f"Respuesta no es JSON para '{query}'") from e

        items = data.get("videos") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ProviderDataError(f"Respuesta malformada para '{query}': falta la lista de videos")

        videos = []
        for item in items:
            try:
                videos.append(PexelsVideo.model_validate(item))
            except ValidationError as e:
                # Un item inválido no invalida el resto de la página
                logger.debug(f"Video descartado para '{query}': {e}")

        if not videos:
            raise ProviderDataError(f"Sin videos para '{query}'")
        return videos

    def close(self):
        self.client.close()


class FootageSelector:
    """
    Elige un clip para una escena.
    Recorre los términos del usuario y luego los comodines hasta encontrar
    un clip vertical 1080x1920 suficientemente largo y no usado.
    """

    def __init__(
        self,
        client: PexelsClient,
        retries: int = DEFAULT_RETRIES,
        rng: Optional[random.Random] = None,
        retry_wait: Optional[wait_base] = None,
        joker_terms: Optional[List[str]] = None,
    ):
        self.client = client
        self.retries = retries
        self.rng = rng or random.Random()
        self.retry_wait = retry_wait
        self.joker_terms = list(joker_terms if joker_terms is not None else JOKER_TERMS)

    def candidate_terms(self, search_terms: List[str]) -> List[str]:
        """Términos del usuario barajados seguidos de los comodines barajados."""
        user_terms = list(search_terms)
        jokers = list(self.joker_terms)
        self.rng.shuffle(user_terms)
        self.rng.shuffle(jokers)
        return user_terms + jokers

    def find_video(
        self,
        search_terms: List[str],
        min_duration: float,
        exclude_ids: Collection[str] = (),
    ) -> FootageItem:
        """
        Busca un clip para los términos dados.

        Args:
            search_terms: Términos de búsqueda de la escena
            min_duration: Duración mínima hablada en segundos
            exclude_ids: IDs ya usados en este trabajo

        Returns:
            FootageItem elegido al azar entre los que cumplen

        Raises:
            ConfigurationError: sin API key
            ProviderTimeoutError: timeouts agotados para un término
            NoFootageFoundError: ningún término dio resultado
        """
        terms = self.candidate_terms(search_terms)
        for term in terms:
            try:
                return self._find_for_term(term, min_duration, exclude_ids)
            except ProviderTimeoutError:
                logger.error(f"Timeout en Pexels para '{term}', reintentos agotados ({self.retries})")
                raise
            except ProviderError as e:
                logger.error(f"Sin clip para el término '{term}': {e}")

        logger.error(f"No se encontró video en Pexels para los términos {search_terms}")
        raise NoFootageFoundError(f"No se encontró video para {search_terms}")

    def _find_for_term(
        self,
        term: str,
        min_duration: float,
        exclude_ids: Collection[str],
    ) -> FootageItem:
        retrying = retrying_on((ProviderTimeoutError,), self.retries, wait=self.retry_wait)
        videos = retrying(self.client.search_videos, term)

        candidates = self.filter_videos(videos, min_duration, exclude_ids)
        if not candidates:
            raise ProviderDataError(f"Ningún clip cumple los requisitos para '{term}'")

        chosen = self.rng.choice(candidates)
        logger.info(f"Clip {chosen.id} elegido para '{term}' ({len(candidates)} candidatos)")
        return chosen

    @staticmethod
    def filter_videos(
        videos: List[PexelsVideo],
        min_duration: float,
        exclude_ids: Collection[str] = (),
    ) -> List[FootageItem]:
        """Filtra los clips usados, cortos o sin variante 1080x1920."""
        required = min_duration + DURATION_BUFFER_SECONDS
        selected = []
        for video in videos:
            video_id = str(video.id)
            if video_id in exclude_ids or not video.video_files:
                continue
            if video.effective_duration < required:
                continue

            video_file = video.vertical_hd_file()
            if video_file:
                selected.append(FootageItem(
                    id=video_id,
                    url=video_file.link,
                    width=video_file.width,
                    height=video_file.height,
                ))
        return selected

    def close(self):
        self.client.close()
