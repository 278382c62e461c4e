"""
Jerarquía de errores del creador de shorts.
"""
from typing import Optional


class ShortCreatorError(Exception):
    """Error base del sistema."""
    pass


class ConfigurationError(ShortCreatorError):
    """Falta configuración obligatoria (API key, archivos de música...)."""
    pass


class ProviderError(ShortCreatorError):
    """Error genérico del proveedor de videos de stock."""
    pass


class ProviderTimeoutError(ProviderError):
    """La petición al proveedor excedió el timeout."""
    pass


class ProviderDataError(ProviderError):
    """Respuesta vacía, malformada o sin clips que cumplan los requisitos."""
    pass


class NoFootageFoundError(ProviderError):
    """Se agotaron todos los términos de búsqueda sin encontrar clip."""
    pass


class NoMatchingMusicError(ShortCreatorError):
    """Ninguna pista del catálogo coincide con el mood pedido."""
    pass


class NotFoundError(ShortCreatorError):
    """El video solicitado no existe."""
    pass


class PipelineError(ShortCreatorError):
    """Fallo al producir un video; aborta el trabajo completo."""

    def __init__(self, message: str, job_id: str, scene_index: Optional[int] = None):
        super().__init__(message)
        self.job_id = job_id
        self.scene_index = scene_index
