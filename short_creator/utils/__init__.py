"""Módulo de utilidades"""

from .backoff import with_retry, retrying_on
from .tempfiles import TempFileScope

__all__ = ["with_retry", "retrying_on", "TempFileScope"]
