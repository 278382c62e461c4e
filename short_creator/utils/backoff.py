"""
Reintentos con exponential backoff (tenacity).
"""

import logging
from typing import Optional

from tenacity import (
    Retrying,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)


def _policy(attempts: int, wait: wait_base, exceptions: tuple) -> dict:
    return dict(
        stop=stop_after_attempt(attempts),
        wait=wait,
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 60.0,
    exceptions: tuple = (Exception,),
):
    """
    Decorador que reintenta la función ante `exceptions`.

    Args:
        max_attempts: Intentos totales, incluido el primero
        min_wait: Espera mínima entre intentos (segundos)
        max_wait: Espera máxima entre intentos (segundos)
        exceptions: Excepciones que disparan un reintento
    """
    wait = wait_exponential(multiplier=1, min=min_wait, max=max_wait)
    return retry(**_policy(max_attempts, wait, exceptions))


def retrying_on(
    exceptions: tuple,
    retries: int,
    wait: Optional[wait_base] = None,
) -> Retrying:
    """
    Retrying para una sola llamada: `retries` reintentos además del primer
    intento. Al agotarlos se relanza la última excepción original.
    """
    if wait is None:
        wait = wait_exponential(multiplier=0.5, max=4)
    return Retrying(**_policy(retries + 1, wait, exceptions))
