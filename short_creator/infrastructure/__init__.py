"""Infraestructura: proveedor de videos de stock y compositor."""

from .pexels import FootageSelector, PexelsClient

__all__ = ["FootageSelector", "PexelsClient"]
