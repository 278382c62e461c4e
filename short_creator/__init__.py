"""Creador de shorts verticales a partir de guiones por escenas."""

__version__ = "1.0.0"
