"""Crediario identity core: registration, authentication and password recovery."""

__version__ = "1.0.0"
