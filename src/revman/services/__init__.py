"""Process supervision for revman."""

from .server import OllamaServer

__all__ = ["OllamaServer"]
