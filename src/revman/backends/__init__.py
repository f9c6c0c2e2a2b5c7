"""Inference server clients."""

from .ollama import GenerateRequest, OllamaClient

__all__ = ["GenerateRequest", "OllamaClient"]
