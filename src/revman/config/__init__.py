"""Configuration module for revman."""

from .loader import load_config
from .prompts import build_system_prompt
from .schema import (
    LoggingConfig,
    ModelConfig,
    RequestConfig,
    RevmanConfig,
    ServerConfig,
)

__all__ = [
    "LoggingConfig",
    "ModelConfig",
    "RequestConfig",
    "RevmanConfig",
    "ServerConfig",
    "build_system_prompt",
    "load_config",
]
