"""Core completion pipeline for revman."""

from .errors import (
    ConfigError,
    MalformedResponseError,
    ProvisionError,
    RequestError,
    RevmanError,
    SelectionError,
    StartupError,
)

__all__ = [
    "ConfigError",
    "MalformedResponseError",
    "ProvisionError",
    "RequestError",
    "RevmanError",
    "SelectionError",
    "StartupError",
]
