"""Exception hierarchy for the completion pipeline.

Every stage raises a subclass of :class:`RevmanError`; all of them are fatal
for the session.
"""

from __future__ import annotations


class RevmanError(Exception):
    """Base class for revman failures."""


class ConfigError(RevmanError):
    """Configuration file is unreadable or invalid."""


class StartupError(RevmanError):
    """The Ollama server could not be launched or never became ready."""


class ProvisionError(RevmanError):
    """Pulling the model failed."""


class RequestError(RevmanError):
    """The generation request could not be completed."""


class MalformedResponseError(RevmanError):
    """The model output is not a JSON object."""


class SelectionError(RevmanError):
    """No option was selected (empty option set, aborted or failed prompt)."""
