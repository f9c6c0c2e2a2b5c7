"""Decode model output into completion options."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from revman.core.errors import MalformedResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionOption:
    """A candidate token (subcommand or flag) and its description."""

    key: str
    description: str

    @property
    def label(self) -> str:
        return f"{self.key} ({self.description})"


def decode_object(text: str) -> dict[str, Any]:
    """Decode ``text`` as a JSON object.

    Raises:
        MalformedResponseError: If the text is not valid JSON or the top
            level is not an object.
    """
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"response is not valid JSON: {exc}") from exc

    if not isinstance(decoded, dict):
        raise MalformedResponseError(
            f"expected a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def parse_options(text: str) -> dict[str, str]:
    """Return the entries of the response object whose value is a string.

    Non-string values (nested objects, arrays, numbers, booleans, null) are
    dropped; they never cause a failure.
    """
    decoded = decode_object(text)
    options = {key: value for key, value in decoded.items() if isinstance(value, str)}
    dropped = len(decoded) - len(options)
    if dropped:
        logger.debug(f"Dropped {dropped} non-string entries from model response")
    return options


def to_options(option_set: Mapping[str, str]) -> list[CompletionOption]:
    """Project an option set into display-ordered CompletionOption records."""
    return [CompletionOption(key, description) for key, description in option_set.items()]
