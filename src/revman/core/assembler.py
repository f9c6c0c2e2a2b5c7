"""Build the final command line from the user's selection."""

from __future__ import annotations

from typing import Union

from revman.core.parser import CompletionOption


def key_from_label(label: str) -> str:
    """Extract the key from a ``"<key> (<description>)"`` display label.

    Everything before the first ``(`` is taken as the key, so a key that
    itself contains ``(`` is truncated.
    """
    return label.split("(", 1)[0].rstrip()


def assemble_command(command: str, selected: Union[CompletionOption, str]) -> str:
    """Append the selected key to ``command``, separated by a single space."""
    if isinstance(selected, CompletionOption):
        key = selected.key
    else:
        key = key_from_label(selected)
    return f"{command} {key}"
