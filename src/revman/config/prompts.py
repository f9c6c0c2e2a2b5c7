"""Prompt templates sent to the model."""

from __future__ import annotations

import platform

COMPLETION_SYSTEM_PROMPT = " ".join(
    [
        "You are a CLI completion tool from the UNIX man pages and you show all",
        "possible subcommands and flags as key value pairs, where the key is the",
        "subcommand/flag and the value is the description. The commands should be",
        "available on the {os_name} operating system.",
        "Please respond using JSON",
    ]
)


def current_os_name() -> str:
    """Return the running operating system as a lowercase name (linux, darwin, ...)."""
    return platform.system().lower() or "unknown"


def build_system_prompt(os_name: str | None = None) -> str:
    return COMPLETION_SYSTEM_PROMPT.format(os_name=os_name or current_os_name())
