"""Diagnostic log file location and handler setup."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from revman.config.schema import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
APP_DIR_NAME = "revman"
LOG_FILE_NAME = "general.log"


def resolve_state_dir(override: Optional[Path] = None) -> Path:
    """Return the state root: override, then XDG_STATE_HOME, then ~/state."""
    if override is not None:
        return Path(override).expanduser()
    xdg_state_home = os.environ.get("XDG_STATE_HOME")
    if xdg_state_home is not None:
        return Path(xdg_state_home)
    return Path.home() / "state"


def get_log_path(override: Optional[Path] = None) -> Path:
    """Resolve ``<state-dir>/revman/general.log`` and create its directory."""
    log_dir = resolve_state_dir(override) / APP_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILE_NAME


def setup_logging(config: LoggingConfig) -> Path:
    """Route the ``revman`` logger to the append-only log file.

    Nothing is attached to stdout or stderr; stdout carries the result only.

    Returns:
        Path of the log file in use.
    """
    log_path = get_log_path(config.state_dir)

    root = logging.getLogger(APP_DIR_NAME)
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.level))
    root.propagate = False
    return log_path
