from __future__ import annotations

import logging
from pathlib import Path

import pytest

from revman.config.schema import LoggingConfig
from revman.core.logs import get_log_path, resolve_state_dir, setup_logging


def test_state_dir_from_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg"))
    assert resolve_state_dir() == tmp_path / "xdg"


def test_state_dir_falls_back_to_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_state_dir() == tmp_path / "state"


def test_state_dir_override_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg"))
    assert resolve_state_dir(tmp_path / "custom") == tmp_path / "custom"


def test_get_log_path_creates_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "deep" / "state"))

    path = get_log_path()

    assert path == tmp_path / "deep" / "state" / "revman" / "general.log"
    assert path.parent.is_dir()


def test_setup_logging_appends(tmp_path: Path) -> None:
    config = LoggingConfig(level="INFO", state_dir=tmp_path)
    log_path = setup_logging(config)
    log_path.write_text("earlier line\n")

    log_path = setup_logging(config)
    logging.getLogger("revman.test").info("hello log")
    logging.getLogger("revman.test").debug("filtered out")
    for handler in logging.getLogger("revman").handlers:
        handler.flush()

    content = log_path.read_text()
    assert content.startswith("earlier line\n")
    assert "INFO - hello log" in content
    assert "filtered out" not in content
    assert len(logging.getLogger("revman").handlers) == 1
