"""Pydantic configuration models for revman."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """Configuration for the supervised Ollama server process."""

    executable: str = Field(
        default="ollama",
        description="Ollama executable, resolved on PATH when not absolute.",
    )
    host: str = "127.0.0.1"
    port: int = Field(default=11435, ge=1, le=65535)
    startup_timeout_seconds: float = Field(default=30.0, gt=0)
    shutdown_timeout_seconds: float = Field(default=5.0, ge=0)
    poll_interval_seconds: float = Field(default=0.25, gt=0)

    @property
    def address(self) -> str:
        """Value handed to OLLAMA_HOST."""
        return f"{self.host}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"http://{self.address}"


class ModelConfig(BaseModel):
    """Model that must be present before completions are requested."""

    name: str = Field(default="codellama", min_length=1)
    pull_timeout_seconds: float = Field(default=3600.0, gt=0)


class RequestConfig(BaseModel):
    """Settings for the generation request."""

    timeout_seconds: float = Field(default=300.0, gt=0)


class LoggingConfig(BaseModel):
    """Diagnostic log settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "DEBUG"
    state_dir: Optional[Path] = Field(
        default=None,
        description="Overrides the XDG_STATE_HOME lookup when set.",
    )


class RevmanConfig(BaseModel):
    """Root configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
