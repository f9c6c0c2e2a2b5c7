"""Supervision of the local ``ollama serve`` process."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from typing import Optional

from revman.config.schema import ServerConfig
from revman.core.errors import StartupError

logger = logging.getLogger(__name__)

HealthCheck = Callable[[], Awaitable[bool]]


class OllamaServer:
    """Owns an inference server child process for the length of a run.

    Use as an async context manager; the process is reaped on every exit
    path, including fatal errors in the stages it serves.

    Example:
        async with OllamaServer(config.server) as server:
            await server.wait_until_ready(client.is_available)
            ...
    """

    def __init__(self, config: ServerConfig, command_args: Sequence[str] = ("serve",)):
        self._config = config
        self._command_args = tuple(command_args)
        self._process: Optional[asyncio.subprocess.Process] = None

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode if self._process else None

    async def __aenter__(self) -> "OllamaServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def start(self) -> None:
        """Launch the server listening on the configured address."""
        if self._process is not None:
            return

        env = {**os.environ, "OLLAMA_HOST": self._config.address}
        try:
            self._process = await asyncio.create_subprocess_exec(
                self._config.executable,
                *self._command_args,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise StartupError(
                f"failed to start {self._config.executable!r}: {e}"
            ) from e
        logger.info(
            f"Ollama server has started (pid={self._process.pid}, address={self._config.address})"
        )

    async def wait_until_ready(self, health_check: HealthCheck) -> None:
        """Poll ``health_check`` until it succeeds.

        Raises:
            StartupError: If the process exits first or the startup timeout
                elapses.
        """
        if self._process is None:
            raise StartupError("server process was never started")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._config.startup_timeout_seconds
        while True:
            if self._process.returncode is not None:
                raise StartupError(
                    f"server exited with code {self._process.returncode} before becoming ready"
                )
            if await health_check():
                logger.info(f"Ollama server is ready at {self._config.base_url}")
                return
            if loop.time() >= deadline:
                raise StartupError(
                    f"server not ready after {self._config.startup_timeout_seconds}s"
                )
            await asyncio.sleep(self._config.poll_interval_seconds)

    async def stop(self) -> None:
        """Terminate the process if needed and wait until it is reaped."""
        process = self._process
        if process is None:
            return

        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass
            try:
                await asyncio.wait_for(
                    process.wait(), timeout=self._config.shutdown_timeout_seconds
                )
            except asyncio.TimeoutError:
                logger.warning(f"Ollama server (pid={process.pid}) ignored SIGTERM; killing")
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
        else:
            await process.wait()

        logger.info(f"Ollama server stopped (pid={process.pid}, code={process.returncode})")
