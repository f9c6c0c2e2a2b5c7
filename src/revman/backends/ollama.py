"""Async client for the Ollama HTTP API.

Covers the three endpoints revman needs:
- ``GET /api/tags`` as a health check
- ``POST /api/pull`` with streamed progress
- ``POST /api/generate`` with streamed response fragments

Both streaming calls read NDJSON and are exposed as async iterators that the
caller drains in order.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from revman.core.errors import ProvisionError, RequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateRequest:
    """A single ``/api/generate`` request."""

    model: str
    system: str
    prompt: str
    format: str = "json"

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "system": self.system,
            "prompt": self.prompt,
            "format": self.format,
            "stream": True,
        }


class OllamaClient:
    """Client for a local Ollama server."""

    def __init__(self, base_url: str = "http://127.0.0.1:11435"):
        """Initialize Ollama client.

        Args:
            base_url: Ollama API endpoint, e.g. http://127.0.0.1:11435
        """
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def is_available(self, timeout: float = 2.0) -> bool:
        """Return True if the server answers ``/api/tags`` with 200."""
        try:
            session = await self._get_session()
            async with session.get(
                f"{self.base_url}/api/tags",
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                return response.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Ollama not available at {self.base_url}: {e}")
            return False

    async def _iter_messages(self, response: aiohttp.ClientResponse) -> AsyncIterator[dict[str, Any]]:
        async for line in response.content:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except ValueError:
                logger.warning(f"Failed to decode chunk: {line!r}")
                continue
            if isinstance(message, dict):
                yield message

    async def pull(self, model: str, timeout: float = 3600.0) -> AsyncIterator[dict[str, Any]]:
        """Pull ``model``, yielding each progress message.

        Args:
            model: Model name to pull
            timeout: Total time allowed for the download

        Yields:
            Progress dictionaries as sent by the server

        Raises:
            ProvisionError: On HTTP, connection or timeout failures, or when
                the server reports an error in the stream.
        """
        try:
            session = await self._get_session()
            async with session.post(
                f"{self.base_url}/api/pull",
                json={"model": model, "name": model, "stream": True},
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise ProvisionError(
                        f"pull of {model!r} failed: {response.status} - {error_text}"
                    )
                async for message in self._iter_messages(response):
                    logger.debug(f"pull progress: {message}")
                    if "error" in message:
                        raise ProvisionError(f"pull of {model!r} failed: {message['error']}")
                    yield message
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProvisionError(f"pull of {model!r} failed: {e!r}") from e

    async def generate(self, request: GenerateRequest, timeout: float = 300.0) -> AsyncIterator[str]:
        """Stream a completion, yielding response fragments in arrival order.

        Raises:
            RequestError: On HTTP, connection or timeout failures, an aborted
                stream, or an error message from the server.
        """
        try:
            session = await self._get_session()
            async with session.post(
                f"{self.base_url}/api/generate",
                json=request.to_payload(),
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RequestError(
                        f"generate failed: {response.status} - {error_text}"
                    )
                async for message in self._iter_messages(response):
                    logger.debug(f"generate fragment: {message}")
                    if "error" in message:
                        raise RequestError(f"generate failed: {message['error']}")
                    fragment = message.get("response", "")
                    if fragment:
                        yield fragment
                    if message.get("done", False):
                        break
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RequestError(f"generate failed: {e!r}") from e
