"""End-to-end completion pipeline.

Stages run strictly in order and none is retried:

    server start -> model pull -> generate -> parse -> select -> assemble

Any stage failure moves the session to ``FAILED`` and propagates.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from revman.backends.ollama import GenerateRequest, OllamaClient
from revman.config.prompts import build_system_prompt
from revman.config.schema import ModelConfig, RevmanConfig
from revman.core.assembler import assemble_command
from revman.core.errors import ProvisionError
from revman.core.parser import CompletionOption, parse_options, to_options
from revman.services.server import OllamaServer
from revman.ui.selector import select_option

logger = logging.getLogger(__name__)

Selector = Callable[[Sequence[CompletionOption]], Awaitable[CompletionOption]]


class PipelineStage(str, Enum):
    """Session lifecycle states."""

    INIT = "init"
    SERVER_STARTING = "server_starting"
    SERVER_READY = "server_ready"
    MODEL_PULLING = "model_pulling"
    MODEL_READY = "model_ready"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    PARSING = "parsing"
    SELECTING = "selecting"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


_ORDER = list(PipelineStage)


@dataclass
class CompletionSession:
    """State of one revman invocation."""

    command: str
    config: RevmanConfig
    stage: PipelineStage = PipelineStage.INIT

    @classmethod
    def from_argv(cls, argv: Sequence[str], config: RevmanConfig) -> "CompletionSession":
        return cls(command=" ".join(argv), config=config)

    @property
    def is_terminal(self) -> bool:
        return self.stage in (PipelineStage.DONE, PipelineStage.FAILED)

    def advance(self, stage: PipelineStage) -> None:
        """Move forward to ``stage``; stages are never re-entered."""
        if self.is_terminal:
            raise RuntimeError(f"session already finished ({self.stage.value})")
        if stage is not PipelineStage.FAILED and _ORDER.index(stage) <= _ORDER.index(self.stage):
            raise RuntimeError(f"cannot move from {self.stage.value} to {stage.value}")
        logger.info(f"stage: {self.stage.value} -> {stage.value}")
        self.stage = stage


async def ensure_model(client: OllamaClient, model: ModelConfig) -> None:
    """Pull ``model`` and return once the server reports it available.

    Raises:
        ProvisionError: If the pull fails or ends without a success status.
    """
    available = False
    async for progress in client.pull(model.name, timeout=model.pull_timeout_seconds):
        if progress.get("status") == "success":
            available = True
    if not available:
        raise ProvisionError(f"pull of {model.name!r} ended without a success status")
    logger.info(f"Model {model.name!r} is available")


def build_generate_request(
    config: RevmanConfig,
    command: str,
    os_name: Optional[str] = None,
) -> GenerateRequest:
    return GenerateRequest(
        model=config.model.name,
        system=build_system_prompt(os_name),
        prompt=command,
        format="json",
    )


async def request_completion(
    client: OllamaClient,
    request: GenerateRequest,
    timeout: float = 300.0,
) -> str:
    """Drain the generation stream into a single string, in arrival order."""
    response = ""
    async for fragment in client.generate(request, timeout=timeout):
        response += fragment
    logger.debug(f"accumulated response: {response!r}")
    return response


async def run_session(
    session: CompletionSession,
    *,
    server: Optional[OllamaServer] = None,
    client: Optional[OllamaClient] = None,
    selector: Selector = select_option,
) -> str:
    """Run every stage for ``session`` and return the assembled command.

    The server is started before any request and reaped after the last
    dependent stage, on success and failure alike.

    Raises:
        RevmanError: The first stage failure, after the session is marked
            ``FAILED``. Any other exception also marks the session
            ``FAILED`` and is logged before it propagates.
    """
    config = session.config
    os.environ["OLLAMA_HOST"] = config.server.address
    server = server or OllamaServer(config.server)
    client = client or OllamaClient(config.server.base_url)

    try:
        session.advance(PipelineStage.SERVER_STARTING)
        async with server, client:
            await server.wait_until_ready(client.is_available)
            session.advance(PipelineStage.SERVER_READY)

            session.advance(PipelineStage.MODEL_PULLING)
            await ensure_model(client, config.model)
            session.advance(PipelineStage.MODEL_READY)

            session.advance(PipelineStage.REQUESTING)
            request = build_generate_request(config, session.command)
            session.advance(PipelineStage.STREAMING)
            response = await request_completion(
                client, request, timeout=config.request.timeout_seconds
            )

            session.advance(PipelineStage.PARSING)
            options = to_options(parse_options(response))

            session.advance(PipelineStage.SELECTING)
            selected = await selector(options)

            session.advance(PipelineStage.ASSEMBLING)
            result = assemble_command(session.command, selected)
    except BaseException:
        logger.exception(f"session failed during {session.stage.value}")
        session.advance(PipelineStage.FAILED)
        raise

    session.advance(PipelineStage.DONE)
    return result
