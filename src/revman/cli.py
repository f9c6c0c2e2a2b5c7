"""revman command-line interface.

Usage:
    revman git            # prints e.g. "git commit"
    revman ls -           # unknown options are passed through as tokens
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import typer

from revman.config.loader import load_config
from revman.config.schema import LoggingConfig
from revman.core.errors import ConfigError, RevmanError
from revman.core.logs import setup_logging
from revman.core.pipeline import CompletionSession, run_session

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="revman",
    help="Complete a partial shell command with a locally served model.",
    add_completion=False,
)


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    add_help_option=False,
)
def complete(
    tokens: Optional[List[str]] = typer.Argument(None, help="Partial command line."),
) -> None:
    """Suggest the next subcommand or flag and print the completed command."""
    try:
        config = load_config()
    except ConfigError as e:
        setup_logging(LoggingConfig())
        logger.error(f"revman failed: {e}")
        raise typer.Exit(1)

    log_path = setup_logging(config.logging)
    logger.debug(f"logging to {log_path}")

    session = CompletionSession.from_argv(tokens or [], config)
    try:
        result = asyncio.run(run_session(session))
    except RevmanError as e:
        logger.error(f"revman failed: {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.warning("interrupted")
        raise typer.Exit(130)
    except Exception:
        logger.exception("revman failed with an unexpected error")
        raise typer.Exit(1)

    typer.echo(result, nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
