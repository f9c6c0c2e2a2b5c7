"""Interactive single-choice prompt for completion options."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Optional

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import Output, create_output
from prompt_toolkit.styles import Style

from revman.core.errors import SelectionError
from revman.core.parser import CompletionOption

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Please select an option"

SELECTOR_STYLE = Style.from_dict(
    {
        "title": "bold",
        "pointer": "ansicyan bold",
        "selected": "bold",
        "description": "ansigreen",
    }
)


def render_options(options: Sequence[CompletionOption], index: int) -> StyleAndTextTuples:
    """Render ``key (description)`` lines with the description highlighted."""
    fragments: StyleAndTextTuples = []
    for i, option in enumerate(options):
        current = i == index
        key_style = "class:selected" if current else ""
        fragments.append(("class:pointer", "> " if current else "  "))
        fragments.append((key_style, f"{option.key} ("))
        fragments.append(("class:description", option.description))
        fragments.append((key_style, ")"))
        if i < len(options) - 1:
            fragments.append(("", "\n"))
    return fragments


def build_application(
    options: Sequence[CompletionOption],
    *,
    title: str = DEFAULT_TITLE,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> Application[Optional[CompletionOption]]:
    """Build the selection application; it exits with the chosen option or None."""
    state = {"index": 0}
    count = len(options)

    kb = KeyBindings()

    @kb.add("up")
    @kb.add("k")
    def _previous(event) -> None:
        state["index"] = (state["index"] - 1) % count

    @kb.add("down")
    @kb.add("j")
    def _next(event) -> None:
        state["index"] = (state["index"] + 1) % count

    @kb.add("enter")
    def _accept(event) -> None:
        event.app.exit(result=options[state["index"]])

    @kb.add("c-c")
    @kb.add("c-d")
    @kb.add("escape")
    @kb.add("q")
    def _abort(event) -> None:
        event.app.exit(result=None)

    layout = Layout(
        HSplit(
            [
                Window(
                    FormattedTextControl([("class:title", f"{title}:")]),
                    height=1,
                ),
                Window(
                    FormattedTextControl(
                        lambda: render_options(options, state["index"]),
                        focusable=True,
                        show_cursor=False,
                    ),
                ),
            ]
        )
    )

    return Application(
        layout=layout,
        key_bindings=kb,
        style=SELECTOR_STYLE,
        full_screen=False,
        erase_when_done=True,
        input=input,
        output=output if output is not None else create_output(stdout=sys.stderr),
    )


async def select_option(
    options: Sequence[CompletionOption],
    *,
    title: str = DEFAULT_TITLE,
    input: Optional[Input] = None,
    output: Optional[Output] = None,
) -> CompletionOption:
    """Let the user pick one option.

    The prompt is drawn on stderr so stdout only carries the final command.

    Raises:
        SelectionError: If there is nothing to choose from, the user aborts,
            or the terminal cannot host the prompt.
    """
    if not options:
        raise SelectionError("model returned no usable options")

    app = build_application(options, title=title, input=input, output=output)
    try:
        selected = await app.run_async()
    except (EOFError, OSError) as e:
        raise SelectionError(f"interactive selection failed: {e}") from e

    if selected is None:
        raise SelectionError("selection aborted")
    logger.info(f"Selected option: {selected.label}")
    return selected
