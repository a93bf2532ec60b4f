"""Console implementations of the host protocols.

The CLI is its own host: messages go to stderr through Rich, choices and
credentials are read with Rich prompts, and the output channel buffers git
activity until it is shown.
"""

from __future__ import annotations

import sys
import webbrowser
from collections.abc import Sequence

import anyio
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.rule import Rule

from gitboot.logging import get_logger

__all__ = [
    "console",
    "err_console",
    "ConsoleWindow",
    "ConsoleOutputChannel",
]

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)

_STYLES = {
    "information": "cyan",
    "warning": "yellow",
    "error": "bold red",
}


class ConsoleWindow:
    """:class:`gitboot.host.Window` on a terminal.

    When stdin is not a TTY every prompt resolves to "no choice" so that
    scripted runs never block.
    """

    def __init__(
        self, out: Console | None = None, *, interactive: bool | None = None
    ) -> None:
        self._console = out or err_console
        self._interactive = sys.stdin.isatty() if interactive is None else interactive

    async def show_information_message(self, message: str, *items: str) -> str | None:
        return await self._show("information", message, items)

    async def show_warning_message(self, message: str, *items: str) -> str | None:
        return await self._show("warning", message, items)

    async def show_error_message(self, message: str, *items: str) -> str | None:
        return await self._show("error", message, items)

    async def _show(self, level: str, message: str, items: Sequence[str]) -> str | None:
        style = _STYLES[level]
        self._console.print(f"[{style}]{escape(message)}[/{style}]")
        if not items or not self._interactive:
            return None
        return await anyio.to_thread.run_sync(self._choose, items)

    def _choose(self, items: Sequence[str]) -> str | None:
        for number, item in enumerate(items, start=1):
            self._console.print(f"  [bold]{number}[/bold]. {escape(item)}")
        try:
            answer = Prompt.ask(
                "Select an option (Enter to dismiss)",
                console=self._console,
                default="",
                show_default=False,
            )
        except EOFError:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(items):
            return items[int(answer) - 1]
        return None

    async def show_input_box(
        self,
        *,
        prompt: str,
        placeholder: str = "",
        password: bool = False,
    ) -> str | None:
        if not self._interactive:
            return None
        label = f"{prompt} {placeholder}".strip()

        def ask() -> str | None:
            try:
                return Prompt.ask(escape(label), console=self._console, password=password)
            except EOFError:
                return None

        return await anyio.to_thread.run_sync(ask)

    async def open_external(self, url: str) -> bool:
        self._console.print(f"Opening {escape(url)}")
        return await anyio.to_thread.run_sync(webbrowser.open, url)


class ConsoleOutputChannel:
    """:class:`gitboot.host.OutputChannel` that buffers lines in memory.

    Lines are echoed immediately when ``echo`` is set, otherwise printed on
    :meth:`show`.
    """

    def __init__(
        self, name: str = "Git", *, out: Console | None = None, echo: bool = False
    ) -> None:
        self.name = name
        self.lines: list[str] = []
        self._console = out or err_console
        self._echo = echo
        self._disposed = False

    def append_line(self, value: str) -> None:
        if self._disposed:
            return
        self.lines.append(value)
        logger.debug("output_line", channel=self.name, line=value)
        if self._echo:
            self._console.print(escape(value), highlight=False)

    def show(self) -> None:
        if self._echo:
            return
        self._console.print(Rule(self.name))
        for line in self.lines:
            self._console.print(escape(line), highlight=False)

    def dispose(self) -> None:
        self._disposed = True
