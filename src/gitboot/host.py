"""Interfaces of the host application that gitboot talks to.

gitboot never renders UI itself. Prompts, notifications and the output
panel belong to the host and are reached through these protocols. The
click CLI ships console implementations (``gitboot.cli.console``); tests use
scripted fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = ["Window", "OutputChannel", "WorkspaceFolder"]


@runtime_checkable
class Window(Protocol):
    """User-facing messages and prompts.

    ``show_*_message`` return the label of the chosen item, or None when the
    message was dismissed without a choice.
    """

    async def show_information_message(self, message: str, *items: str) -> str | None:
        ...

    async def show_warning_message(self, message: str, *items: str) -> str | None:
        ...

    async def show_error_message(self, message: str, *items: str) -> str | None:
        ...

    async def show_input_box(
        self,
        *,
        prompt: str,
        placeholder: str = "",
        password: bool = False,
    ) -> str | None:
        """Ask for free text; None means the user cancelled."""
        ...

    async def open_external(self, url: str) -> bool:
        """Open ``url`` outside the host (browser). Returns True on success."""
        ...


@runtime_checkable
class OutputChannel(Protocol):
    """The user-visible log panel git activity is written to."""

    def append_line(self, value: str) -> None: ...

    def show(self) -> None: ...

    def dispose(self) -> None: ...


@dataclass(frozen=True, slots=True)
class WorkspaceFolder:
    """A folder open in the host.

    Attributes:
        path: Filesystem path for ``file`` folders; the raw path otherwise.
        scheme: URI scheme; only ``file`` folders live on the local disk.
        name: Display name, defaulting to the last path component.
    """

    path: Path
    scheme: str = "file"
    name: str = ""

    @classmethod
    def from_path(cls, path: Path | str) -> WorkspaceFolder:
        resolved = Path(path).expanduser().resolve()
        return cls(path=resolved, name=resolved.name)
