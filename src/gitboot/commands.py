"""Command registry: named actions the host can trigger."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from gitboot.disposable import Disposable
from gitboot.exceptions import UnknownCommandError
from gitboot.logging import get_logger

__all__ = ["CommandRegistry", "CommandHandler"]

logger = get_logger(__name__)

CommandHandler = Callable[..., Any]


class CommandRegistry:
    """Map command ids (``git.setGitEditor``) to sync or async handlers.

    Registering an id again replaces the earlier handler.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._handlers

    @property
    def command_ids(self) -> list[str]:
        return list(self._handlers)

    def register(self, command_id: str, handler: CommandHandler) -> Disposable:
        """Register ``handler``; disposing the result unregisters it."""
        self._handlers[command_id] = handler

        def unregister() -> None:
            if self._handlers.get(command_id) is handler:
                del self._handlers[command_id]

        return Disposable(unregister)

    async def execute(self, command_id: str, *args: Any) -> Any:
        """Run a command and return its result, awaiting it when async.

        Raises:
            UnknownCommandError: If nothing is registered under ``command_id``.
        """
        handler = self._handlers.get(command_id)
        if handler is None:
            raise UnknownCommandError(command_id)
        logger.debug("command_executed", command=command_id)
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
