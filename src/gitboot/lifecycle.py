"""Ordered teardown of asynchronous shutdown actions.

The registry is owned by the activation context and handed to whatever
needs cleanup at shutdown (for example the askpass endpoint). Entries are
never removed one by one; :meth:`TeardownRegistry.run` invokes all of them.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from gitboot.logging import get_logger

__all__ = ["TeardownRegistry", "TeardownTask"]

logger = get_logger(__name__)

TeardownTask = Callable[[], Awaitable[Any]]


class TeardownRegistry:
    """Append-only list of zero-argument async actions.

    Example:
        ```python
        registry = TeardownRegistry()
        registry.register(askpass.dispose)
        ...
        await registry.run()
        ```
    """

    def __init__(self) -> None:
        self._tasks: list[TeardownTask] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def register(self, task: TeardownTask) -> None:
        """Append ``task``; it runs after every task registered before it."""
        self._tasks.append(task)

    async def run(self) -> list[Exception]:
        """Await every task strictly in registration order.

        A failing task is logged and does not stop the ones after it.

        Returns:
            The exceptions raised by failing tasks, in order.
        """
        failures: list[Exception] = []
        for task in self._tasks:
            try:
                await task()
            except Exception as exc:
                logger.exception(
                    "teardown_task_failed",
                    task=getattr(task, "__qualname__", repr(task)),
                )
                failures.append(exc)
        return failures
