"""Structured concurrency helpers built on anyio."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import anyio

__all__ = ["ParallelExecutionError", "run_parallel"]

T = TypeVar("T")


class ParallelExecutionError(Exception):
    """One or more tasks passed to :func:`run_parallel` failed.

    Attributes:
        exceptions: Exceptions from the failed tasks, in task order.
        results: Per-task outcome (value or exception), in task order.
    """

    def __init__(
        self,
        message: str,
        exceptions: tuple[Exception, ...],
        results: tuple[Any, ...],
    ) -> None:
        super().__init__(message)
        self.exceptions = exceptions
        self.results = results


async def run_parallel(
    tasks: Sequence[Callable[[], Awaitable[T]]],
    *,
    return_exceptions: bool = False,
) -> list[T | Exception]:
    """Run zero-argument coroutine functions concurrently in a task group.

    All tasks run to completion; one failure does not cancel the others.

    Args:
        tasks: Zero-argument callables returning awaitables.
        return_exceptions: Place a failing task's exception in its result
            slot instead of raising.

    Returns:
        Results in the same order as ``tasks``.

    Raises:
        ParallelExecutionError: If any task failed and ``return_exceptions``
            is False.

    Example:
        ```python
        flags = await run_parallel(
            [lambda f=f: is_git_repository(f) for f in folders]
        )
        ```
    """
    if not tasks:
        return []

    results: list[Any] = [None] * len(tasks)
    failed: dict[int, Exception] = {}

    async def run_task(index: int, task_fn: Callable[[], Awaitable[T]]) -> None:
        try:
            results[index] = await task_fn()
        except Exception as exc:
            results[index] = exc
            failed[index] = exc

    async with anyio.create_task_group() as tg:
        for index, task_fn in enumerate(tasks):
            tg.start_soon(run_task, index, task_fn)

    if failed and not return_exceptions:
        raise ParallelExecutionError(
            f"{len(failed)} task(s) failed during parallel execution",
            exceptions=tuple(failed[i] for i in sorted(failed)),
            results=tuple(results),
        )

    return results
