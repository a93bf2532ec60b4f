"""Disposables: handles that release a subscription or resource once.

Activation collects disposables (output subscriptions, registered commands)
and releases them together, in the order they were acquired, when the
session ends.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

__all__ = ["Disposable", "SupportsDispose", "dispose_all"]


@runtime_checkable
class SupportsDispose(Protocol):
    """Anything with a synchronous ``dispose()`` method."""

    def dispose(self) -> None: ...


class Disposable:
    """Run a callback at most once, on the first :meth:`dispose` call.

    Example:
        >>> released = []
        >>> handle = Disposable(lambda: released.append(True))
        >>> handle.dispose()
        >>> handle.dispose()
        >>> released
        [True]
    """

    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[], object]) -> None:
        self._callback: Callable[[], object] | None = callback

    @property
    def disposed(self) -> bool:
        return self._callback is None

    def dispose(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()

    @classmethod
    def from_disposables(cls, *disposables: SupportsDispose) -> Disposable:
        """Combine several disposables into one that disposes them in order."""
        return cls(lambda: dispose_all(disposables))


def dispose_all(disposables: Iterable[SupportsDispose]) -> None:
    """Dispose every item in iteration order."""
    for disposable in disposables:
        disposable.dispose()
