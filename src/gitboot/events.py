"""Minimal typed events: emitters, filtered views and single-shot waits.

An event source is anything with ``subscribe(listener) -> Disposable``.
:class:`EventEmitter` is the concrete source; :func:`filter_event` derives a
narrower source from an existing one; :func:`wait_for_event` turns a source
into an awaitable that resolves on the first occurrence and unsubscribes
immediately afterwards.

Example::

    changes: EventEmitter[ConfigurationChangeEvent] = EventEmitter()
    git_changes = filter_event(changes, lambda e: e.affects_configuration("git"))
    event = await wait_for_event(git_changes)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from gitboot.disposable import Disposable
from gitboot.logging import get_logger

__all__ = [
    "EventSource",
    "EventEmitter",
    "FilteredEvent",
    "filter_event",
    "wait_for_event",
]

logger = get_logger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

Listener = Callable[[T], object]


class EventSource(Protocol[T_co]):
    """Something that can be subscribed to."""

    def subscribe(self, listener: Callable[[T_co], object]) -> Disposable: ...


class EventEmitter(Generic[T]):
    """Synchronous publish/subscribe for a single event type.

    Listeners run in subscription order. A listener that raises is logged
    and the remaining listeners still run.
    """

    __slots__ = ("_listeners", "_disposed")

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], object]] = []
        self._disposed = False

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Callable[[T], object]) -> Disposable:
        """Register ``listener``; dispose the returned handle to unsubscribe."""
        if self._disposed:
            return Disposable(lambda: None)
        self._listeners.append(listener)
        return Disposable(lambda: self._remove(listener))

    def _remove(self, listener: Callable[[T], object]) -> None:
        # Remove by identity, first occurrence only
        for index, candidate in enumerate(self._listeners):
            if candidate is listener:
                del self._listeners[index]
                return

    def fire(self, value: T) -> None:
        """Deliver ``value`` to every current listener."""
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(
                    "event_listener_failed",
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )

    def dispose(self) -> None:
        """Drop all listeners; later subscriptions are no-ops."""
        self._listeners.clear()
        self._disposed = True


class FilteredEvent(Generic[T]):
    """View of ``source`` that forwards only values matching ``predicate``."""

    __slots__ = ("_source", "_predicate")

    def __init__(
        self, source: EventSource[T], predicate: Callable[[T], bool]
    ) -> None:
        self._source = source
        self._predicate = predicate

    def subscribe(self, listener: Callable[[T], object]) -> Disposable:
        def forward(value: T) -> None:
            if self._predicate(value):
                listener(value)

        return self._source.subscribe(forward)


def filter_event(
    source: EventSource[T], predicate: Callable[[T], bool]
) -> FilteredEvent[T]:
    """Return a source that only fires when ``predicate(value)`` holds."""
    return FilteredEvent(source, predicate)


async def wait_for_event(source: EventSource[T]) -> T:
    """Wait for the next value from ``source``.

    The listener is removed as soon as the first value arrives, and also
    when the waiting task is cancelled, so nothing stays subscribed.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def on_value(value: T) -> None:
        subscription.dispose()
        if not future.done():
            future.set_result(value)

    subscription = source.subscribe(on_value)
    try:
        return await future
    finally:
        subscription.dispose()
