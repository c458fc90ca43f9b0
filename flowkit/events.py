"""Synchronous publish/subscribe events.

An ``Event`` is a registry of callables fired in subscription order at the
point where a graph or an algorithm mutates state. There is no global bus:
each object owns its events as attributes (``graph.edge_added``,
``augmentor.super_source_added``, ...).

Example:
    >>> added = []
    >>> handle = augmentor.edge_added.subscribe(added.append)
    >>> augmentor.compute()
    >>> handle.remove()
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterator, TypeVar

T = TypeVar("T")

Handler = Callable[..., Any]


class EventHandle:
    """Token returned by ``Event.subscribe``; ``remove()`` detaches the handler."""

    __slots__ = ("_event", "_token")

    def __init__(self, event: "Event[Any]", token: int) -> None:
        self._event = event
        self._token = token

    @property
    def active(self) -> bool:
        return self._token in self._event._handlers

    def remove(self) -> None:
        self._event._handlers.pop(self._token, None)

    def __enter__(self) -> "EventHandle":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.remove()


class Event(Generic[T]):
    """Named list of handlers invoked synchronously by ``fire``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: Dict[int, Handler] = {}
        self._next_token = 0

    def subscribe(self, handler: Handler) -> EventHandle:
        """Register ``handler``; the same callable may be registered twice.

        Raises:
            TypeError: If ``handler`` is not callable.
        """
        if not callable(handler):
            raise TypeError(f"Handler for event '{self.name}' must be callable.")
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = handler
        return EventHandle(self, token)

    def unsubscribe(self, handler: Handler) -> bool:
        """Remove the most recent registration of ``handler``.

        Returns:
            bool: True if a registration was removed.
        """
        for token in reversed(list(self._handlers)):
            if self._handlers[token] == handler:
                del self._handlers[token]
                return True
        return False

    def clear(self) -> None:
        self._handlers.clear()

    def fire(self, *args: Any) -> None:
        # Snapshot so handlers may unsubscribe while the event is firing
        for handler in list(self._handlers.values()):
            handler(*args)

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[Handler]:
        return iter(list(self._handlers.values()))

    def __repr__(self) -> str:
        return f"Event(name={self.name!r}, handlers={len(self._handlers)})"
