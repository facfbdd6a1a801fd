"""Minimal named-event emitter."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

Handler = Callable[[Any], Any]


class EventEmitter:
    """Publish/subscribe by event name.

    Handlers run synchronously, in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def on(self, event: str, handler: Handler) -> EventEmitter:
        """Subscribe ``handler`` to ``event``."""
        self._handlers.setdefault(event, []).append(handler)
        return self

    def off(self, event: str, handler: Handler) -> EventEmitter:
        """Unsubscribe the first registration of ``handler`` from ``event``."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        return self

    def emit(self, event: str, payload: Any = None) -> bool:
        """Call every handler of ``event`` with ``payload``.

        Returns:
            True if at least one handler was called.
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            handler(payload)
        return bool(handlers)

    def listener_count(self, event: str) -> int:
        """Return the number of handlers subscribed to ``event``."""
        return len(self._handlers.get(event, []))
