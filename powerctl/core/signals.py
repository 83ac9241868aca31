from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


class SignalHub:
    """
    Named signals with synchronous, ordered delivery.

    Listeners run inline in registration order before emit() returns, the same
    way GObject signals behave. A listener that raises is logged and skipped.
    """

    def __init__(self, names: Iterable[str]):
        self._handlers: dict[str, list[tuple[int, Callable[..., Any]]]] = {
            name: [] for name in names
        }
        self._ids = itertools.count(1)

    def _check(self, name: str) -> None:
        if name not in self._handlers:
            raise ValueError(f"Unknown signal '{name}'")

    def connect(self, name: str, callback: Callable[..., Any]) -> int:
        self._check(name)
        handler_id = next(self._ids)
        self._handlers[name].append((handler_id, callback))
        return handler_id

    def disconnect(self, handler_id: int) -> bool:
        for handlers in self._handlers.values():
            for i, (hid, _) in enumerate(handlers):
                if hid == handler_id:
                    del handlers[i]
                    return True
        return False

    def handlers(self, name: str) -> list[Callable[..., Any]]:
        self._check(name)
        return [cb for _, cb in self._handlers[name]]

    def emit(self, name: str, *args: Any) -> None:
        # Copy so a listener can disconnect itself during delivery
        for callback in self.handlers(name):
            try:
                callback(*args)
            except Exception:
                logger.exception("Listener %r for '%s' failed", callback, name)
