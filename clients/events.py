"""Event source for pipeline stage events."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Dict, List, Optional

from loguru import logger

from models.events import StageEvent, StageKind

Listener = Callable[[StageEvent], None]


class BundleEventEmitter:
    """
    Minimal synchronous emitter keyed by StageKind.

    Remote clients push typed events through ``emit``; listeners run in
    registration order on the emitting coroutine. Exceptions raised by a
    listener propagate to the emitter.
    """

    def __init__(self) -> None:
        self._listeners: Dict[StageKind, List[Listener]] = defaultdict(list)

    def on(self, kind: StageKind, listener: Listener) -> None:
        self._listeners[kind].append(listener)

    def off(self, kind: StageKind, listener: Listener) -> None:
        listeners = self._listeners.get(kind)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def remove_listeners(self, kind: Optional[StageKind] = None) -> None:
        if kind is None:
            self._listeners.clear()
        else:
            self._listeners.pop(kind, None)

    def listener_count(self, kind: Optional[StageKind] = None) -> int:
        if kind is not None:
            return len(self._listeners.get(kind, ()))
        return sum(len(items) for items in self._listeners.values())

    def emit(self, event: StageEvent) -> int:
        """Deliver ``event`` to its listeners. Returns how many were called."""
        listeners = list(self._listeners.get(event.kind, ()))
        if not listeners:
            logger.trace(f"No listeners for {event.kind.value}; event dropped.")
        for listener in listeners:
            listener(event)
        return len(listeners)
