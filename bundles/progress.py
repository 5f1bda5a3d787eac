"""Progress reporting for one pipeline invocation.

Stage values are absolute percentages of the whole run:

    build finished            33
    upload in flight          33 + processed / total * 33
    upload finished           80
    analysis in flight        90
    analysis finished/failed  100

Hosts expect increments on top of the current value, so ``ProgressTracker``
converts every new percentage into the delta over the last one it reported.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Protocol

from loguru import logger

BUILD_DONE = 33.0
UPLOAD_PHASE = 33.0
UPLOAD_DONE = 80.0
ANALYSE_RUNNING = 90.0
COMPLETE = 100.0


def upload_progress(processed: int, total: int) -> float:
    """Linear interpolation across the upload phase, offset past the build phase."""
    if total <= 0:
        return BUILD_DONE + UPLOAD_PHASE
    return processed / total * UPLOAD_PHASE + BUILD_DONE


class ProgressSink(Protocol):
    def report(self, increment: float) -> None:
        ...


class ProgressHost(Protocol):
    def open(self, title: str, cancellable: bool = False):
        """Async context manager yielding a ProgressSink for the whole invocation."""
        ...


class _LoggingSink:
    def __init__(self, title: str) -> None:
        self._title = title
        self._total = 0.0

    def report(self, increment: float) -> None:
        self._total += increment
        logger.debug(f"{self._title}: {self._total:.1f}%")


class LoggingProgressHost:
    """Headless progress host: writes progress to the log."""

    @asynccontextmanager
    async def open(self, title: str, cancellable: bool = False) -> AsyncIterator[ProgressSink]:
        logger.info(f"{title}...")
        yield _LoggingSink(title)
        logger.info(f"{title}: done.")


class ProgressTracker:
    """Turns absolute stage percentages into host increments."""

    def __init__(self, sink: ProgressSink) -> None:
        self._sink = sink
        self._current = 0.0
        self.history: List[float] = []

    @property
    def current(self) -> float:
        return self._current

    def advance_to(self, percent: float) -> None:
        percent = min(percent, COMPLETE)
        self.history.append(percent)
        increment = percent - self._current
        if increment <= 0:
            return
        self._current = percent
        self._sink.report(increment=increment)
