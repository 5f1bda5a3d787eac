"""Error taxonomy and the single reporting funnel used by every bundle component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from loguru import logger


class BundleError(RuntimeError):
    """Base class for errors raised or reported by the bundle pipeline."""


class FilterFetchError(BundleError):
    """The list of supported files could not be fetched from the server."""


class PipelineStageError(BundleError):
    """The remote pipeline reported a failure through its error stage event."""


class RequestRejection(BundleError):
    """The analyse request itself failed before reaching a terminal stage."""


class UploadPreparationError(BundleError):
    """The upload-eligibility pass could not list the workspace files."""


class ErrorHandler(Protocol):
    def handle(self, source: Any, error: BaseException, context: Dict[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class ErrorReport:
    source: Any
    error: BaseException
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return str(self.context.get("message", ""))


class LoggingErrorHandler:
    """Default host handler: logs the error with its traceback, nothing user-visible."""

    def handle(self, source: Any, error: BaseException, context: Dict[str, Any]) -> None:
        message = context.get("message") or type(error).__name__
        logger.opt(exception=error).error(f"[{type(source).__name__}] {message}: {error}")


class ErrorFunnel:
    """
    Funnels ``(error, context)`` pairs to the host error handler.

    ``report`` never raises: a handler that fails is logged and the failure
    stops here, so a broken notification path can't take a pipeline down.
    """

    def __init__(self, handler: Optional[ErrorHandler] = None) -> None:
        self._handler: ErrorHandler = handler or LoggingErrorHandler()

    def report(self, source: Any, error: BaseException, message: str) -> ErrorReport:
        report = ErrorReport(source=source, error=error, context={"message": message})
        try:
            self._handler.handle(report.source, report.error, dict(report.context))
        except Exception as exc:
            logger.exception(f"Error handler failed while reporting {error!r}: {exc}")
        return report
