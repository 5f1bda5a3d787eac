"""Bundle pipeline orchestrator.

Drives one build → upload → analyse cycle for a workspace:

1. upload-eligibility pass   – ask the client which files are eligible
2. analyse request           – hand the absolute file list to the client
3. stage events              – turn them into progress, results and errors

Each run gets a private event channel and its own InvocationContext, and runs
for the same workspace are serialized, so concurrent runs can't see each
other's events or file lists.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Dict, List, Optional

from loguru import logger

from bundles.errors import ErrorFunnel, PipelineStageError, RequestRejection, UploadPreparationError
from bundles.filters import FilterListCache
from bundles.invocation_state import FAILED, SUCCESS, InvocationContext
from bundles.messages import (
    ANALYSIS_ENDED_WITHOUT_RESULT,
    ANALYSIS_FAILED,
    ANALYSIS_INTERRUPTED,
    ANALYSIS_REQUEST_REJECTED,
    UPLOAD_PREPARATION_FAILED,
)
from bundles.normalizer import merge_analysis_results
from bundles.progress import (
    ANALYSE_RUNNING,
    BUILD_DONE,
    COMPLETE,
    UPLOAD_DONE,
    LoggingProgressHost,
    ProgressHost,
    ProgressTracker,
    upload_progress,
)
from clients.events import BundleEventEmitter
from clients.service_client import ServiceClient
from config.settings import settings
from models.events import (
    AnalyseFinish,
    AnalyseProgress,
    BuildFinish,
    BuildProgress,
    PipelineFailed,
    StageEvent,
    StageKind,
    UploadFinish,
    UploadProgress,
)
from storage.analysis_store import AnalysisResultsStore
from utils.helpers import to_absolute_paths


class BundlePipeline:
    """Runs the remote analysis pipeline, one run at a time per workspace."""

    def __init__(
        self,
        client: ServiceClient,
        filters: FilterListCache,
        results: AnalysisResultsStore,
        errors: ErrorFunnel,
        progress: Optional[ProgressHost] = None,
        progress_title: Optional[str] = None,
    ) -> None:
        self._client = client
        self._filters = filters
        self._results = results
        self._errors = errors
        self._progress: ProgressHost = progress or LoggingProgressHost()
        self._progress_title = progress_title or settings.progress_title
        self._locks: Dict[str, asyncio.Lock] = {}

        # File list of the most recent run, whatever its workspace.
        self.last_files: List[str] = []

    async def run(self, workspace_path: str, token: str) -> Optional[InvocationContext]:
        """
        Execute one analysis cycle for ``workspace_path``.

        Returns:
            The finished InvocationContext, or None when the filter list is
            empty and nothing was attempted.
        """
        if self._filters.is_empty():
            logger.debug(f"Filter list is empty; skipping analysis of {workspace_path}.")
            return None

        workspace_path = workspace_path.rstrip("/") or "/"
        lock = self._locks.setdefault(workspace_path, asyncio.Lock())
        if lock.locked():
            logger.debug(f"Analysis of {workspace_path} already running; waiting for it.")
        async with lock:
            return await self._run_locked(workspace_path, token)

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _prepare_upload(self, workspace_path: str) -> List[str]:
        listing = self._client.start_upload(workspace_path, self._filters.value)
        if inspect.isawaitable(listing):
            listing = await listing
        if hasattr(listing, "__aiter__"):
            return [file async for file in listing]
        return list(listing)

    async def _run_locked(self, workspace_path: str, token: str) -> InvocationContext:
        context = InvocationContext(workspace_path=workspace_path)
        try:
            context.files = await self._prepare_upload(workspace_path)
        except Exception as exc:
            logger.error(f"Listing eligible files in {workspace_path} failed: {exc}")
            error = UploadPreparationError(f"{UPLOAD_PREPARATION_FAILED}: {exc}")
            error.__cause__ = exc
            context.outcome = FAILED
            self._errors.report(self, error, UPLOAD_PREPARATION_FAILED)
            return context

        context.absolute_files = to_absolute_paths(context.files, workspace_path)
        self.last_files = list(context.files)
        logger.info(f"Analysing {len(context.files)} files in {workspace_path}.")

        request: Optional["asyncio.Future[object]"] = None
        try:
            async with self._progress.open(self._progress_title, cancellable=False) as sink:
                tracker = ProgressTracker(sink)
                channel = BundleEventEmitter()
                queue: "asyncio.Queue[StageEvent]" = asyncio.Queue()
                for kind in StageKind:
                    channel.on(kind, queue.put_nowait)

                try:
                    request = asyncio.ensure_future(
                        self._client.analyse(context.absolute_files, token, channel)
                    )
                    await self._consume(context, tracker, channel, queue, request)
                    await self._settle(context, tracker, request)
                finally:
                    channel.remove_listeners()
                    await self._discard(request)
        except Exception as exc:
            logger.error(f"Analysis of {workspace_path} was interrupted: {exc}")
            error = PipelineStageError(f"{ANALYSIS_INTERRUPTED}: {exc}")
            error.__cause__ = exc
            context.outcome = FAILED
            self._errors.report(self, error, ANALYSIS_INTERRUPTED)

        logger.info(f"Analysis of {workspace_path} finished: {context.outcome}.")
        return context

    @staticmethod
    async def _discard(request: Optional["asyncio.Future[object]"]) -> None:
        """Cancel an analyse request still in flight and wait for it to unwind."""
        if request is None:
            return
        if not request.done():
            request.cancel()
        await asyncio.gather(request, return_exceptions=True)

    async def _consume(
        self,
        context: InvocationContext,
        tracker: ProgressTracker,
        channel: BundleEventEmitter,
        queue: "asyncio.Queue[StageEvent]",
        request: "asyncio.Future[object]",
    ) -> None:
        """Dispatch stage events until a terminal one, or until the request ends with none queued."""
        while not context.finished:
            if not queue.empty():
                event = queue.get_nowait()
            elif request.done():
                return
            else:
                getter = asyncio.ensure_future(queue.get())
                done, _ = await asyncio.wait({getter, request}, return_when=asyncio.FIRST_COMPLETED)
                if getter not in done:
                    getter.cancel()
                    continue
                event = getter.result()

            self._dispatch(context, tracker, event)
            if context.finished:
                channel.remove_listeners()

    async def _settle(
        self,
        context: InvocationContext,
        tracker: ProgressTracker,
        request: "asyncio.Future[object]",
    ) -> None:
        """Collect the analyse call's own outcome once the stage events are done."""
        try:
            await request
        except Exception as exc:
            logger.error(f"Analysis request for {context.workspace_path} failed: {exc}")
            if context.finished:
                return
            rejection = RequestRejection(f"{ANALYSIS_REQUEST_REJECTED}: {exc}")
            rejection.__cause__ = exc
            self._fail(context, tracker, rejection, ANALYSIS_REQUEST_REJECTED)
            return

        if not context.finished:
            logger.warning(f"Analysis request for {context.workspace_path} returned without a terminal event.")
            self._fail(
                context,
                tracker,
                PipelineStageError(ANALYSIS_ENDED_WITHOUT_RESULT),
                ANALYSIS_ENDED_WITHOUT_RESULT,
            )

    def _fail(self, context: InvocationContext, tracker: ProgressTracker, error: Exception, message: str) -> None:
        tracker.advance_to(COMPLETE)
        context.outcome = FAILED
        self._errors.report(self, error, message)

    def _dispatch(self, context: InvocationContext, tracker: ProgressTracker, event: StageEvent) -> None:
        if isinstance(event, BuildProgress):
            logger.debug(f"BUILD BUNDLE PROGRESS - {event.processed}/{event.total}")

        elif isinstance(event, BuildFinish):
            tracker.advance_to(BUILD_DONE)
            logger.debug("BUILD BUNDLE FINISH")

        elif isinstance(event, UploadProgress):
            logger.debug(f"UPLOAD BUNDLE PROGRESS - {event.processed}/{event.total}")
            tracker.advance_to(upload_progress(event.processed, event.total))

        elif isinstance(event, UploadFinish):
            logger.debug("UPLOAD BUNDLE FINISH")
            tracker.advance_to(UPLOAD_DONE)

        elif isinstance(event, AnalyseProgress):
            tracker.advance_to(ANALYSE_RUNNING)
            logger.debug(f"ANALYSE PROGRESS - {event.result.status or 'running'} {event.result.progress:.0%}")

        elif isinstance(event, AnalyseFinish):
            tracker.advance_to(COMPLETE)
            try:
                context.result = merge_analysis_results(self._results, event.result, context.workspace_path)
            except Exception as exc:
                context.outcome = FAILED
                self._errors.report(self, exc, f"Failed to store analysis results for {context.workspace_path}")
                return
            context.outcome = SUCCESS

        elif isinstance(event, PipelineFailed):
            logger.debug(f"ANALYSE ERROR - {event.error!r}")
            error = PipelineStageError(ANALYSIS_FAILED)
            error.__cause__ = event.error
            self._fail(context, tracker, error, ANALYSIS_FAILED)
