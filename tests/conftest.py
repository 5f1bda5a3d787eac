from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest
from loguru import logger

from bundles.errors import ErrorFunnel
from bundles.filters import FilterListCache
from bundles.orchestrator import BundlePipeline
from clients.events import BundleEventEmitter
from clients.service_client import BaseServiceClient
from models.bundle import AnalysisCheckResult, AnalysisResultCollection, FilterList, ServerAnalysisResults
from models.events import AnalyseFinish, BuildFinish, StageEvent, UploadFinish, UploadProgress

Script = Union[Sequence[StageEvent], Callable[[List[str]], Sequence[StageEvent]]]

ROOT = "/home/dev/project"


def finish_event(root: str, files: Dict[str, Any], suggestions: Optional[Dict[str, Any]] = None) -> AnalyseFinish:
    """AnalyseFinish whose result files are keyed by ``root + key``."""
    return AnalyseFinish(
        result=AnalysisCheckResult(
            status="DONE",
            progress=1.0,
            analysis_results=ServerAnalysisResults(
                files={root + key: value for key, value in files.items()},
                suggestions=suggestions or {"0": {"id": "no-unused-vars", "severity": 2}},
            ),
        )
    )


def happy_script(root: str) -> List[StageEvent]:
    return [
        BuildFinish(),
        UploadProgress(processed=50, total=100),
        UploadFinish(),
        finish_event(root, {"/a.js": {"0": [{"rows": [1, 1]}]}}),
    ]


class FakeServiceClient(BaseServiceClient):
    """Scripted remote client: emits the configured stage events on the run's channel."""

    def __init__(
        self,
        filters: Any = None,
        files: Optional[Dict[str, List[str]]] = None,
        script: Script = (),
        filter_error: Optional[Exception] = None,
        reject: Optional[Exception] = None,
    ) -> None:
        self.filters = filters if filters is not None else {"extensions": ["JS", ".ts"], "configFiles": ["/.eslintrc"]}
        self.files = files or {}
        self.script = script
        self.filter_error = filter_error
        self.reject = reject
        self.calls: List[tuple] = []
        self.channels: List[BundleEventEmitter] = []

    async def get_filters(self, token: str) -> Any:
        self.calls.append(("get_filters", token))
        if self.filter_error is not None:
            raise self.filter_error
        return self.filters

    def start_upload(self, path: str, filter_list: FilterList):
        self.calls.append(("start_upload", path))
        return iter(self.files.get(path, []))

    async def analyse(self, files: List[str], token: str, events: BundleEventEmitter) -> None:
        self.calls.append(("analyse", list(files), token))
        self.channels.append(events)
        script = self.script(files) if callable(self.script) else self.script
        for event in script:
            await asyncio.sleep(0)
            events.emit(event)
        if self.reject is not None:
            raise self.reject


class RecordingSink:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.increments: List[float] = []

    def report(self, increment: float) -> None:
        if self.error is not None:
            raise self.error
        self.increments.append(increment)


class RecordingProgressHost:
    def __init__(self) -> None:
        self.sink_error: Optional[Exception] = None
        self.opened: List[tuple] = []
        self.sinks: List[RecordingSink] = []

    @asynccontextmanager
    async def open(self, title: str, cancellable: bool = False):
        self.opened.append((title, cancellable))
        sink = RecordingSink(self.sink_error)
        self.sinks.append(sink)
        yield sink


class RecordingResultsStore:
    def __init__(self) -> None:
        self.merges: List[tuple] = []

    def merge(self, collection: AnalysisResultCollection, workspace_root: str) -> None:
        self.merges.append((collection, workspace_root))


class RecordingErrorHandler:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.reports: List[tuple] = []

    def handle(self, source: Any, error: BaseException, context: Dict[str, Any]) -> None:
        self.reports.append((source, error, context))
        if self.fail:
            raise RuntimeError("notification service down")


@pytest.fixture()
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture()
def progress() -> RecordingProgressHost:
    return RecordingProgressHost()


@pytest.fixture()
def results() -> RecordingResultsStore:
    return RecordingResultsStore()


@pytest.fixture()
def error_handler() -> RecordingErrorHandler:
    return RecordingErrorHandler()


@pytest.fixture()
def funnel(error_handler: RecordingErrorHandler) -> ErrorFunnel:
    return ErrorFunnel(error_handler)


@pytest.fixture()
def make_pipeline(progress, results, funnel):
    """Build a pipeline around ``client``; filters are fetched unless ``load_filters`` is False."""

    async def _make(client: FakeServiceClient, load_filters: bool = True) -> BundlePipeline:
        filters = FilterListCache(client, funnel)
        if load_filters:
            await filters.refresh("token-1")
            client.calls.clear()
        return BundlePipeline(client, filters, results, funnel, progress=progress, progress_title="Analysing")

    return _make
