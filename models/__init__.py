from .bundle import (
    AnalysisCheckResult,
    AnalysisResultCollection,
    FilterList,
    RemoteBundle,
    ServerAnalysisResults,
)
from .events import (
    AnalyseFinish,
    AnalyseProgress,
    BuildFinish,
    BuildProgress,
    PipelineFailed,
    StageEvent,
    StageKind,
    UploadFinish,
    UploadProgress,
    is_terminal,
)

__all__ = [
    "AnalysisCheckResult",
    "AnalysisResultCollection",
    "FilterList",
    "RemoteBundle",
    "ServerAnalysisResults",
    "AnalyseFinish",
    "AnalyseProgress",
    "BuildFinish",
    "BuildProgress",
    "PipelineFailed",
    "StageEvent",
    "StageKind",
    "UploadFinish",
    "UploadProgress",
    "is_terminal",
]
