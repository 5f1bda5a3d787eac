"""Pipeline stage events emitted by the remote service during one analysis run."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.bundle import AnalysisCheckResult


class StageKind(str, Enum):
    """Stage signals of the build → upload → analyse pipeline, plus the error terminal."""

    BUILD_PROGRESS = "buildBundleProgress"
    BUILD_FINISH = "buildBundleFinish"
    UPLOAD_PROGRESS = "uploadBundleProgress"
    UPLOAD_FINISH = "uploadFilesFinish"
    ANALYSE_PROGRESS = "analyseProgress"
    ANALYSE_FINISH = "analyseFinish"
    ERROR = "error"


TERMINAL_KINDS = frozenset({StageKind.ANALYSE_FINISH, StageKind.ERROR})


class BuildProgress(BaseModel):
    kind: Literal[StageKind.BUILD_PROGRESS] = StageKind.BUILD_PROGRESS
    processed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class BuildFinish(BaseModel):
    kind: Literal[StageKind.BUILD_FINISH] = StageKind.BUILD_FINISH


class UploadProgress(BaseModel):
    kind: Literal[StageKind.UPLOAD_PROGRESS] = StageKind.UPLOAD_PROGRESS
    processed: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class UploadFinish(BaseModel):
    kind: Literal[StageKind.UPLOAD_FINISH] = StageKind.UPLOAD_FINISH


class AnalyseProgress(BaseModel):
    kind: Literal[StageKind.ANALYSE_PROGRESS] = StageKind.ANALYSE_PROGRESS
    result: AnalysisCheckResult = Field(default_factory=AnalysisCheckResult)


class AnalyseFinish(BaseModel):
    kind: Literal[StageKind.ANALYSE_FINISH] = StageKind.ANALYSE_FINISH
    result: AnalysisCheckResult


class PipelineFailed(BaseModel):
    """Error terminal; ``error`` is whatever the remote client raised internally."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal[StageKind.ERROR] = StageKind.ERROR
    error: BaseException


StageEvent = Union[
    BuildProgress,
    BuildFinish,
    UploadProgress,
    UploadFinish,
    AnalyseProgress,
    AnalyseFinish,
    PipelineFailed,
]


def is_terminal(event: StageEvent) -> bool:
    return event.kind in TERMINAL_KINDS
