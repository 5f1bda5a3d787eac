"""Pydantic models for workspace bundles and analysis results."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


class FilterList(BaseModel):
    """Server-declared set of file extensions and config file names eligible for analysis."""

    extensions: Set[str] = Field(default_factory=set, description="Extensions with a leading dot, e.g. '.js'")
    config_files: Set[str] = Field(default_factory=set, description="Exact config file names, e.g. '.eslintrc'")

    def is_empty(self) -> bool:
        return not self.extensions and not self.config_files


class RemoteBundle(BaseModel):
    """Opaque descriptor of a bundle acknowledged by the remote service."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    bundle_id: str = Field(..., alias="bundleId")
    missing_files: List[str] = Field(default_factory=list, alias="missingFiles")
    upload_url: Optional[str] = Field(default=None, alias="uploadURL")


class ServerAnalysisResults(BaseModel):
    """The ``analysisResults`` block of an analysis status payload."""

    files: Dict[str, Any] = Field(default_factory=dict, description="Per-file results keyed by absolute path")
    suggestions: Dict[str, Any] = Field(default_factory=dict)


class AnalysisCheckResult(BaseModel):
    """Payload delivered with the analyse-progress and analyse-finish stage events."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="")
    progress: float = Field(default=0.0)
    analysis_results: ServerAnalysisResults = Field(
        default_factory=ServerAnalysisResults,
        alias="analysisResults",
    )


class AnalysisResultCollection(BaseModel):
    """Normalized analysis results, file keys relative to the workspace root."""

    files: Dict[str, Any] = Field(default_factory=dict)
    suggestions: Dict[str, Any] = Field(default_factory=dict)
    success: bool = False
