"""Rewrites analysis results to workspace-relative paths before merging."""

from __future__ import annotations

from typing import Any, Dict

from loguru import logger

from models.bundle import AnalysisCheckResult, AnalysisResultCollection
from storage.analysis_store import AnalysisResultsStore


def normalize_analysis_results(result: AnalysisCheckResult, workspace_root: str) -> AnalysisResultCollection:
    """
    Strip ``workspace_root`` from every result file key.

    The root is matched literally, up to a path separator, so a sibling such
    as `/ws2` is not under `/ws`. Keys outside the root don't belong to this
    workspace: they are logged and dropped.
    """
    prefix = workspace_root.rstrip("/")
    files: Dict[str, Any] = {}
    for file_path, file_result in result.analysis_results.files.items():
        if not file_path.startswith(prefix + "/"):
            logger.warning(f"Dropping result for {file_path}: not under workspace root {workspace_root}.")
            continue
        files[file_path[len(prefix):]] = file_result

    return AnalysisResultCollection(
        files=files,
        suggestions=dict(result.analysis_results.suggestions),
        success=True,
    )


def merge_analysis_results(
    store: AnalysisResultsStore,
    result: AnalysisCheckResult,
    workspace_root: str,
) -> AnalysisResultCollection:
    collection = normalize_analysis_results(result, workspace_root)
    logger.info(f"Analysis result is ready for {workspace_root} ({len(collection.files)} files).")
    store.merge(collection, workspace_root)
    return collection
