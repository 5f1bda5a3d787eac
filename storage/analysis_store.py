"""Aggregate store of normalized analysis results."""

from __future__ import annotations

from typing import Dict, Optional, Protocol

from loguru import logger

from models.bundle import AnalysisResultCollection


class AnalysisResultsStore(Protocol):
    def merge(self, collection: AnalysisResultCollection, workspace_root: str) -> None:
        ...


class InMemoryAnalysisResultsStore:
    """
    Keeps the latest AnalysisResultCollection per workspace root.

    A merge replaces the per-file results it mentions and keeps the others;
    suggestions are combined the same way, and ``success`` follows the most
    recent merge.
    """

    def __init__(self) -> None:
        self._results: Dict[str, AnalysisResultCollection] = {}

    def merge(self, collection: AnalysisResultCollection, workspace_root: str) -> None:
        current = self._results.get(workspace_root)
        if current is None:
            self._results[workspace_root] = collection.model_copy(deep=True)
        else:
            current.files.update(collection.files)
            current.suggestions.update(collection.suggestions)
            current.success = collection.success
        logger.info(f"Merged results for {len(collection.files)} files into {workspace_root}.")

    def get(self, workspace_root: str) -> Optional[AnalysisResultCollection]:
        return self._results.get(workspace_root)

    def all(self) -> Dict[str, AnalysisResultCollection]:
        return dict(self._results)
