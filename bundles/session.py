"""Session facade.

Owns the per-session state (workspace registry, filter list, hash bundles,
remote bundle records) and exposes the operations a host integration calls
on workspace, editor and analysis events.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loguru import logger

from bundles.errors import ErrorFunnel, ErrorHandler
from bundles.filters import FilterListCache
from bundles.invocation_state import InvocationContext
from bundles.orchestrator import BundlePipeline
from bundles.progress import ProgressHost
from clients.service_client import ServiceClient
from config.settings import settings
from models.bundle import FilterList, RemoteBundle
from storage.analysis_store import AnalysisResultsStore, InMemoryAnalysisResultsStore
from storage.bundle_cache import HashBundleCache
from storage.remote_bundles import RemoteBundleMirror
from storage.workspace_registry import WorkspaceRegistry


class BundleSession:
    """
    One analysis session for a host process.

    Pipeline pieces:
    1. WorkspaceRegistry   – open workspace roots and the current one
    2. FilterListCache     – server list of eligible extensions / config files
    3. BundlePipeline      – build → upload → analyse runs
    4. HashBundleCache     – last file set per workspace
    5. RemoteBundleMirror  – bundles the server has acknowledged
    """

    def __init__(
        self,
        client: ServiceClient,
        results: Optional[AnalysisResultsStore] = None,
        progress: Optional[ProgressHost] = None,
        error_handler: Optional[ErrorHandler] = None,
        token: Optional[str] = None,
    ) -> None:
        self.token = settings.session_token if token is None else token
        self.errors = ErrorFunnel(error_handler)
        self.results: AnalysisResultsStore = results if results is not None else InMemoryAnalysisResultsStore()

        self.workspaces = WorkspaceRegistry()
        self.filters = FilterListCache(client, self.errors)
        self.hash_bundles = HashBundleCache()
        self.remote_bundles = RemoteBundleMirror()
        self.pipeline = BundlePipeline(
            client,
            self.filters,
            self.results,
            self.errors,
            progress=progress,
        )

    # ── Workspaces ────────────────────────────────────────────────────────────

    def set_current_workspace(self, path: str) -> None:
        self.workspaces.set_current(path)

    def add_workspaces(self, paths: Iterable[str]) -> None:
        self.workspaces.add_all(paths)

    async def update_workspace(self, path: str, remove: bool = False) -> None:
        """Register ``path``, or forget it together with its hash bundle and remote record."""
        self.workspaces.update(path, remove=remove)
        if remove:
            await self.rebuild_hash_bundles(path, remove=True)
            self.update_remote_bundle(path, None)
            logger.info(f"Workspace {path} removed from the session.")

    # ── Filters ───────────────────────────────────────────────────────────────

    async def refresh_filters(self) -> FilterList:
        return await self.filters.refresh(self.token)

    # ── Analysis ──────────────────────────────────────────────────────────────

    async def analyse_workspace(self, path: str) -> Optional[InvocationContext]:
        return await self.pipeline.run(path, self.token)

    async def analyse_all(self) -> Dict[str, Optional[InvocationContext]]:
        """Analyse every registered workspace, one after the other, in registry order."""
        runs: Dict[str, Optional[InvocationContext]] = {}
        for path in self.workspaces:
            runs[path] = await self.pipeline.run(path, self.token)
        return runs

    # ── Bundles ───────────────────────────────────────────────────────────────

    async def rebuild_hash_bundles(self, path: Optional[str] = None, remove: bool = False) -> None:
        await self.hash_bundles.rebuild(
            self.workspaces.paths,
            self.pipeline.last_files,
            path=path,
            remove=remove,
        )

    def hash_bundles_empty(self, path: Optional[str] = None) -> bool:
        return self.hash_bundles.is_empty(path)

    def remote_bundles_empty(self, path: Optional[str] = None) -> bool:
        return self.remote_bundles.is_empty(path)

    def update_remote_bundle(self, path: str, bundle: Optional[RemoteBundle] = None) -> None:
        self.remote_bundles.set_or_clear(path, bundle)

    @property
    def workspace_paths(self) -> List[str]:
        return self.workspaces.paths
