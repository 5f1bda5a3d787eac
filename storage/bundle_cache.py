"""In-memory cache of the last hash bundle built per workspace."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from loguru import logger

from utils.helpers import bundle_is_empty, fingerprint

HashBundle = Dict[str, str]


class HashBundleCache:
    """
    Maps workspace root → (file identity → fingerprint).

    Nothing is persisted; the cache lives as long as the owning session.
    """

    def __init__(self) -> None:
        self._bundles: Dict[str, HashBundle] = {}

    # ── Internal helpers ──────────────────────────────────────────────────────

    async def _build_single(self, path: str, files: Iterable[str]) -> HashBundle:
        """Convert a bundle-relative file list into a fingerprint map."""
        bundle: HashBundle = {}
        for file_path in files:
            bundle[file_path] = fingerprint(file_path)
        logger.debug(f"Built hash bundle for {path}: {len(bundle)} files.")
        return bundle

    # ── Public API ────────────────────────────────────────────────────────────

    async def rebuild(
        self,
        workspaces: Iterable[str],
        files: Iterable[str],
        path: Optional[str] = None,
        remove: bool = False,
    ) -> None:
        """
        Rebuild, or drop, hash bundles.

        Args:
            workspaces: Registered workspace roots, in registry order.
            files: The file list of the most recent pipeline run. Every rebuilt
                workspace receives this same list; it is not re-derived per
                workspace.
            path: Restrict the operation to one workspace. Without it every
                workspace in ``workspaces`` is rebuilt, one after the other.
            remove: Delete ``path``'s entry instead of rebuilding it.
        """
        files = list(files)
        if not path:
            for workspace in list(workspaces):
                self._bundles[workspace] = await self._build_single(workspace, files)
            return
        if remove:
            if self._bundles.pop(path, None) is not None:
                logger.debug(f"Dropped hash bundle for {path}.")
            return
        self._bundles[path] = await self._build_single(path, files)

    def is_empty(self, path: Optional[str] = None) -> bool:
        return bundle_is_empty(self._bundles, path)

    def get(self, path: str) -> Optional[HashBundle]:
        bundle = self._bundles.get(path)
        return dict(bundle) if bundle is not None else None

    @property
    def workspaces(self) -> List[str]:
        return list(self._bundles)

    def as_dict(self) -> Dict[str, HashBundle]:
        return {path: dict(bundle) for path, bundle in self._bundles.items()}
