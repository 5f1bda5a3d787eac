"""Mirror of the bundles acknowledged by the remote service."""

from __future__ import annotations

from typing import Dict, Optional

from loguru import logger

from models.bundle import RemoteBundle
from utils.helpers import bundle_is_empty


class RemoteBundleMirror:
    """Workspace root → last RemoteBundle acknowledged by the server."""

    def __init__(self) -> None:
        self._records: Dict[str, RemoteBundle] = {}

    def set_or_clear(self, path: str, bundle: Optional[RemoteBundle] = None) -> None:
        """Replace the record for ``path`` with a copy of ``bundle``, or clear it when None."""
        if bundle is not None:
            self._records[path] = bundle.model_copy(deep=True)
            logger.debug(f"Remote bundle for {path} set to {bundle.bundle_id}.")
            return
        if self._records.pop(path, None) is not None:
            logger.debug(f"Remote bundle for {path} cleared.")

    def get(self, path: str) -> Optional[RemoteBundle]:
        return self._records.get(path)

    def is_empty(self, path: Optional[str] = None) -> bool:
        return bundle_is_empty(self._records, path)
