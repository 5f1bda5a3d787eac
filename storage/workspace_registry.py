"""Registry of open workspace roots."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from loguru import logger


class WorkspaceRegistry:
    """
    Insertion-ordered set of workspace root paths plus the current one.

    Registry order is first-insertion order; re-adding a path neither
    duplicates nor moves it. The current path is always registered, or "".
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: Dict[str, None] = {}
        self._current = ""
        self.add_all(paths)

    @property
    def current(self) -> str:
        return self._current

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def set_current(self, path: str) -> None:
        """Replace the current workspace path, registering it when unknown."""
        if path and path not in self._paths:
            logger.debug(f"Current workspace {path} was not registered; adding it.")
            self._paths[path] = None
        self._current = path

    def add_all(self, paths: Iterable[str]) -> None:
        for path in paths:
            self._paths.setdefault(path, None)

    def update(self, path: str, remove: bool = False) -> None:
        """Add ``path`` or, with ``remove``, drop it. Removing an unknown path is a no-op."""
        if not remove:
            self._paths.setdefault(path, None)
            return
        if path not in self._paths:
            return
        del self._paths[path]
        if self._current == path:
            self._current = ""

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)
