"""Local discovery of files eligible for upload."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from loguru import logger

from config.settings import settings
from models.bundle import FilterList


def is_eligible(name: str, filter_list: FilterList) -> bool:
    """Match a bare file name against the filter list."""
    if name in filter_list.config_files:
        return True
    suffix = Path(name).suffix.lower()
    return bool(suffix) and suffix in filter_list.extensions


def collect_eligible_files(
    root: str,
    filter_list: FilterList,
    ignored_dirs: Optional[Iterable[str]] = None,
) -> Iterator[str]:
    """
    Lazily walk ``root`` and yield eligible files as bundle-relative paths.

    Entries are POSIX style with a leading slash (``/src/app.js``) so that
    ``root + entry`` gives back the absolute path. Ignored directories are
    pruned, not descended into. Directory order is sorted for stable bundles.
    """
    if filter_list.is_empty():
        return
    skip = set(settings.ignored_dirs if ignored_dirs is None else ignored_dirs)
    base = Path(root)
    if not base.is_dir():
        logger.warning(f"Workspace root {root} is not a directory; nothing to collect.")
        return

    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in skip)
        for name in sorted(filenames):
            if not is_eligible(name, filter_list):
                continue
            rel = (Path(dirpath) / name).relative_to(base).as_posix()
            yield f"/{rel}"
