"""Utility helper functions."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from models.bundle import FilterList


def normalize_extension(raw: str) -> str:
    """Lower-case an extension and make sure it carries a leading dot."""
    ext = raw.strip().lower()
    if not ext:
        return ""
    return ext if ext.startswith(".") else f".{ext}"


def normalize_config_file(raw: str) -> str:
    """Strip whitespace and leading slashes from a config file name."""
    return raw.strip().lstrip("/")


def normalize_filter_list(extensions: Iterable[str], config_files: Iterable[str]) -> FilterList:
    """Turn the raw server filter response into a FilterList, dropping blank entries."""
    exts = {normalize_extension(e) for e in extensions}
    configs = {normalize_config_file(c) for c in config_files}
    exts.discard("")
    configs.discard("")
    return FilterList(extensions=exts, config_files=configs)


def to_absolute_paths(files: Iterable[str], root: str) -> List[str]:
    """Prefix every bundle-relative entry (``/sub/a.js``) with the workspace root."""
    root = root.rstrip("/")
    return [root + file for file in files]


def fingerprint(file_path: str) -> str:
    """Change marker for a bundle entry.

    Currently the path itself, so a rebuild only notices added or removed files,
    not edited ones.
    """
    return file_path


def bundle_is_empty(bundles: Mapping[str, Any], path: Optional[str] = None) -> bool:
    """True if ``bundles`` holds no workspaces, or ``path``'s entry holds nothing."""
    if path is not None:
        return not bundles.get(path)
    return not bundles
