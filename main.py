"""
Workspace bundle inspector – main entry point.

Lists the files a workspace would submit for analysis and builds their hash
bundles locally, without contacting the analysis service.

Usage
-----
python main.py --workspace ~/src/app --extensions .js,.ts --config-files .eslintrc
"""

from __future__ import annotations

import argparse
import asyncio
import os
from typing import List

from dotenv import load_dotenv
from loguru import logger

load_dotenv(override=True)

from config.logging import configure_logging  # noqa: E402 – must be after load_dotenv
from storage.bundle_cache import HashBundleCache  # noqa: E402
from storage.workspace_registry import WorkspaceRegistry  # noqa: E402
from utils.files import collect_eligible_files  # noqa: E402
from utils.helpers import normalize_filter_list  # noqa: E402


def _split(raw: str) -> List[str]:
    return [item for item in (part.strip() for part in raw.split(",")) if item]


async def _inspect(workspaces: List[str], extensions: List[str], config_files: List[str]) -> int:
    filter_list = normalize_filter_list(extensions, config_files)
    if filter_list.is_empty():
        logger.warning("Empty filter list: no file is eligible.")
        return 1

    registry = WorkspaceRegistry(os.path.abspath(path) for path in workspaces)
    cache = HashBundleCache()

    for path in registry:
        files = list(collect_eligible_files(path, filter_list))
        await cache.rebuild(registry.paths, files, path=path)
        print(f"{path}: {len(files)} eligible files")
        for file in files:
            print(f"  {file}")

    empty = [path for path in registry if cache.is_empty(path)]
    if empty:
        logger.warning(f"No eligible files in: {', '.join(empty)}")
    return 0


def main() -> None:
    configure_logging()

    parser = argparse.ArgumentParser(description="Workspace bundle inspector")
    parser.add_argument(
        "--workspace",
        action="append",
        required=True,
        help="Workspace root to inspect (repeatable).",
    )
    parser.add_argument(
        "--extensions",
        type=str,
        default="",
        help="Comma separated list of eligible extensions, e.g. '.js,.ts'.",
    )
    parser.add_argument(
        "--config-files",
        type=str,
        default="",
        help="Comma separated list of eligible config file names.",
    )
    args = parser.parse_args()

    raise SystemExit(asyncio.run(_inspect(args.workspace, _split(args.extensions), _split(args.config_files))))


if __name__ == "__main__":
    main()
