"""Remote analysis service client contract.

The wire protocol, authentication and file transport live in the concrete
client supplied by the host.  This module fixes the surface the bundle
pipeline consumes and provides a base class with a local implementation of
the upload-eligibility pass.
"""

from __future__ import annotations

import abc
from typing import (
    Any,
    AsyncIterable,
    Iterable,
    List,
    Mapping,
    Protocol,
    Union,
    runtime_checkable,
)

from clients.events import BundleEventEmitter
from models.bundle import FilterList
from utils.files import collect_eligible_files

FilterResponse = Union[FilterList, Mapping[str, Any]]
FileListing = Union[Iterable[str], AsyncIterable[str]]


@runtime_checkable
class ServiceClient(Protocol):
    """What the bundle pipeline needs from the remote analysis service."""

    async def get_filters(self, token: str) -> FilterResponse:
        """Return ``{"extensions": [...], "configFiles": [...]}`` or a FilterList."""
        ...

    def start_upload(self, path: str, filter_list: FilterList) -> FileListing:
        """Lazily list eligible files under ``path`` as ``/relative`` entries."""
        ...

    async def analyse(self, files: List[str], token: str, events: BundleEventEmitter) -> Any:
        """
        Build, upload and analyse the bundle for ``files`` (absolute paths).

        Stage events are emitted on ``events`` while the call is in flight and
        end with exactly one AnalyseFinish or PipelineFailed. Raising instead
        is treated as a rejected request.
        """
        ...


class BaseServiceClient(abc.ABC):
    """Convenience base for concrete clients: local file listing, abstract remote calls."""

    @abc.abstractmethod
    async def get_filters(self, token: str) -> FilterResponse:
        ...

    def start_upload(self, path: str, filter_list: FilterList) -> FileListing:
        return collect_eligible_files(path, filter_list)

    @abc.abstractmethod
    async def analyse(self, files: List[str], token: str, events: BundleEventEmitter) -> Any:
        ...
