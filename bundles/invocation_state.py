"""State carried through one pipeline invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models.bundle import AnalysisResultCollection

SUCCESS = "success"
FAILED = "failed"


@dataclass
class InvocationContext:
    """Owned by exactly one ``BundlePipeline.run`` call; never shared between runs."""

    workspace_path: str

    # Set by the upload-eligibility pass
    files: List[str] = field(default_factory=list)            # bundle-relative, "/sub/a.js"
    absolute_files: List[str] = field(default_factory=list)

    # Set when a terminal stage is reached
    outcome: Optional[str] = None                             # SUCCESS | FAILED
    result: Optional[AnalysisResultCollection] = None

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    @property
    def succeeded(self) -> bool:
        return self.outcome == SUCCESS
