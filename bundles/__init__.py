from .errors import (
    BundleError,
    ErrorFunnel,
    ErrorReport,
    FilterFetchError,
    LoggingErrorHandler,
    PipelineStageError,
    RequestRejection,
    UploadPreparationError,
)
from .filters import FilterListCache
from .invocation_state import InvocationContext
from .normalizer import merge_analysis_results, normalize_analysis_results
from .orchestrator import BundlePipeline
from .progress import LoggingProgressHost, ProgressTracker
from .session import BundleSession

__all__ = [
    "BundleError",
    "ErrorFunnel",
    "ErrorReport",
    "FilterFetchError",
    "LoggingErrorHandler",
    "PipelineStageError",
    "RequestRejection",
    "UploadPreparationError",
    "FilterListCache",
    "InvocationContext",
    "merge_analysis_results",
    "normalize_analysis_results",
    "BundlePipeline",
    "LoggingProgressHost",
    "ProgressTracker",
    "BundleSession",
]
