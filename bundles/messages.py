"""Fixed messages attached to funnelled errors."""

FILTERS_FETCH_FAILED = "Failed to fetch the list of supported files from the server"
ANALYSIS_FAILED = "analyse process failed"
ANALYSIS_REQUEST_REJECTED = "Analysis request was rejected"
ANALYSIS_ENDED_WITHOUT_RESULT = "Analysis request finished without a result"
UPLOAD_PREPARATION_FAILED = "Failed to collect the files eligible for upload"
ANALYSIS_INTERRUPTED = "Analysis was interrupted before it could finish"
