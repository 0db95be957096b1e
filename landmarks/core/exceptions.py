from typing import Any, Dict, List, Optional


class LandmarkError(Exception):
    """Base class for errors that map onto an HTTP error envelope."""

    status_code: int = 500
    error: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.error
        super().__init__(self.message)


class ValidationError(LandmarkError):
    """Bad or missing client input. Never forwarded upstream."""

    status_code = 400
    error = "Invalid parameters"

    def __init__(self, details: List[Dict[str, Any]], error: Optional[str] = None):
        self.details = details
        if error:
            self.error = error
        super().__init__()

    @property
    def fields(self) -> List[str]:
        return [d["field"] for d in self.details]


class RateLimitError(LandmarkError):
    status_code = 429
    error = "Too many requests"

    def __init__(self, retry_after: int, message: Optional[str] = None):
        self.retry_after = retry_after
        super().__init__(message or "Please wait before making more requests")


class NotFoundError(LandmarkError):
    status_code = 404
    error = "Landmark not found"


class UpstreamError(LandmarkError):
    """Upstream API unavailable, erroring, or returning something unusable."""

    status_code = 500
    error = "Upstream request failed"

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class NetworkError(LandmarkError):
    """Client-side transport failure talking to the landmark API."""

    status_code = 503
    error = "Network error"
