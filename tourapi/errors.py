"""Error taxonomy for upstream calls."""
from __future__ import annotations

from typing import Optional


class ApiError(RuntimeError):
    kind = "api"

    def __init__(self, message: str, endpoint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint

    @property
    def retryable(self) -> bool:
        return False


class ValidationError(ApiError, ValueError):
    """Bad or missing input, or a response without the expected structure."""

    kind = "validation"


class NotFoundError(ApiError):
    kind = "not_found"


class RequestTimeoutError(ApiError, TimeoutError):
    kind = "timeout"


class TransientNetworkError(ApiError):
    kind = "network"

    @property
    def retryable(self) -> bool:
        return True


class UpstreamError(ApiError):
    """Non-2xx status or an explicit error envelope from the provider."""

    kind = "upstream"

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        result_code: Optional[str] = None,
        rate_limited: bool = False,
    ) -> None:
        super().__init__(message, endpoint=endpoint)
        self.status_code = status_code
        self.result_code = result_code
        self.rate_limited = rate_limited

    @property
    def retryable(self) -> bool:
        if self.rate_limited:
            return True
        return self.status_code is not None and self.status_code >= 500
