"""Exception hierarchy for the venue site API client."""

from __future__ import annotations


class VenueApiError(Exception):
    """Base exception for all venue API errors."""


class ApiConnectionError(VenueApiError):
    """The site is unreachable (network error, DNS, timeout)."""


class ApiResponseError(VenueApiError):
    """The site returned a non-success status.

    Attributes:
        status_code: HTTP status code, if available.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ApiResponseError):
    """The site returned 429 Too Many Requests.

    Attributes:
        retry_after: Seconds to wait before retrying, if provided by the server.
    """

    def __init__(
        self,
        message: str = "Rate limited",
        *,
        status_code: int = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class InvalidResponseError(VenueApiError):
    """The response body could not be decoded into the expected shape."""
