"""Async Python client for a venue site's public events API."""

from .const import __version__
from ._client import VenueEventsClient
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    InvalidResponseError,
    RateLimitError,
    VenueApiError,
)
from .models import Event, Setting

__all__ = [
    "__version__",
    "VenueEventsClient",
    "ApiConnectionError",
    "ApiResponseError",
    "InvalidResponseError",
    "RateLimitError",
    "VenueApiError",
    "Event",
    "Setting",
]
