"""Venue site API client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from ._serialization import decamelize
from .const import (
    DEFAULT_TIMEOUT_SECONDS,
    EVENTS_PATH,
    SETTING_TIMEZONE,
    SETTINGS_PATH,
)
from .exceptions import (
    ApiConnectionError,
    ApiResponseError,
    InvalidResponseError,
    RateLimitError,
)
from .models import Event, Setting

_LOGGER = logging.getLogger(__name__)


class VenueEventsClient:
    """Async read-only client for a venue site's public events API.

    Usage::

        async with aiohttp.ClientSession() as session:
            client = VenueEventsClient("https://venue.example", session)
            events = await client.async_get_events()

    If no session is provided, the client creates and manages its own.
    The caller is responsible for calling ``async_close()`` when done
    (or use the client as an async context manager).
    """

    def __init__(
        self,
        base_url: str,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_session = session is None
        self._session = session or aiohttp.ClientSession()
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def __aenter__(self) -> VenueEventsClient:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.async_close()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def async_close(self) -> None:
        """Close the HTTP session if the client owns it."""
        if self._owns_session:
            await self._session.close()

    # ------------------------------------------------------------------ #
    #  Events
    # ------------------------------------------------------------------ #

    async def async_get_events(self, *, active_only: bool = True) -> list[Event]:
        """Fetch the venue's events.

        Rows that cannot be decoded are logged and skipped so one bad row
        does not hide the rest of the listing.

        Raises:
            ApiConnectionError: If the site is unreachable.
            ApiResponseError: On non-2xx responses.
            InvalidResponseError: If the body is not an event list.
        """
        params = {"active": "true"} if active_only else None
        data = await self._request("GET", EVENTS_PATH, params=params)
        raw = data.get("events") if isinstance(data, dict) else data
        if not isinstance(raw, list):
            raise InvalidResponseError("Events response is not a list")

        events: list[Event] = []
        for row in raw:
            try:
                events.append(Event.from_api_response(row))
            except (KeyError, ValueError, TypeError):
                _LOGGER.warning("Skipping undecodable event row %r", row, exc_info=True)
        return events

    # ------------------------------------------------------------------ #
    #  Settings
    # ------------------------------------------------------------------ #

    async def async_get_setting(self, key: str) -> Setting | None:
        """Fetch a single site setting, or None if it is not set."""
        data = await self._request("GET", SETTINGS_PATH, params={"key": key})
        if not data:
            return None
        if not isinstance(data, dict):
            raise InvalidResponseError(f"Setting {key} response is not an object")
        return Setting.from_api_response(data)

    async def async_get_timezone(self) -> str | None:
        """Return the site's configured company timezone name, if any."""
        setting = await self.async_get_setting(SETTING_TIMEZONE)
        return setting.value if setting else None

    # ------------------------------------------------------------------ #
    #  Internal HTTP layer
    # ------------------------------------------------------------------ #

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Execute an API request and return the decamelized JSON body.

        Raises:
            RateLimitError: On 429 responses.
            ApiResponseError: On other non-2xx responses.
            InvalidResponseError: If the body is not JSON.
            ApiConnectionError: On network errors and timeouts.
        """
        url = f"{self._base_url}{path}"
        kwargs: dict[str, Any] = {"timeout": self._timeout}
        if params:
            kwargs["params"] = params

        try:
            async with self._session.request(method, url, **kwargs) as resp:
                if resp.status == 429:
                    retry_after = resp.headers.get("Retry-After")
                    raise RateLimitError(
                        retry_after=float(retry_after) if retry_after else None,
                    )

                if resp.status == 204:
                    return None

                if resp.status >= 400:
                    body = await resp.text()
                    raise ApiResponseError(
                        f"API error: HTTP {resp.status} - {body}",
                        status_code=resp.status,
                    )

                try:
                    data = await resp.json(content_type=None)
                except ValueError as err:
                    raise InvalidResponseError(f"Invalid JSON from {url}") from err
                return decamelize(data)

        except asyncio.TimeoutError as err:
            raise ApiConnectionError(f"Timeout talking to {url}") from err
        except aiohttp.ClientError as err:
            raise ApiConnectionError(f"Connection error: {err}") from err
