# leaguetracker/api/league_api.py

# SECTION: MODULE DOCSTRING
"""Rate-limited async HTTP access to the league data sources."""

# SECTION: IMPORTS
from __future__ import annotations

import asyncio
import json
import time
from typing import Any

import httpx

from leaguetracker.api.exception import FormatError, NetworkError
from leaguetracker.config import LeagueConfig
from leaguetracker.helpers._logger import log

# SECTION: CONSTANTS
RESPONSE_PREVIEW_CHARS = 200


# SECTION: API CLIENT CLASS


# KLASS: LeagueAPI
class LeagueAPI:
    """Asynchronous fetcher shared by every league endpoint.

    All requests made through one instance share a single "last request" clock,
    so no two requests start closer together than ``min_request_interval``,
    no matter how many coroutines are fetching at once.
    """

    # FUNC: __init__
    def __init__(
        self,
        config: LeagueConfig | None = None,
        min_request_interval: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            config: Settings object; loaded from the environment when omitted.
            min_request_interval: Override for ``config.min_request_interval``.
            transport: Optional httpx transport (used by tests to fake responses).
        """
        self.config = config or LeagueConfig()
        self.headers = {"User-Agent": self.config.user_agent}

        # Rate limiting tracking
        self._request_interval: float = (
            self.config.min_request_interval if min_request_interval is None else min_request_interval
        )
        self._last_request_time: float | None = None
        self._rate_lock = asyncio.Lock()

        self._transport = transport
        self._async_client: httpx.AsyncClient | None = None
        log.debug(f"LeagueAPI initialized (min interval {self._request_interval:.2f}s).")

    async def __aenter__(self) -> LeagueAPI:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # FUNC: get_async_client
    def get_async_client(self) -> httpx.AsyncClient:
        """Returns the httpx.AsyncClient instance, creating it if necessary."""
        if self._async_client is None or self._async_client.is_closed:
            log.debug("Creating new httpx.AsyncClient instance.")
            self._async_client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self.config.request_timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._async_client

    # FUNC: close
    async def close(self) -> None:
        """Closes the underlying httpx client."""
        if self._async_client and not self._async_client.is_closed:
            log.debug("Closing httpx.AsyncClient.")
            await self._async_client.aclose()
            self._async_client = None

    # FUNC: _wait_for_rate_limit
    async def _wait_for_rate_limit(self) -> None:
        """Wait until the minimum spacing since the previous request has elapsed.

        The clock is read and advanced under one lock, so waiting callers leave
        one interval apart. It advances when the attempt starts, before the
        outcome is known.
        """
        async with self._rate_lock:
            if self._last_request_time is not None:
                time_since_last = time.monotonic() - self._last_request_time
                if time_since_last < self._request_interval:
                    wait_time = self._request_interval - time_since_last
                    log.debug(f"Rate limit: waiting for {wait_time:.2f} seconds.")
                    await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    # FUNC: _request
    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Make a rate-limited request and return the successful response.

        Raises:
            NetworkError: On transport failures, timeouts and non-2xx statuses.
        """
        await self._wait_for_rate_limit()

        client = self.get_async_client()
        log.debug(f"Request: {method} {url} {kwargs.get('params') or ''}")

        try:
            response = await client.request(method, url, **kwargs)
            log.debug(f"Response: {response.status_code} {response.reason_phrase}")
            response.raise_for_status()
            return response

        except httpx.TimeoutException as err:
            log.error(f"Request timed out for {method} {url}")
            raise NetworkError(f"Request timed out for {method} {url}", status_code=408, url=url) from err

        except httpx.HTTPStatusError as err:
            status_code = err.response.status_code
            preview = err.response.text[:RESPONSE_PREVIEW_CHARS]
            log.warning(f"HTTP Error {status_code} for {method} {url}")
            raise NetworkError(
                f"HTTP {status_code} Error for {method} {url}",
                status_code=status_code,
                url=url,
                response_data=preview,
            ) from err

        except httpx.RequestError as err:
            log.error(f"Network error for {method} {url}: {err}")
            raise NetworkError(f"Network error for {method} {url}: {err}", url=url) from err

    # --- Decoding Helpers ---

    # FUNC: fetch_text
    async def fetch_text(self, url: str, params: dict[str, Any] | None = None) -> str:
        """GET ``url`` and return its body as text.

        Raises:
            NetworkError: See ``_request``.
            FormatError: If the body cannot be decoded with the declared charset.
        """
        response = await self._request("GET", url, params=params)
        encoding = response.encoding or "utf-8"
        try:
            return response.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as err:
            log.error(f"Could not decode response from {url} as {encoding}")
            raise FormatError(
                f"Response could not be decoded as {encoding} text",
                status_code=response.status_code,
                url=url,
            ) from err

    # FUNC: fetch_json
    async def fetch_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and decode its body as JSON.

        Raises:
            NetworkError: See ``_request``.
            FormatError: If the body is not valid JSON.
        """
        text = await self.fetch_text(url, params=params)
        try:
            return json.loads(text)
        except json.JSONDecodeError as err:
            log.error(f"Invalid JSON received from {url}")
            raise FormatError(
                "Invalid JSON received",
                url=url,
                response_data=text[:RESPONSE_PREVIEW_CHARS],
            ) from err
