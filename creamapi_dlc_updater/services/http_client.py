"""HTTP client service with timeout handling and JSON decoding."""

import asyncio
import json
from typing import Any

import httpx
import structlog

from .errors import DataError, FetchError

log = structlog.stdlib.get_logger()


class HttpClientService:
    """HTTP client service for plain, unauthenticated GET requests.

    Every request is attempted exactly once. Transport failures, timeouts and
    HTTP error statuses surface as FetchError; bodies that are not valid JSON
    surface as DataError.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Deadline in seconds for a whole request, body included
            verify_ssl: Whether to verify SSL certificates
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "CreamAPI-DLC-Updater/1.0",
                "Accept": "application/json",
            },
            follow_redirects=True,
            verify=verify_ssl,
            transport=transport,
        )

        log.debug("HTTP client service initialized", timeout=timeout, verify_ssl=verify_ssl)

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a single GET request.

        Args:
            url: The URL to request
            params: Optional query parameters

        Returns:
            HTTP response object

        Raises:
            FetchError: If the request fails, times out or returns an error status
        """
        log.debug("Making HTTP GET request", url=url, params=params)

        try:
            # httpx limits each phase separately; wait_for caps the whole request
            response = await asyncio.wait_for(self._client.get(url, params=params), timeout=self.timeout)
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise FetchError(
                f"Request timed out after {self.timeout:g}s",
                original_error=e,
                url=url,
            ) from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Steam answered with HTTP {e.response.status_code}",
                original_error=e,
                url=str(e.request.url),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(
                "Request failed",
                original_error=e,
                url=url,
            ) from e

        log.debug(
            "HTTP GET request successful",
            url=str(response.url),
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Make a GET request and decode the body as JSON.

        Raises:
            FetchError: If the request itself fails
            DataError: If the body is not valid JSON
        """
        response = await self.get(url, params=params)
        log.info("Received JSON response", url=str(response.url), size=len(response.content))
        try:
            return json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataError(
                "Response body is not valid JSON",
                url=str(response.url),
                original_error=e,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
