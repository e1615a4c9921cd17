"""Shared async HTTP plumbing for the weather, geocoding and IP location providers."""

from typing import Any

import httpx
from loguru import logger

from ..core.config import settings


class UpstreamError(Exception):
    """Base exception for upstream provider errors."""

    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when an upstream request times out."""

    pass


class UpstreamServerError(UpstreamError):
    """Raised when an upstream API returns a 5xx error."""

    pass


class UpstreamClientError(UpstreamError):
    """Raised when an upstream API returns a 4xx error or an error payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamNetworkError(UpstreamError):
    """Raised when a network error occurs (connection refused, DNS failure, etc)."""

    pass


class UpstreamPayloadError(UpstreamError):
    """Raised when an upstream response body cannot be decoded."""

    pass


class UpstreamClient:
    """Base client for a JSON-over-HTTP provider.

    Owns an ``httpx.AsyncClient`` for the lifetime of an ``async with`` block and
    classifies transport and status failures into ``UpstreamError`` subclasses.
    There is no retry: a failed call fails once and the caller decides what the
    session should show.

    Example:
        >>> async def example():
        ...     async with UpstreamClient("https://example.com", provider="example") as client:
        ...         return await client.get_json("/status")
    """

    def __init__(
        self,
        base_url: str,
        provider: str,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT
        self._headers = headers or {}
        self.provider = provider

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            headers=self._headers,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()

    async def get_json(self, path: str = "", params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body.

        Args:
            path: Path appended to the base URL (``""`` for the base URL itself)
            params: Query parameters

        Returns:
            The decoded JSON document

        Raises:
            UpstreamTimeoutError: If the request times out
            UpstreamServerError: If the provider returns 5xx
            UpstreamClientError: If the provider returns 4xx
            UpstreamNetworkError: If the connection fails
            UpstreamPayloadError: If the body is not JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        url = f"{self._base_url}{path}"

        try:
            # Query parameters carry credentials, so only the path is logged
            logger.debug("Fetching from upstream", provider=self.provider, path=path or "/")

            response = await self._client.get(url, params=params)

            if response.status_code >= 500:
                logger.warning(
                    "Upstream returned 5xx error",
                    provider=self.provider,
                    status_code=response.status_code,
                )
                raise UpstreamServerError(
                    f"{self.provider} returned {response.status_code}"
                )

            if response.status_code >= 400:
                logger.warning(
                    "Upstream returned 4xx error",
                    provider=self.provider,
                    status_code=response.status_code,
                )
                raise UpstreamClientError(
                    f"{self.provider} returned {response.status_code}",
                    status_code=response.status_code,
                )

            return response.json()

        except httpx.TimeoutException as e:
            logger.warning("Upstream request timed out", provider=self.provider)
            raise UpstreamTimeoutError(f"{self.provider} request timed out") from e

        except httpx.ConnectError as e:
            logger.warning("Failed to connect to upstream", provider=self.provider, error=str(e))
            raise UpstreamNetworkError(f"Failed to connect to {self.provider}") from e

        except httpx.HTTPError as e:
            logger.error("HTTP error occurred", provider=self.provider, error=str(e))
            raise UpstreamNetworkError(f"Network error: {e}") from e

        except ValueError as e:
            logger.warning("Upstream returned a non-JSON body", provider=self.provider)
            raise UpstreamPayloadError(f"{self.provider} returned an unreadable body") from e
