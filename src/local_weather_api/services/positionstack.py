"""positionstack API client for forward and reverse geocoding."""

from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..core.config import settings
from ..models.location import LocationSuggestion
from .upstream import UpstreamClient, UpstreamClientError, UpstreamPayloadError

_suggestions = TypeAdapter(list[LocationSuggestion])


class PositionstackClient(UpstreamClient):
    """Client for the positionstack geocoding API.

    Example:
        >>> async def example():
        ...     async with PositionstackClient() as client:
        ...         return await client.forward("Berlin")
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        super().__init__(
            base_url or settings.POSITION_BASE_URL,
            provider="positionstack",
            timeout=timeout,
        )
        self._api_key = api_key or settings.POSITION_API_KEY

    async def forward(self, query: str) -> list[LocationSuggestion]:
        """Search free text (``GET /forward``). Returns candidates, possibly none."""
        data = await self.get_json(
            "/forward",
            params={"access_key": self._api_key, "query": query},
        )
        return self._parse(data)

    async def reverse(self, latitude: float, longitude: float) -> list[LocationSuggestion]:
        """Look up locations near coordinates (``GET /reverse``), nearest first."""
        data = await self.get_json(
            "/reverse",
            params={"access_key": self._api_key, "query": f"{latitude},{longitude}"},
        )
        return self._parse(data)

    def _parse(self, data: Any) -> list[LocationSuggestion]:
        if not isinstance(data, dict):
            raise UpstreamPayloadError("Unexpected geocoding payload")

        # positionstack reports quota and key problems in the body
        if data.get("error"):
            error = data["error"]
            code = error.get("code") if isinstance(error, dict) else error
            logger.warning("positionstack returned an error payload", code=code)
            raise UpstreamClientError(f"positionstack error: {code}")

        # An empty result set comes back as [[]] on some plans
        items = [item for item in data.get("data") or [] if isinstance(item, dict)]
        try:
            return _suggestions.validate_python(items)
        except ValidationError as e:
            raise UpstreamPayloadError("Unexpected geocoding payload") from e
