"""OpenWeatherMap API client for current conditions and the 3-hour forecast."""

from pydantic import ValidationError

from ..core.config import settings
from ..models.weather import (
    ForecastPoint,
    OpenWeatherCurrentResponse,
    OpenWeatherForecastResponse,
)
from .upstream import UpstreamClient, UpstreamPayloadError


class OpenWeatherClient(UpstreamClient):
    """Client for fetching weather data from the OpenWeatherMap API.

    All requests use metric units.

    Example:
        >>> async def example():
        ...     async with OpenWeatherClient() as client:
        ...         current = await client.get_current_weather(52.52, 13.41)
        ...         return current.main.temp
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the client with configuration from settings unless overridden."""
        super().__init__(
            base_url or settings.WEATHER_BASE_URL,
            provider="openweathermap",
            timeout=timeout,
        )
        self._api_key = api_key or settings.WEATHER_API_KEY

    def _params(self, latitude: float, longitude: float) -> dict[str, float | str]:
        return {
            "lat": latitude,
            "lon": longitude,
            "appid": self._api_key,
            "units": "metric",
        }

    async def get_current_weather(
        self,
        latitude: float,
        longitude: float,
    ) -> OpenWeatherCurrentResponse:
        """Fetch current conditions (``GET /weather``).

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees

        Returns:
            Parsed current-weather payload

        Raises:
            UpstreamError: On any transport, status or payload failure
        """
        data = await self.get_json("/weather", params=self._params(latitude, longitude))
        try:
            return OpenWeatherCurrentResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamPayloadError("Unexpected current weather payload") from e

    async def get_forecast(
        self,
        latitude: float,
        longitude: float,
    ) -> list[ForecastPoint]:
        """Fetch the forecast timeline (``GET /forecast``).

        Returns:
            Ordered 3-hour forecast points

        Raises:
            UpstreamError: On any transport, status or payload failure
        """
        data = await self.get_json("/forecast", params=self._params(latitude, longitude))
        try:
            return OpenWeatherForecastResponse.model_validate(data).points
        except ValidationError as e:
            raise UpstreamPayloadError("Unexpected forecast payload") from e
