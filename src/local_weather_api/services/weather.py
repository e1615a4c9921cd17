"""Weather retrieval for the session."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from ..core.state import WEATHER, SessionStore, WeatherFailed, WeatherLoaded, WeatherRequested
from .forecast import build_snapshot
from .openweather import OpenWeatherClient
from .upstream import UpstreamError

WEATHER_FETCH_FAILED = "Failed to fetch weather data. Please try again later."


async def join(*aws: Awaitable[Any]) -> list[Any]:
    """Await all operations concurrently; once all settled, raise the first failure.

    Unlike a plain ``gather``, no request is left running when another fails.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class WeatherService:
    """Fetches current conditions and the forecast into the session state.

    Failures are absorbed: the previous snapshot stays readable and the session
    ``error`` is set. ``loading`` belongs to the caller and is never touched here.

    Example:
        >>> async def example(store):
        ...     await WeatherService(store).fetch_weather(52.52, 13.41)
        ...     return store.state.weather
    """

    def __init__(
        self,
        store: SessionStore,
        client_factory: Callable[[], OpenWeatherClient] = OpenWeatherClient,
    ):
        self._store = store
        self._client_factory = client_factory

    async def fetch_weather(self, latitude: float, longitude: float) -> None:
        """Fetch both weather resources for the coordinates and store a snapshot.

        Args:
            latitude: Latitude in decimal degrees
            longitude: Longitude in decimal degrees
        """
        token = self._store.next_token(WEATHER)
        self._store.dispatch(WeatherRequested(token=token))
        logger.info("Fetching weather", latitude=latitude, longitude=longitude)

        try:
            async with self._client_factory() as client:
                current, timeline = await join(
                    client.get_current_weather(latitude, longitude),
                    client.get_forecast(latitude, longitude),
                )
            snapshot = build_snapshot(current, timeline)

        except UpstreamError as e:
            logger.warning("Weather fetch failed", error=str(e))
            self._store.dispatch(WeatherFailed(token=token, message=WEATHER_FETCH_FAILED))
            return

        except Exception:
            logger.exception("Unexpected error while fetching weather")
            self._store.dispatch(WeatherFailed(token=token, message=WEATHER_FETCH_FAILED))
            return

        logger.info(
            "Weather loaded",
            hourly=len(snapshot.hourly),
            daily=len(snapshot.daily),
        )
        self._store.dispatch(WeatherLoaded(token=token, snapshot=snapshot))
