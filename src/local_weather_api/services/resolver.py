"""Location resolution: device position first, manual search as the fallback."""

import asyncio

from loguru import logger

from ..core.config import settings
from ..core.state import (
    RESOLVE,
    LocationAcquired,
    LocationFailed,
    ResolveFinished,
    ResolveStarted,
    SessionStore,
)
from .geocoding import GeocodingService
from .geolocation import GeolocationError, GeolocationProvider, GeolocationUnsupported
from .weather import WeatherService

GEOLOCATION_UNSUPPORTED = (
    "Geolocation is not supported on this device. Please search for a location manually."
)
GEOLOCATION_FAILED = "Could not get your location. Please search for a location manually."


class LocationResolver:
    """Runs one resolution cycle per ``resolve()`` call.

    Safe to call repeatedly: every call starts a new cycle, clears the previous
    error and makes any earlier cycle's late results stale.

    Example:
        >>> async def example(store, provider, weather, geocoding):
        ...     await LocationResolver(store, provider, weather, geocoding).resolve()
        ...     return store.state.coordinates
    """

    def __init__(
        self,
        store: SessionStore,
        provider: GeolocationProvider,
        weather: WeatherService,
        geocoding: GeocodingService,
        timeout: float | None = None,
    ):
        self._store = store
        self._provider = provider
        self._weather = weather
        self._geocoding = geocoding
        self._timeout = timeout if timeout is not None else settings.GEOLOCATION_TIMEOUT

    async def resolve(self) -> None:
        """Locate the device, then load weather and the address label together."""
        token = self._store.next_token(RESOLVE)
        self._store.dispatch(ResolveStarted(token=token))

        try:
            coordinates = await asyncio.wait_for(self._provider.locate(), timeout=self._timeout)

        except asyncio.TimeoutError:
            logger.warning("Timed out waiting for device position", timeout=self._timeout)
            self._store.dispatch(LocationFailed(token=token, message=GEOLOCATION_FAILED))
            return

        except GeolocationUnsupported as e:
            logger.warning("Geolocation unsupported", reason=str(e))
            self._store.dispatch(LocationFailed(token=token, message=GEOLOCATION_UNSUPPORTED))
            return

        except GeolocationError as e:
            logger.warning("Could not get device position", reason=str(e))
            self._store.dispatch(LocationFailed(token=token, message=GEOLOCATION_FAILED))
            return

        except Exception:
            logger.exception("Unexpected error while locating device")
            self._store.dispatch(LocationFailed(token=token, message=GEOLOCATION_FAILED))
            return

        if not self._store.state.is_current(RESOLVE, token):
            logger.info("Discarding device position from a superseded resolution")
            return

        logger.info(
            "Device position acquired",
            latitude=coordinates.latitude,
            longitude=coordinates.longitude,
        )
        self._store.dispatch(LocationAcquired(token=token, coordinates=coordinates))

        await asyncio.gather(
            self._weather.fetch_weather(coordinates.latitude, coordinates.longitude),
            self._geocoding.reverse_geocode(coordinates.latitude, coordinates.longitude),
        )

        self._store.dispatch(ResolveFinished(token=token))
