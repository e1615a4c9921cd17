"""Device position providers.

A provider's ``locate()`` is a single suspending call that either returns
``Coordinates`` or raises a ``GeolocationError``. The bounded wait is applied
by the caller (see ``LocationResolver``), so providers only need to be async.
"""

from typing import Protocol

from loguru import logger

from ..core.config import Settings, settings
from ..models.location import Coordinates
from .upstream import UpstreamClient, UpstreamClientError, UpstreamError, UpstreamTimeoutError


class GeolocationError(Exception):
    """Base exception for device position failures."""

    pass


class GeolocationUnsupported(GeolocationError):
    """Raised when no position capability is available."""

    pass


class GeolocationDenied(GeolocationError):
    """Raised when the position source refuses or fails to answer."""

    pass


class GeolocationTimeout(GeolocationError):
    """Raised when no position fix arrives within the bounded wait."""

    pass


class GeolocationProvider(Protocol):
    async def locate(self) -> Coordinates: ...


class UnavailableGeolocation:
    """Provider for a device without any position capability."""

    async def locate(self) -> Coordinates:
        raise GeolocationUnsupported("No geolocation provider configured")


class StaticGeolocation:
    """Provider that reports a fixed, configured position."""

    def __init__(self, latitude: float | None, longitude: float | None):
        self._latitude = latitude
        self._longitude = longitude

    async def locate(self) -> Coordinates:
        if self._latitude is None or self._longitude is None:
            raise GeolocationUnsupported("DEVICE_LATITUDE and DEVICE_LONGITUDE are not set")
        return Coordinates(latitude=self._latitude, longitude=self._longitude)


class IpGeolocation:
    """Provider that asks an ipinfo.io-compatible service where this host is.

    The lookup always bypasses HTTP caches so that a stale fix is never used.
    """

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self._url = url or settings.IPINFO_URL
        self._timeout = timeout if timeout is not None else settings.GEOLOCATION_TIMEOUT

    async def locate(self) -> Coordinates:
        try:
            async with UpstreamClient(
                self._url,
                provider="ipinfo",
                timeout=self._timeout,
                headers={"Cache-Control": "no-cache"},
            ) as client:
                data = await client.get_json()
        except UpstreamTimeoutError as e:
            raise GeolocationTimeout("IP geolocation timed out") from e
        except UpstreamClientError as e:
            raise GeolocationDenied(f"IP geolocation refused: {e}") from e
        except UpstreamError as e:
            raise GeolocationDenied(f"IP geolocation failed: {e}") from e

        return self._parse(data)

    @staticmethod
    def _parse(data: object) -> Coordinates:
        """Read the ``"lat,lng"`` string from an ipinfo payload.

        Example:
            >>> IpGeolocation._parse({"loc": "52.5200,13.4050"})
            Coordinates(latitude=52.52, longitude=13.405)
        """
        loc = str(data.get("loc") or "") if isinstance(data, dict) else ""
        try:
            lat_str, lng_str = loc.split(",")
            return Coordinates(latitude=float(lat_str), longitude=float(lng_str))
        except ValueError as e:
            logger.warning("IP geolocation returned no usable position", loc=loc)
            raise GeolocationDenied("IP geolocation returned no usable position") from e


def create_geolocation_provider(config: Settings = settings) -> GeolocationProvider:
    """Build the provider selected by ``GEOLOCATION_PROVIDER``."""
    if config.GEOLOCATION_PROVIDER == "ip":
        return IpGeolocation(url=config.IPINFO_URL, timeout=config.GEOLOCATION_TIMEOUT)
    if config.GEOLOCATION_PROVIDER == "static":
        return StaticGeolocation(config.DEVICE_LATITUDE, config.DEVICE_LONGITUDE)
    return UnavailableGeolocation()
