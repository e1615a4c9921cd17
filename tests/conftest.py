"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment must be in place first.
# Device geolocation is disabled so that application startup never hits the network.
os.environ["WEATHER_API_KEY"] = "test-weather-key"
os.environ["POSITION_API_KEY"] = "test-position-key"
os.environ["WEATHER_BASE_URL"] = "https://api.openweathermap.org/data/2.5"
os.environ["POSITION_BASE_URL"] = "https://api.positionstack.com/v1"
os.environ["IPINFO_URL"] = "https://ipinfo.io/json"
os.environ["GEOLOCATION_PROVIDER"] = "none"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.local_weather_api.app import app  # noqa: E402
from src.local_weather_api.core.state import SessionStore  # noqa: E402
from src.local_weather_api.models.location import Coordinates  # noqa: E402
from src.local_weather_api.models.weather import ForecastPoint, OpenWeatherCurrentResponse  # noqa: E402
from src.local_weather_api.services.upstream import UpstreamServerError  # noqa: E402


def current_payload(temp: float = 1.2, dt: int = 1768125600) -> dict:
    return {
        "dt": dt,
        "name": "Berlin",
        "main": {"temp": temp, "feels_like": -2.1, "pressure": 1012, "humidity": 80},
        "weather": [{"id": 600, "main": "Snow", "description": "light snow", "icon": "13d"}],
        "wind": {"speed": 3.6, "deg": 250},
        "visibility": 10000,
    }


def forecast_payload(points: int, start: int = 1768125600) -> dict:
    """A forecast response with ``points`` 3-hour steps; temp equals the index."""
    return {
        "cnt": points,
        "list": [
            {
                "dt": start + i * 3 * 3600,
                "main": {"temp": float(i), "temp_min": i - 1.0, "temp_max": i + 1.0},
                "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
            }
            for i in range(points)
        ],
    }


class FakeWeatherClient:
    """Stand-in for OpenWeatherClient that records calls and replays canned results."""

    def __init__(self, current=None, forecast=None, error: Exception | None = None):
        self.current = current or current_payload()
        self.forecast = forecast if forecast is not None else forecast_payload(40)
        self.error = error
        self.calls: list[tuple[float, float]] = []

    def __call__(self):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def get_current_weather(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        if self.error:
            raise self.error
        return OpenWeatherCurrentResponse.model_validate(self.current)

    async def get_forecast(self, latitude, longitude):
        if self.error:
            raise self.error
        return [ForecastPoint.model_validate(p) for p in self.forecast["list"]]


class FakeGeocodingClient:
    """Stand-in for PositionstackClient."""

    def __init__(self, forward=None, reverse=None, error: Exception | None = None):
        self.forward_results = forward or []
        self.reverse_results = reverse or []
        self.error = error
        self.queries: list[str] = []
        self.reverse_calls: list[tuple[float, float]] = []

    def __call__(self):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def forward(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return list(self.forward_results)

    async def reverse(self, latitude, longitude):
        self.reverse_calls.append((latitude, longitude))
        if self.error:
            raise self.error
        return list(self.reverse_results)


class FakeGeolocation:
    """Geolocation provider returning a fixed position or raising a fixed error."""

    def __init__(self, coordinates: Coordinates | None = None, error: Exception | None = None):
        self.coordinates = coordinates
        self.error = error
        self.calls = 0

    async def locate(self) -> Coordinates:
        self.calls += 1
        if self.error:
            raise self.error
        return self.coordinates


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def weather_client():
    return FakeWeatherClient()


@pytest.fixture
def failing_weather_client():
    return FakeWeatherClient(error=UpstreamServerError("openweathermap returned 503"))


@pytest.fixture
def geocoding_client():
    return FakeGeocodingClient()


@pytest.fixture(scope="function")
def client():
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
