"""Projection of the 3-hour forecast timeline into hourly and daily views."""

from collections.abc import Sequence

from ..models.weather import (
    CurrentConditions,
    DailyPoint,
    ForecastPoint,
    HourlyPoint,
    OpenWeatherCurrentResponse,
    WeatherSnapshot,
)

HOURLY_POINTS = 12  # 12 x 3h = the next 36 hours
DAILY_STRIDE = 8  # 8 x 3h = 24h between daily points
DAILY_POINTS = 8


def project_hourly(timeline: Sequence[ForecastPoint]) -> list[HourlyPoint]:
    """Take the first 12 points of the timeline in their original order.

    Example:
        >>> project_hourly([])
        []
    """
    return [
        HourlyPoint(timestamp=point.dt, temperature=point.main.temp, conditions=point.weather)
        for point in timeline[:HOURLY_POINTS]
    ]


def project_daily(timeline: Sequence[ForecastPoint]) -> list[DailyPoint]:
    """Take every 8th point starting at index 0, capped at 8 points.

    Short timelines yield fewer points: ``len(result) == min(8, ceil(N / 8))``.
    """
    return [
        DailyPoint(
            timestamp=point.dt,
            temp_max=point.main.temp_max,
            temp_min=point.main.temp_min,
            conditions=point.weather,
        )
        for point in timeline[::DAILY_STRIDE][:DAILY_POINTS]
    ]


def current_conditions(data: OpenWeatherCurrentResponse) -> CurrentConditions:
    """Flatten the provider's current-weather payload."""
    return CurrentConditions(
        temperature=data.main.temp,
        feels_like=data.main.feels_like,
        humidity=data.main.humidity,
        pressure=data.main.pressure,
        visibility=data.visibility,
        wind_speed=data.wind.speed,
        description=data.weather[0].description if data.weather else "",
        conditions=data.weather,
        timestamp=data.dt,
    )


def build_snapshot(
    current: OpenWeatherCurrentResponse,
    timeline: Sequence[ForecastPoint],
) -> WeatherSnapshot:
    """Combine current conditions and the forecast timeline into one snapshot."""
    return WeatherSnapshot(
        current=current_conditions(current),
        hourly=project_hourly(timeline),
        daily=project_daily(timeline),
    )
