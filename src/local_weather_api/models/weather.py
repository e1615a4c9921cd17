"""Weather data models: provider payloads and the display-ready snapshot."""

from pydantic import BaseModel, ConfigDict, Field


class WeatherCondition(BaseModel):
    """One weather condition entry as reported by the provider.

    Example:
        >>> WeatherCondition(id=800, main="Clear", description="clear sky", icon="01d").description
        'clear sky'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    main: str | None = None
    description: str = ""
    icon: str | None = None


# Provider payloads


class OpenWeatherMain(BaseModel):
    """The ``main`` block shared by current and forecast payloads."""

    model_config = ConfigDict(extra="ignore")

    temp: float
    feels_like: float | None = None
    temp_min: float | None = None
    temp_max: float | None = None
    pressure: float | None = None
    humidity: float | None = None


class OpenWeatherWind(BaseModel):
    model_config = ConfigDict(extra="ignore")

    speed: float | None = None
    deg: float | None = None


class OpenWeatherCurrentResponse(BaseModel):
    """Response of ``GET /weather``.

    Example:
        >>> r = OpenWeatherCurrentResponse(
        ...     dt=1768125600,
        ...     main={"temp": 1.2, "feels_like": -2.0, "pressure": 1012, "humidity": 80},
        ...     weather=[{"description": "light snow"}],
        ...     wind={"speed": 3.6},
        ...     visibility=10000,
        ... )
        >>> r.main.temp
        1.2
    """

    model_config = ConfigDict(extra="ignore")

    dt: int
    main: OpenWeatherMain
    weather: list[WeatherCondition] = Field(default_factory=list)
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    visibility: float | None = None
    name: str | None = None


class ForecastPoint(BaseModel):
    """One 3-hour step of the forecast timeline."""

    model_config = ConfigDict(extra="ignore")

    dt: int
    main: OpenWeatherMain
    weather: list[WeatherCondition] = Field(default_factory=list)


class OpenWeatherForecastResponse(BaseModel):
    """Response of ``GET /forecast``: a flat, ordered list of 3-hour points."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    points: list[ForecastPoint] = Field(default_factory=list, alias="list")


# Display-ready snapshot


class CurrentConditions(BaseModel):
    """Current conditions as consumed by the presentation layer.

    Example:
        >>> c = CurrentConditions(temperature=1.2, description="light snow", timestamp=1768125600)
        >>> c.temperature
        1.2
    """

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Temperature in Celsius")
    feels_like: float | None = Field(default=None, description="Feels-like temperature in Celsius")
    humidity: float | None = Field(default=None, description="Relative humidity in percent")
    pressure: float | None = Field(default=None, description="Pressure in hPa")
    visibility: float | None = Field(default=None, description="Visibility in metres")
    wind_speed: float | None = Field(default=None, description="Wind speed in m/s")
    description: str = Field(default="", description="Primary condition description")
    conditions: list[WeatherCondition] = Field(default_factory=list)
    timestamp: int = Field(..., description="Observation time, epoch seconds")


class HourlyPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int
    temperature: float
    conditions: list[WeatherCondition] = Field(default_factory=list)


class DailyPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int
    temp_max: float | None = None
    temp_min: float | None = None
    conditions: list[WeatherCondition] = Field(default_factory=list)


class WeatherSnapshot(BaseModel):
    """Current conditions plus the hourly and daily projections of the forecast."""

    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    hourly: list[HourlyPoint] = Field(default_factory=list, max_length=12)
    daily: list[DailyPoint] = Field(default_factory=list, max_length=8)
