"""Application configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Provider API keys are required. Everything else has a sensible default but can
    be overridden via environment variables. Configuration is validated at startup
    and the application will fail fast if invalid, instead of issuing malformed
    requests later.

    Example:
        >>> settings = Settings(WEATHER_API_KEY="w", POSITION_API_KEY="p")
        >>> settings.GEOLOCATION_TIMEOUT
        5.0
        >>> settings.WEATHER_BASE_URL
        'https://api.openweathermap.org/data/2.5'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Provider credentials
    WEATHER_API_KEY: str = Field(
        ...,
        description="API key for the weather provider (OpenWeatherMap)",
        min_length=1,
    )
    POSITION_API_KEY: str = Field(
        ...,
        description="Access key for the geocoding provider (positionstack)",
        min_length=1,
    )

    # Upstream API Configuration
    WEATHER_BASE_URL: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        description="Base URL for the weather provider",
    )
    POSITION_BASE_URL: str = Field(
        default="https://api.positionstack.com/v1",
        description="Base URL for the geocoding provider",
    )
    IPINFO_URL: str = Field(
        default="https://ipinfo.io/json",
        description="Endpoint used by the IP geolocation provider",
    )
    UPSTREAM_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout for weather and geocoding requests in seconds",
        ge=0.1,
        le=60.0,
    )

    # Device geolocation
    GEOLOCATION_PROVIDER: Literal["ip", "static", "none"] = Field(
        default="ip",
        description="Source of the device position (ip, static or none)",
    )
    GEOLOCATION_TIMEOUT: float = Field(
        default=5.0,
        description="Bounded wait for a device position fix in seconds",
        ge=0.1,
        le=60.0,
    )
    DEVICE_LATITUDE: float | None = Field(
        default=None,
        description="Fixed latitude used by the static geolocation provider",
        ge=-90.0,
        le=90.0,
    )
    DEVICE_LONGITUDE: float | None = Field(
        default=None,
        description="Fixed longitude used by the static geolocation provider",
        ge=-180.0,
        le=180.0,
    )

    # Server Configuration
    PORT: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Environment Configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that LOG_LEVEL is a valid logging level.

        Args:
            v: The log level string to validate

        Returns:
            The uppercase log level string

        Raises:
            ValueError: If the log level is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got {v}")
        return v_upper

    @field_validator("WEATHER_BASE_URL", "POSITION_BASE_URL", "IPINFO_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that an upstream URL is properly formatted.

        Args:
            v: The URL string to validate

        Returns:
            The URL string without trailing slash

        Raises:
            ValueError: If the URL is invalid

        Example:
            >>> Settings(
            ...     WEATHER_API_KEY="w",
            ...     POSITION_API_KEY="p",
            ...     WEATHER_BASE_URL="https://api.example.com/",
            ... ).WEATHER_BASE_URL
            'https://api.example.com'
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("Upstream URLs must start with http:// or https://")
        # Remove trailing slash for consistency
        return v.rstrip("/")

    @field_validator("WEATHER_API_KEY", "POSITION_API_KEY")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject keys that are blank after trimming whitespace."""
        if not v.strip():
            raise ValueError("API keys must not be blank")
        return v.strip()


# Global settings instance
settings = Settings()
