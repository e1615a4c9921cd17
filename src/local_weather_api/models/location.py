"""Location data models: coordinates and geocoding suggestions."""

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Coordinates of the active location.

    Frozen: a resolution cycle replaces the whole value instead of mutating it.

    Example:
        >>> coords = Coordinates(latitude=52.52, longitude=13.41)
        >>> coords.latitude
        52.52
        >>> coords.longitude
        13.41
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ...,
        description="Latitude in decimal degrees",
        ge=-90.0,
        le=90.0,
    )
    longitude: float = Field(
        ...,
        description="Longitude in decimal degrees",
        ge=-180.0,
        le=180.0,
    )


class LocationSuggestion(BaseModel):
    """Candidate location returned by forward or reverse geocoding.

    Every descriptive field may be missing. The provider sends coordinates as
    numbers, but they are accepted as strings too and only parsed when the
    suggestion is committed.

    Example:
        >>> s = LocationSuggestion(name="Berlin", country="Germany", latitude="52.52", longitude=13.41)
        >>> s.to_coordinates()
        Coordinates(latitude=52.52, longitude=13.41)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    region: str | None = None
    country: str | None = None
    label: str | None = Field(default=None, description="Provider's full display label")
    latitude: str | float
    longitude: str | float

    def to_coordinates(self) -> Coordinates:
        """Parse the suggestion's coordinates as floating point.

        Raises:
            ValueError: If either coordinate is not numeric or out of range
        """
        return Coordinates(latitude=float(self.latitude), longitude=float(self.longitude))
