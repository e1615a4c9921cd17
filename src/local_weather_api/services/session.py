"""The single interactive session: state plus the components that mutate it."""

from ..core.state import SessionState, SessionStore
from ..models.location import LocationSuggestion
from .geocoding import GeocodingService
from .geolocation import GeolocationProvider, create_geolocation_provider
from .resolver import LocationResolver
from .search import SearchController, SearchPhase
from .weather import WeatherService


class WeatherSession:
    """Wires the store to the resolver, the search controller and both clients.

    The presentation layer only needs ``state`` and the three actions below.

    Example:
        >>> async def example():
        ...     session = WeatherSession()
        ...     await session.resolve()
        ...     return session.state.weather
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        provider: GeolocationProvider | None = None,
        weather: WeatherService | None = None,
        geocoding: GeocodingService | None = None,
    ):
        self.store = store or SessionStore()
        self.weather = weather or WeatherService(self.store)
        self.geocoding = geocoding or GeocodingService(self.store)
        self.resolver = LocationResolver(
            self.store,
            provider or create_geolocation_provider(),
            self.weather,
            self.geocoding,
        )
        self.search = SearchController(self.store, self.geocoding, self.weather)

    @property
    def state(self) -> SessionState:
        return self.store.state

    @property
    def search_phase(self) -> SearchPhase:
        return self.search.phase

    async def resolve(self) -> None:
        """Start (or retry) device-based location resolution."""
        await self.resolver.resolve()

    async def update_query(self, query: str) -> None:
        await self.search.on_query_changed(query)

    async def select(self, suggestion: LocationSuggestion) -> None:
        await self.search.select(suggestion)
