"""Search box interaction: query keystrokes, suggestions and selection."""

from enum import Enum

from loguru import logger

from ..core.state import LocationSelected, QueryChanged, SessionStore, SuggestionsCleared
from ..models.location import LocationSuggestion
from .address import format_address
from .geocoding import GeocodingService
from .weather import WeatherService

MIN_QUERY_LENGTH = 3


class SearchPhase(str, Enum):
    IDLE = "idle"
    QUERYING = "querying"
    SUGGESTING = "suggesting"
    COMMITTED = "committed"


class SearchController:
    """Drives the search box.

    Every keystroke with at least ``MIN_QUERY_LENGTH`` characters searches the
    full query; there is no debounce timer. Shorter queries clear the suggestions
    without touching the network. Late answers to superseded searches are
    dropped by the session store.
    """

    def __init__(self, store: SessionStore, geocoding: GeocodingService, weather: WeatherService):
        self._store = store
        self._geocoding = geocoding
        self._weather = weather
        self._commits = 0

    @property
    def phase(self) -> SearchPhase:
        state = self._store.state
        if self._commits:
            return SearchPhase.COMMITTED
        if state.suggestions:
            return SearchPhase.SUGGESTING
        if state.searching:
            return SearchPhase.QUERYING
        return SearchPhase.IDLE

    async def on_query_changed(self, query: str) -> None:
        """Handle the search box's new content."""
        self._store.dispatch(QueryChanged(query=query))
        if len(query) >= MIN_QUERY_LENGTH:
            await self._geocoding.search_locations(query)
        else:
            self._store.dispatch(SuggestionsCleared())

    async def select(self, suggestion: LocationSuggestion) -> None:
        """Commit a suggestion as the active location and load its weather.

        Raises:
            ValueError: If the suggestion's coordinates are not numeric; the
                session is left unchanged in that case
        """
        coordinates = suggestion.to_coordinates()
        address = format_address(suggestion)
        logger.info("Location selected", address=address)

        # Counted, since selections can overlap while their weather loads
        self._commits += 1
        try:
            self._store.dispatch(LocationSelected(coordinates=coordinates, address=address))
            await self._weather.fetch_weather(coordinates.latitude, coordinates.longitude)
        finally:
            self._commits -= 1
