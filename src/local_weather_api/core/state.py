"""Session state container.

The session is a single immutable ``SessionState`` value. Components never
mutate it in place: they dispatch events to a ``SessionStore`` and the store
swaps in ``reduce(state, event)``. ``reduce`` is pure, so every transition can
be tested without a running server or network.

Responses to superseded requests are dropped. Each request-issuing event
records a token for its operation class (resolve, weather, search); a result
event whose token is no longer the latest one for its class leaves the state
unchanged.
"""

from collections.abc import Callable
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..models.location import Coordinates, LocationSuggestion
from ..models.weather import WeatherSnapshot

Operation = Literal["resolve", "weather", "search"]

RESOLVE: Operation = "resolve"
WEATHER: Operation = "weather"
SEARCH: Operation = "search"


class SessionState(BaseModel):
    """Everything the presentation layer reads for the current session."""

    model_config = ConfigDict(frozen=True)

    search_query: str = ""
    coordinates: Coordinates | None = None
    weather: WeatherSnapshot | None = None
    address: str = ""
    suggestions: list[LocationSuggestion] = Field(default_factory=list)
    loading: bool = True
    searching: bool = False
    error: str | None = None
    generations: dict[str, int] = Field(default_factory=dict, exclude=True)

    def is_current(self, operation: Operation, token: int) -> bool:
        return self.generations.get(operation, 0) == token

    def next_token(self, operation: Operation) -> int:
        return self.generations.get(operation, 0) + 1


# Events


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class ResolveStarted(Event):
    token: int


class LocationAcquired(Event):
    token: int
    coordinates: Coordinates


class LocationFailed(Event):
    token: int
    message: str


class ResolveFinished(Event):
    token: int


class WeatherRequested(Event):
    token: int


class WeatherLoaded(Event):
    token: int
    snapshot: WeatherSnapshot


class WeatherFailed(Event):
    token: int
    message: str


class AddressResolved(Event):
    coordinates: Coordinates
    address: str


class QueryChanged(Event):
    query: str


class SearchRequested(Event):
    token: int


class SuggestionsLoaded(Event):
    token: int
    suggestions: list[LocationSuggestion]


class SearchFailed(Event):
    token: int
    message: str


class SuggestionsCleared(Event):
    pass


class LocationSelected(Event):
    coordinates: Coordinates
    address: str


# Reducer


def _bump(state: SessionState, *operations: Operation) -> dict[str, int]:
    generations = dict(state.generations)
    for operation in operations:
        generations[operation] = state.next_token(operation)
    return generations


def _record(state: SessionState, operation: Operation, token: int) -> dict[str, int]:
    return {**state.generations, operation: token}


def _resolve_started(state: SessionState, event: ResolveStarted) -> SessionState:
    # A new cycle also supersedes weather still loading for the previous one
    generations = _bump(state, WEATHER)
    generations[RESOLVE] = event.token
    return state.model_copy(
        update={
            "loading": True,
            "error": None,
            "generations": generations,
        }
    )


def _location_acquired(state: SessionState, event: LocationAcquired) -> SessionState:
    if not state.is_current(RESOLVE, event.token):
        return state
    # The old label no longer describes the new position
    return state.model_copy(update={"coordinates": event.coordinates, "address": ""})


def _location_failed(state: SessionState, event: LocationFailed) -> SessionState:
    if not state.is_current(RESOLVE, event.token):
        return state
    return state.model_copy(update={"error": event.message, "loading": False})


def _resolve_finished(state: SessionState, event: ResolveFinished) -> SessionState:
    if not state.is_current(RESOLVE, event.token):
        return state
    return state.model_copy(update={"loading": False})


def _weather_requested(state: SessionState, event: WeatherRequested) -> SessionState:
    return state.model_copy(update={"generations": _record(state, WEATHER, event.token)})


def _weather_loaded(state: SessionState, event: WeatherLoaded) -> SessionState:
    if not state.is_current(WEATHER, event.token):
        return state
    return state.model_copy(update={"weather": event.snapshot, "error": None})


def _weather_failed(state: SessionState, event: WeatherFailed) -> SessionState:
    if not state.is_current(WEATHER, event.token):
        return state
    return state.model_copy(update={"error": event.message})


def _address_resolved(state: SessionState, event: AddressResolved) -> SessionState:
    if state.coordinates != event.coordinates:
        return state
    return state.model_copy(update={"address": event.address})


def _query_changed(state: SessionState, event: QueryChanged) -> SessionState:
    return state.model_copy(update={"search_query": event.query})


def _search_requested(state: SessionState, event: SearchRequested) -> SessionState:
    return state.model_copy(
        update={"searching": True, "generations": _record(state, SEARCH, event.token)}
    )


def _suggestions_loaded(state: SessionState, event: SuggestionsLoaded) -> SessionState:
    if not state.is_current(SEARCH, event.token):
        return state
    return state.model_copy(update={"suggestions": list(event.suggestions), "searching": False})


def _search_failed(state: SessionState, event: SearchFailed) -> SessionState:
    if not state.is_current(SEARCH, event.token):
        return state
    return state.model_copy(
        update={"error": event.message, "suggestions": [], "searching": False}
    )


def _suggestions_cleared(state: SessionState, event: SuggestionsCleared) -> SessionState:
    return state.model_copy(
        update={"suggestions": [], "searching": False, "generations": _bump(state, SEARCH)}
    )


def _location_selected(state: SessionState, event: LocationSelected) -> SessionState:
    # A manual pick supersedes any pending search and device lookup
    return state.model_copy(
        update={
            "coordinates": event.coordinates,
            "address": event.address,
            "search_query": event.address,
            "suggestions": [],
            "searching": False,
            "loading": False,
            "generations": _bump(state, SEARCH, RESOLVE),
        }
    )


_HANDLERS: dict[type[Event], Callable[[SessionState, Event], SessionState]] = {
    ResolveStarted: _resolve_started,
    LocationAcquired: _location_acquired,
    LocationFailed: _location_failed,
    ResolveFinished: _resolve_finished,
    WeatherRequested: _weather_requested,
    WeatherLoaded: _weather_loaded,
    WeatherFailed: _weather_failed,
    AddressResolved: _address_resolved,
    QueryChanged: _query_changed,
    SearchRequested: _search_requested,
    SuggestionsLoaded: _suggestions_loaded,
    SearchFailed: _search_failed,
    SuggestionsCleared: _suggestions_cleared,
    LocationSelected: _location_selected,
}


def reduce(state: SessionState, event: Event) -> SessionState:
    """Return the state that results from applying ``event`` to ``state``.

    Raises:
        TypeError: If the event type is unknown
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown session event: {type(event).__name__}")
    return handler(state, event)


class SessionStore:
    """Holds the one ``SessionState`` of the running session.

    Example:
        >>> store = SessionStore()
        >>> store.dispatch(QueryChanged(query="Ber")).search_query
        'Ber'
    """

    def __init__(self, state: SessionState | None = None):
        self._state = state or SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def next_token(self, operation: Operation) -> int:
        """Token for the next request of ``operation``; record it with a *Requested/Started event."""
        return self._state.next_token(operation)

    def dispatch(self, event: Event) -> SessionState:
        previous = self._state
        self._state = reduce(previous, event)
        if self._state is previous:
            logger.debug("Dropped stale session event", event=type(event).__name__)
        else:
            logger.debug("Session event applied", event=type(event).__name__)
        return self._state
