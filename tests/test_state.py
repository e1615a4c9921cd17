"""Tests for the session reducer."""

import pytest

from src.local_weather_api.core.state import (
    RESOLVE,
    SEARCH,
    WEATHER,
    AddressResolved,
    Event,
    LocationAcquired,
    LocationFailed,
    LocationSelected,
    QueryChanged,
    ResolveFinished,
    ResolveStarted,
    SearchFailed,
    SearchRequested,
    SessionState,
    SessionStore,
    SuggestionsCleared,
    SuggestionsLoaded,
    WeatherFailed,
    WeatherLoaded,
    WeatherRequested,
    reduce,
)
from src.local_weather_api.models.location import Coordinates, LocationSuggestion
from src.local_weather_api.models.weather import CurrentConditions, WeatherSnapshot

BERLIN = Coordinates(latitude=52.52, longitude=13.41)
PARIS = Coordinates(latitude=48.8566, longitude=2.3522)


def snapshot(temp: float = 1.0) -> WeatherSnapshot:
    return WeatherSnapshot(current=CurrentConditions(temperature=temp, timestamp=0))


def suggestion(name: str = "Berlin") -> LocationSuggestion:
    return LocationSuggestion(name=name, latitude="52.52", longitude="13.41")


class TestResolveEvents:
    """Location resolution transitions."""

    def test_start_sets_loading_and_clears_error(self):
        state = SessionState(error="old failure")

        state = reduce(state, ResolveStarted(token=1))

        assert state.loading is True
        assert state.error is None
        assert state.is_current(RESOLVE, 1)

    def test_acquired_sets_coordinates_and_resets_address(self):
        state = SessionState(coordinates=PARIS, address="Paris, France")
        state = reduce(state, ResolveStarted(token=1))

        state = reduce(state, LocationAcquired(token=1, coordinates=BERLIN))

        assert state.coordinates == BERLIN
        assert state.address == ""

    def test_failure(self):
        state = reduce(SessionState(), ResolveStarted(token=1))

        state = reduce(state, LocationFailed(token=1, message="nope"))

        assert state.error == "nope"
        assert state.loading is False
        assert state.coordinates is None
        assert state.weather is None

    def test_finished_clears_loading(self):
        state = reduce(SessionState(), ResolveStarted(token=1))
        assert reduce(state, ResolveFinished(token=1)).loading is False

    def test_session_starts_loading(self):
        assert SessionState().loading is True

    def test_new_attempt_supersedes_pending_weather(self):
        state = reduce(SessionState(), ResolveStarted(token=1))
        state = reduce(state, WeatherRequested(token=1))
        state = reduce(state, ResolveStarted(token=2))
        state = reduce(state, LocationFailed(token=2, message="denied"))

        assert reduce(state, WeatherLoaded(token=1, snapshot=snapshot())) is state
        assert state.is_current(WEATHER, 2)

    def test_superseded_attempt_is_ignored(self):
        state = reduce(SessionState(), ResolveStarted(token=1))
        state = reduce(state, ResolveStarted(token=2))

        assert reduce(state, LocationAcquired(token=1, coordinates=BERLIN)) is state
        assert reduce(state, LocationFailed(token=1, message="late")) is state
        assert reduce(state, ResolveFinished(token=1)) is state


class TestWeatherEvents:
    """Weather fetch transitions."""

    def test_loaded_sets_snapshot_and_clears_error(self):
        state = reduce(SessionState(error="old"), WeatherRequested(token=1))

        state = reduce(state, WeatherLoaded(token=1, snapshot=snapshot()))

        assert state.weather == snapshot()
        assert state.error is None

    def test_failure_keeps_previous_snapshot(self):
        state = reduce(SessionState(), WeatherRequested(token=1))
        state = reduce(state, WeatherLoaded(token=1, snapshot=snapshot(5.0)))
        state = reduce(state, WeatherRequested(token=2))

        state = reduce(state, WeatherFailed(token=2, message="failed"))

        assert state.weather == snapshot(5.0)
        assert state.error == "failed"

    def test_failure_does_not_touch_loading(self):
        state = reduce(SessionState(loading=True), WeatherRequested(token=1))
        assert reduce(state, WeatherFailed(token=1, message="failed")).loading is True

    def test_stale_response_dropped(self):
        state = reduce(SessionState(), WeatherRequested(token=1))
        state = reduce(state, WeatherRequested(token=2))
        state = reduce(state, WeatherLoaded(token=2, snapshot=snapshot(2.0)))

        state = reduce(state, WeatherLoaded(token=1, snapshot=snapshot(1.0)))

        assert state.weather == snapshot(2.0)


class TestAddressEvents:
    """Address lookups only apply to the coordinates they were made for."""

    def test_applies_to_matching_coordinates(self):
        state = SessionState(coordinates=BERLIN)
        state = reduce(state, AddressResolved(coordinates=BERLIN, address="Berlin, Germany"))
        assert state.address == "Berlin, Germany"

    def test_ignored_for_other_coordinates(self):
        state = SessionState(coordinates=PARIS, address="Paris, France")
        assert reduce(state, AddressResolved(coordinates=BERLIN, address="Berlin, Germany")) is state


class TestSearchEvents:
    """Search box transitions."""

    def test_query_changed(self):
        assert reduce(SessionState(), QueryChanged(query="Ber")).search_query == "Ber"

    def test_suggestions_loaded(self):
        state = reduce(SessionState(), SearchRequested(token=1))
        assert state.searching is True

        state = reduce(state, SuggestionsLoaded(token=1, suggestions=[suggestion()]))

        assert state.suggestions == [suggestion()]
        assert state.searching is False

    def test_empty_result_replaces_suggestions(self):
        state = SessionState(suggestions=[suggestion()], generations={SEARCH: 1})
        state = reduce(state, SearchRequested(token=2))

        state = reduce(state, SuggestionsLoaded(token=2, suggestions=[]))

        assert state.suggestions == []

    def test_search_failed(self):
        state = SessionState(suggestions=[suggestion()])
        state = reduce(state, SearchRequested(token=1))

        state = reduce(state, SearchFailed(token=1, message="search failed"))

        assert state.error == "search failed"
        assert state.suggestions == []

    def test_out_of_order_results_dropped(self):
        state = reduce(SessionState(), SearchRequested(token=1))
        state = reduce(state, SearchRequested(token=2))
        state = reduce(state, SuggestionsLoaded(token=2, suggestions=[suggestion("Berlin")]))

        state = reduce(state, SuggestionsLoaded(token=1, suggestions=[suggestion("Bern")]))

        assert state.suggestions == [suggestion("Berlin")]

    def test_clear_supersedes_pending_search(self):
        state = reduce(SessionState(), SearchRequested(token=1))
        state = reduce(state, SuggestionsCleared())

        state = reduce(state, SuggestionsLoaded(token=1, suggestions=[suggestion()]))

        assert state.suggestions == []
        assert state.searching is False


class TestLocationSelected:
    """Committing a suggestion."""

    def test_selection(self):
        state = SessionState(
            search_query="Berl",
            suggestions=[suggestion()],
            coordinates=PARIS,
            address="Paris, France",
        )

        state = reduce(state, LocationSelected(coordinates=BERLIN, address="Berlin, Germany"))

        assert state.coordinates == BERLIN
        assert state.address == "Berlin, Germany"
        assert state.search_query == "Berlin, Germany"
        assert state.suggestions == []

    def test_selection_supersedes_search_and_resolution(self):
        state = reduce(SessionState(), ResolveStarted(token=1))
        state = reduce(state, SearchRequested(token=1))

        state = reduce(state, LocationSelected(coordinates=BERLIN, address="Berlin"))

        assert state.loading is False
        assert reduce(state, SuggestionsLoaded(token=1, suggestions=[suggestion()])) is state
        assert reduce(state, LocationAcquired(token=1, coordinates=PARIS)) is state


class TestReducer:
    def test_unknown_event(self):
        class Unknown(Event):
            pass

        with pytest.raises(TypeError, match="Unknown session event"):
            reduce(SessionState(), Unknown())

    def test_generations_not_serialized(self):
        state = reduce(SessionState(), WeatherRequested(token=3))
        assert state.generations == {WEATHER: 3}
        assert "generations" not in state.model_dump()


class TestSessionStore:
    def test_dispatch_replaces_state(self):
        store = SessionStore()
        first = store.state

        store.dispatch(QueryChanged(query="Ber"))

        assert store.state is not first
        assert store.state.search_query == "Ber"

    def test_next_token_increments_after_request(self):
        store = SessionStore()
        assert store.next_token(SEARCH) == 1
        store.dispatch(SearchRequested(token=1))
        assert store.next_token(SEARCH) == 2
        assert store.next_token(WEATHER) == 1
