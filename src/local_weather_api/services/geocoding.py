"""Forward and reverse geocoding for the session."""

from collections.abc import Callable

from loguru import logger

from ..core.state import (
    SEARCH,
    AddressResolved,
    SearchFailed,
    SearchRequested,
    SessionStore,
    SuggestionsCleared,
    SuggestionsLoaded,
)
from ..models.location import Coordinates
from .address import format_address
from .positionstack import PositionstackClient
from .upstream import UpstreamError

LOCATION_SEARCH_FAILED = "Failed to search locations. Please try again."


class GeocodingService:
    """Runs geocoding lookups and folds their results into the session state."""

    def __init__(
        self,
        store: SessionStore,
        client_factory: Callable[[], PositionstackClient] = PositionstackClient,
    ):
        self._store = store
        self._client_factory = client_factory

    async def reverse_geocode(self, latitude: float, longitude: float) -> None:
        """Label the coordinates with the nearest address.

        Failure is silent: weather stays usable without a label, so nothing is
        reported to the user and ``address`` is left as it was.
        """
        try:
            coordinates = Coordinates(latitude=latitude, longitude=longitude)
            async with self._client_factory() as client:
                results = await client.reverse(latitude, longitude)
        except UpstreamError as e:
            logger.warning("Reverse geocoding failed", error=str(e))
            return
        except ValueError as e:
            logger.warning("Invalid coordinates for reverse geocoding", error=str(e))
            return
        except Exception:
            logger.exception("Unexpected error during reverse geocoding")
            return

        if not results:
            logger.info("No address found", latitude=latitude, longitude=longitude)
            return

        self._store.dispatch(
            AddressResolved(coordinates=coordinates, address=format_address(results[0]))
        )

    async def search_locations(self, query: str) -> None:
        """Replace the suggestions with forward-geocoding matches for ``query``.

        An empty query clears the suggestions without a request.
        """
        if not query:
            self._store.dispatch(SuggestionsCleared())
            return

        token = self._store.next_token(SEARCH)
        self._store.dispatch(SearchRequested(token=token))
        logger.debug("Searching locations", query=query)

        try:
            async with self._client_factory() as client:
                suggestions = await client.forward(query)
        except UpstreamError as e:
            logger.warning("Location search failed", error=str(e))
            self._store.dispatch(SearchFailed(token=token, message=LOCATION_SEARCH_FAILED))
            return
        except Exception:
            logger.exception("Unexpected error during location search")
            self._store.dispatch(SearchFailed(token=token, message=LOCATION_SEARCH_FAILED))
            return

        logger.debug("Location search finished", query=query, results=len(suggestions))
        self._store.dispatch(SuggestionsLoaded(token=token, suggestions=suggestions))
