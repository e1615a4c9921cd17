"""Session endpoints consumed by the presentation layer."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from pydantic import BaseModel, Field

from ..core.state import SessionState
from ..models.location import LocationSuggestion
from ..services.session import WeatherSession

router = APIRouter(prefix="/v1/session")


class QueryUpdate(BaseModel):
    """New content of the search box."""

    query: str = Field(default="", max_length=256)


def get_session(request: Request) -> WeatherSession:
    """Return the session created by the application lifespan.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=503,
            detail={"error": "Session not ready"},
        )
    return session


SessionDep = Annotated[WeatherSession, Depends(get_session)]


@router.get("", response_model=SessionState, summary="Current session state")
async def read_session(session: SessionDep) -> SessionState:
    return session.state


@router.post(
    "/resolve",
    response_model=SessionState,
    summary="Resolve the device location",
    description="Re-run device geolocation and reload weather and address. Used for 'Try again'.",
)
async def resolve_location(session: SessionDep) -> SessionState:
    await session.resolve()
    return session.state


@router.put(
    "/query",
    response_model=SessionState,
    summary="Update the search query",
    description="Searches for locations once the query is longer than two characters.",
)
async def update_query(body: QueryUpdate, session: SessionDep) -> SessionState:
    await session.update_query(body.query)
    return session.state


@router.post(
    "/select",
    response_model=SessionState,
    summary="Select a suggested location",
)
async def select_location(suggestion: LocationSuggestion, session: SessionDep) -> SessionState:
    """Commit a suggestion and load weather for it.

    Returns 422 if the suggestion's coordinates cannot be parsed.
    """
    try:
        await session.select(suggestion)
    except ValueError as e:
        logger.warning("Rejected suggestion with invalid coordinates", error=str(e))
        raise HTTPException(
            status_code=422,
            detail={"error": "Suggestion coordinates must be numeric latitude and longitude"},
        ) from e
    return session.state
