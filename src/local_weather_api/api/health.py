"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model.

    Example:
        >>> HealthResponse(status="ok").status
        'ok'
    """

    status: str


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application process is running",
)
async def health_check() -> HealthResponse:
    """Always returns 200 OK while the process is running."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness probe",
    description="Check if the session has been created",
    responses={503: {"model": HealthResponse, "description": "Session not created yet"}},
)
async def readiness_check(request: Request):
    """Ready once the lifespan has created the session.

    Does NOT probe the weather or geocoding providers: the session reports
    provider failures through its own error state.
    """
    if getattr(request.app.state, "session", None) is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    return HealthResponse(status="ok")
