"""Main FastAPI application."""

import asyncio
import contextlib
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .api import health, session
from .core.config import settings
from .core.logging import setup_logging
from .services.session import WeatherSession


def setup_metrics():
    """Configure OpenTelemetry metrics with Prometheus exporter.

    Metrics are exposed at /metrics endpoint compatible with Prometheus scraping.
    """
    reader = PrometheusMetricReader()

    resource = Resource.create(
        {
            "service.name": "local-weather-api",
            "service.version": "0.1.0",
        }
    )

    provider = MeterProvider(
        resource=resource,
        metric_readers=[reader],
    )

    metrics.set_meter_provider(provider)

    logger.info("OpenTelemetry metrics configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    - Startup: create the session and start resolving the device location
    - Shutdown: stop a resolution that is still running

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting Local Weather API")

    # Log active configuration (without sensitive values)
    logger.info(
        "Configuration loaded",
        weather_base_url=settings.WEATHER_BASE_URL,
        position_base_url=settings.POSITION_BASE_URL,
        geolocation_provider=settings.GEOLOCATION_PROVIDER,
        geolocation_timeout=settings.GEOLOCATION_TIMEOUT,
        upstream_timeout=settings.UPSTREAM_TIMEOUT,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
        # Do NOT log API keys
    )

    app.state.session = WeatherSession()
    resolution = asyncio.create_task(app.state.session.resolve())
    logger.info("Session created, resolving location")

    yield

    logger.info("Shutting down Local Weather API")
    if not resolution.done():
        resolution.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await resolution
    app.state.session = None


# Set up logging first
setup_logging()

# Set up metrics
setup_metrics()

app = FastAPI(
    title="Local Weather API",
    description="Resolves the user's location and serves current, hourly and daily weather for it",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.LOG_LEVEL == "DEBUG" else None,  # Swagger UI only in debug mode
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(session.router, tags=["Session"])


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus metrics endpoint (open to everyone, no authentication)."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and return a generic response without internal details."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


FastAPIInstrumentor.instrument_app(app)

logger.info("FastAPI application created")
