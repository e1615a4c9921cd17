"""Application entry point."""

import uvicorn

from src.local_weather_api.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "src.local_weather_api.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,  # One process holds the one session
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
