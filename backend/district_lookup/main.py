"""FastAPI application entrypoint and configuration.

This module provides the main FastAPI application factory that configures
logging, sets up the CORS allow-list, includes the lookup and layer API
routers, and exposes a health check endpoint for monitoring.

Example:
    The application can be run with uvicorn:
        $ uvicorn district_lookup.main:app --reload

    Or imported and used programmatically:
        >>> from district_lookup.main import app
        >>> # Use app in ASGI server
"""

import fastapi
from fastapi.middleware import cors

from district_lookup.api import layers, lookup
from district_lookup.core import config
from district_lookup.core import logging as app_logging


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application.

    Configures the root logger, includes the lookup and layers routers, and
    adds a health check endpoint. CORS origins are configured from settings,
    so browser clients are limited to the allow-listed domains.

    Returns:
        Configured FastAPI application instance ready for ASGI server.
    """
    settings = config.get_settings()
    app_logging.setup_logging(settings.log_level, settings.log_json)

    app = fastapi.FastAPI(title="District Lookup", version="0.1.0")

    app.include_router(lookup.router)
    app.include_router(layers.router)

    app.add_middleware(
        cors.CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.allow_origins,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # type: ignore[misc]
        """Health check endpoint for monitoring and load balancers.

        Returns:
            Dictionary with status "ok" if the service is running.
        """
        return {"status": "ok"}

    return app


app = create_app()
