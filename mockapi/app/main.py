"""
Main entrypoint for the Mockapi HTTP API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn mockapi.app.main:app --reload
"""

from fastapi import FastAPI

from .api.errors import register_error_handlers
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The service
        factory itself is built lazily on the first request.
    """
    # Logging first so that router imports can log.
    setup_logging(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
