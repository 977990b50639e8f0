# booking_api/main.py
"""
Application entry point.

``create_app`` wires configuration, the database handle, middleware, error
handlers and routers. ``app`` is the module-level instance uvicorn serves:

    uvicorn booking_api.main:app
"""

from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .core.config import Settings, settings as default_settings
from .core.constants import API_VERSION, APP_DESCRIPTION, APP_NAME
from .database import Database
from .errors import register_error_handlers
from .routes import auth, availability, bookings, health, services

# Configure logging
logging.basicConfig(
    level=default_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Check connectivity on startup, release the pool on shutdown."""
    database: Database = app.state.database
    logger.info(f"Starting {APP_NAME} v{API_VERSION} ({app.state.settings.environment})")
    if database.ping():
        logger.info("Database connected")
        try:
            logger.info(f"Tables: {', '.join(database.list_tables()) or '(none)'}")
        except Exception as e:
            logger.warning(f"Could not list tables: {str(e)}")
    else:
        logger.error("Database unavailable at startup")
    try:
        yield
    finally:
        database.dispose()
        logger.info(f"{APP_NAME} shut down")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=API_VERSION,
        lifespan=app_lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials="*" not in settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    prefix = settings.api_prefix
    app.include_router(health.router)
    app.include_router(auth.router, prefix=f"{prefix}/auth")
    app.include_router(services.router, prefix=f"{prefix}/services")
    app.include_router(availability.router, prefix=f"{prefix}/availability")
    app.include_router(bookings.router, prefix=f"{prefix}/bookings")

    # Static files last so they never shadow API routes
    if settings.static_dir and Path(settings.static_dir).is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info(f"Serving static files from {settings.static_dir}")

    return app


app = create_app()
