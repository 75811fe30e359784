"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError as SettingsValidationError

from brands.dependencies.brain import close_language_model
from brands.presentation import router as brands_router
from iam.presentation import router as iam_router
from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import (
    get_database_settings,
    get_session_settings,
    get_settings,
)
from infrastructure.version import __version__
from shared_kernel.middleware import register_error_handlers

settings = get_settings()


@asynccontextmanager
async def brandbrain_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Required settings check (database password, session secret); a
      missing value aborts startup
    - Database engine and model client cleanup on shutdown
    """
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    try:
        get_database_settings()
        get_session_settings()
    except SettingsValidationError as e:
        probe.configuration_invalid(error=str(e))
        raise

    probe.configuration_loaded(environment=settings.environment, debug=settings.debug)

    yield

    await close_language_model()
    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title=settings.app_name,
    description="Brand onboarding: workspaces, evidence, analysis and the Brand Brain",
    version=__version__,
    lifespan=brandbrain_lifespan,
)

register_error_handlers(app, debug=settings.debug)

# IAM bounded context routes
app.include_router(iam_router)

# Brands bounded context routes
app.include_router(brands_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
