"""
datamgr - Schema-driven form ingestion service

FastAPI application entry point.

Serve with the CLI (``datamgr --listen :8080``) or any ASGI server:

    uvicorn --factory datamgr.app.main:create_app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from datamgr import __version__
from datamgr.app.api import receive_router
from datamgr.app.dependencies import create_dispatcher, get_settings
from datamgr.config.schemas import AppSettings
from datamgr.runtime import load_schema
from datamgr.schemas import Schema

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(
    schema: Schema | None = None,
    settings: AppSettings | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        schema: Compiled schema (loaded from settings.schema_file if omitted)
        settings: Settings (read from the environment if omitted)

    Raises:
        SchemaLoadError: If the schema file cannot be read
        SchemaError: If the schema does not compile
    """
    if settings is None:
        settings = get_settings()
    if schema is None:
        schema = load_schema(settings.schema_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Shutdown is reached after the server stops accepting connections
        and in-flight requests have completed.
        """
        logger.info(f"Starting datamgr, serving {len(schema)} route(s): {schema.paths}")
        yield
        logger.info("Shutting down datamgr...")

    # Docs and OpenAPI routes are disabled: every path belongs to the schema
    app = FastAPI(
        title="datamgr",
        description="Schema-driven form ingestion service",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.dispatcher = create_dispatcher(schema, settings)
    app.include_router(receive_router)

    return app
