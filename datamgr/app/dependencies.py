"""
Dependency Injection for datamgr.

Provides the process-wide settings, schema and dispatcher.

The schema is compiled once at startup and never reloaded; every request
reads the same immutable route table.
"""
from __future__ import annotations

import logging
import os
from functools import lru_cache

from fastapi import Request

from datamgr.config.schemas import DEFAULT_MAX_FORM_MEMORY, AppSettings
from datamgr.pipeline import FileMaterializer, IngestPipeline
from datamgr.pipeline.materializer import DEFAULT_DIR_MODE, DirectoryMode
from datamgr.runtime import DATAMGR_FILE
from datamgr.schemas import Schema

from .dispatcher import RouteDispatcher

logger = logging.getLogger(__name__)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings from environment.

    Uses lru_cache for singleton pattern.
    """
    return AppSettings(
        # Service
        service_name=os.getenv("DATAMGR_SERVICE_NAME", "datamgr"),
        environment=os.getenv("DATAMGR_ENVIRONMENT", "development"),
        debug=os.getenv("DATAMGR_DEBUG", "false").lower() == "true",
        # HTTP listener
        listen=os.getenv("DATAMGR_LISTEN", ":8080"),
        max_form_memory=int(os.getenv("DATAMGR_MAX_FORM_MEMORY", str(DEFAULT_MAX_FORM_MEMORY))),
        # Schema
        schema_file=os.getenv("DATAMGR_SCHEMA_FILE", DATAMGR_FILE),
        # Output files
        data_dir=os.getenv("DATAMGR_DATA_DIR", "."),
        dir_mode=int(os.getenv("DATAMGR_DIR_MODE", oct(DEFAULT_DIR_MODE)[2:]), 8),
        directory_mode=DirectoryMode(
            os.getenv("DATAMGR_DIRECTORY_MODE", DirectoryMode.PARENT.value)
        ),
        # Logging
        log_level=os.getenv("DATAMGR_LOG_LEVEL", "INFO"),
    )


def create_dispatcher(schema: Schema, settings: AppSettings) -> RouteDispatcher:
    """Build the dispatcher serving a compiled schema."""
    materializer = FileMaterializer(
        base_dir=settings.data_dir,
        dir_mode=settings.dir_mode,
        directory_mode=settings.directory_mode,
    )
    logger.info(
        f"Writing records under {settings.data_dir!r} "
        f"(directory_mode={settings.directory_mode.value})"
    )
    return RouteDispatcher(
        schema,
        IngestPipeline(materializer),
        max_form_memory=settings.max_form_memory,
    )


def get_dispatcher(request: Request) -> RouteDispatcher:
    """FastAPI dependency returning the application's dispatcher."""
    return request.app.state.dispatcher
