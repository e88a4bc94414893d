"""
Schema Loaders.

Read the schema document from storage and hand it to the compiler.

Usage:
    loader = FileSchemaLoader("datamgr.yaml")
    schema = loader.load()
"""

from __future__ import annotations

import logging
from pathlib import Path

from datamgr.errors import SchemaLoadError
from datamgr.schemas.compiled import Schema

from .compiler import compile_schema

logger = logging.getLogger(__name__)

DATAMGR_FILE = "datamgr.yaml"


class FileSchemaLoader:
    """
    Loads the schema from a YAML file.

    Relative paths are resolved against the working directory at load
    time, so the default picks up ``./datamgr.yaml``.
    """

    def __init__(self, path: str | Path = DATAMGR_FILE):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> bytes:
        """
        Read the raw document.

        Raises:
            SchemaLoadError: If the file is missing or unreadable
        """
        try:
            return self._path.read_bytes()
        except OSError as e:
            raise SchemaLoadError(str(self._path), e.strerror or str(e)) from e

    def load(self) -> Schema:
        """
        Read and compile the schema.

        Raises:
            SchemaLoadError: If the file cannot be read
            SchemaError: If the document does not compile
        """
        data = self.read()
        logger.info(f"Loading schema from {self._path}")
        return compile_schema(data)


def load_schema(path: str | Path = DATAMGR_FILE) -> Schema:
    """Read and compile a schema file."""
    return FileSchemaLoader(path).load()
