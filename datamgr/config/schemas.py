"""
Configuration Schemas for datamgr.

Pydantic model for process-wide settings. Values come from environment
variables (see datamgr.app.dependencies.get_settings) and command-line
flags.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from datamgr.pipeline.materializer import DEFAULT_DIR_MODE, DirectoryMode
from datamgr.runtime.loaders import DATAMGR_FILE

DEFAULT_MAX_FORM_MEMORY = 32 << 20  # 32 MB


def parse_listen(listen: str) -> tuple[str, int]:
    """
    Split a listen address into host and port.

    ":8080" listens on all interfaces.

    Raises:
        ValueError: If the address has no valid port
    """
    host, sep, port = listen.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {listen!r}, expected [host]:port")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


class AppSettings(BaseModel):
    """
    Application settings model.

    Used for type-safe settings access.
    """

    # Service identity
    service_name: str = "datamgr"
    environment: str = "development"
    debug: bool = False

    # HTTP listener
    listen: str = Field(default=":8080", description="Listen address, [host]:port")
    max_form_memory: int = Field(
        default=DEFAULT_MAX_FORM_MEMORY,
        ge=1,
        description="Largest form part buffered per request, in bytes",
    )

    # Schema
    schema_file: str = Field(default=DATAMGR_FILE, description="Schema document path")

    # Output files
    data_dir: str = Field(default=".", description="Base directory for relative output paths")
    dir_mode: int = Field(default=DEFAULT_DIR_MODE, ge=0, le=0o7777)
    directory_mode: DirectoryMode = DirectoryMode.PARENT

    # Logging
    log_level: str = "INFO"

    @field_validator("listen")
    @classmethod
    def _valid_listen(cls, value: str) -> str:
        parse_listen(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def host(self) -> str:
        return parse_listen(self.listen)[0]

    @property
    def port(self) -> int:
        return parse_listen(self.listen)[1]
