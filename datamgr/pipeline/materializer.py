"""
File Materializer.

Writes a resolved record to the path rendered from its route's template.

Directory handling:
    DirectoryMode.PARENT (default) creates the directory that contains
    the rendered path, so ``out/alice.yaml`` lands in ``out/``.

    DirectoryMode.BASENAME reproduces the historical behavior of creating
    a directory named after the path's last element: ``out/alice.yaml``
    creates a directory ``alice.yaml`` and then fails to create the file
    unless ``out/`` already exists. Kept only for deployments that relied
    on it.

No locking is done: two requests rendering the same path race, and the
last writer wins.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Callable, TextIO

import yaml

from datamgr.errors import EncodingError, FileSystemError
from datamgr.schemas.compiled import FileFormat

from .values import Record

logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755


class DirectoryMode(str, Enum):
    """Which directory is created before writing a record."""

    PARENT = "parent"
    BASENAME = "basename"


def _encode_yaml(data: dict[str, Any], stream: TextIO) -> None:
    yaml.safe_dump(
        data,
        stream,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )


ENCODERS: dict[FileFormat, Callable[[dict[str, Any], TextIO], None]] = {
    FileFormat.YAML: _encode_yaml,
}


def _make_dirs(directory: Path, mode: int) -> None:
    """
    Create a directory and any missing parents, all with ``mode``.

    Raises:
        OSError: If a directory cannot be created
        ValueError: If the path contains a NUL byte
    """
    missing = []
    parent = directory.parent
    while parent != parent.parent and not parent.exists():
        missing.append(parent)
        parent = parent.parent
    for path in reversed(missing):
        path.mkdir(mode=mode, exist_ok=True)
    directory.mkdir(mode=mode, exist_ok=True)


class FileMaterializer:
    """
    Persists records as files.

    Example:
        materializer = FileMaterializer(base_dir="/srv/data")
        path = materializer.materialize("out/alice.yaml", record, FileFormat.YAML)
    """

    def __init__(
        self,
        base_dir: str | Path = ".",
        *,
        dir_mode: int = DEFAULT_DIR_MODE,
        directory_mode: DirectoryMode = DirectoryMode.PARENT,
    ):
        """
        Initialize materializer.

        Args:
            base_dir: Directory relative rendered paths are resolved against
            dir_mode: Permission bits for created directories
            directory_mode: Which directory to create before writing
        """
        self._base_dir = Path(base_dir)
        self._dir_mode = dir_mode
        self._directory_mode = directory_mode

    @property
    def directory_mode(self) -> DirectoryMode:
        return self._directory_mode

    def target_path(self, rendered: str) -> Path:
        """Where a rendered path is written."""
        return self._base_dir / rendered

    def target_directory(self, rendered: str) -> Path:
        """Which directory is created for a rendered path."""
        if self._directory_mode is DirectoryMode.BASENAME:
            return self._base_dir / PurePosixPath(rendered).name
        return self.target_path(rendered).parent

    def materialize(self, rendered: str, record: Record, fmt: FileFormat) -> Path:
        """
        Write a record to disk.

        Args:
            rendered: Path rendered from the route's template
            record: Record to encode
            fmt: Serialization format

        Returns:
            Path of the written file

        Raises:
            FileSystemError: If the directory or file cannot be created
            EncodingError: If the record cannot be encoded
        """
        path = self.target_path(rendered)
        directory = self.target_directory(rendered)
        encoder = ENCODERS[fmt]

        logger.debug(f"Create file {path}")

        try:
            _make_dirs(directory, self._dir_mode)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to create directory {directory}, {e}")
            raise FileSystemError(
                f"Failed to create directory {directory}: {e}", str(directory)
            ) from e

        try:
            stream = path.open("w", encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to create file {path}, {e}")
            raise FileSystemError(f"Failed to create file {path}: {e}", str(path)) from e

        try:
            with stream:
                encoder(record.to_dict(), stream)
        except (yaml.YAMLError, OSError) as e:
            logger.error(f"Failed to encode file {path}, {e}")
            raise EncodingError(f"Failed to encode file {path}: {e}", str(path)) from e

        return path
