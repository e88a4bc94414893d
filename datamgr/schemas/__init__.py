"""
Schema types.

Raw document models (as read from datamgr.yaml) and the compiled,
type-checked representation served at runtime.
"""

from .compiled import (
    DEFAULT_TIMESTAMP_FORMAT,
    RFC3339_FORMAT,
    FieldSpec,
    FieldType,
    FileFormat,
    FileSpec,
    GenerateStrategy,
    Route,
    Schema,
)
from .document import (
    CreateFileDocument,
    DatamgrDocument,
    FieldDocument,
    ReceiveDocument,
)

__all__ = [
    "DEFAULT_TIMESTAMP_FORMAT",
    "RFC3339_FORMAT",
    "CreateFileDocument",
    "DatamgrDocument",
    "FieldDocument",
    "FieldSpec",
    "FieldType",
    "FileFormat",
    "FileSpec",
    "GenerateStrategy",
    "ReceiveDocument",
    "Route",
    "Schema",
]
