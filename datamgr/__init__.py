"""
datamgr - Schema-driven form ingestion.

datamgr serves one HTTP endpoint per route declared in ``datamgr.yaml``.
Each endpoint accepts form submissions, validates and coerces the declared
fields, generates server-side values such as timestamps, and writes the
resulting record as a YAML file at a templated path.

Quick Start:
    >>> from datamgr import compile_schema, IngestPipeline
    >>>
    >>> schema = compile_schema('''
    ... receive:
    ...   /signup:
    ...     fields:
    ...       name: {required: true}
    ...       joined_at: {generate: timestamp}
    ...     create_file:
    ...       name: 'out/{{ field("name") }}.yaml'
    ... ''')
    >>> result = IngestPipeline().execute(schema.get("/signup"), {"field.name": ["alice"]})
    >>> str(result.path)
    'out/alice.yaml'
"""

__version__ = "0.1.0"
__license__ = "MIT"

from datamgr.errors import (
    DatamgrError,
    EncodingError,
    FieldError,
    FieldErrorKind,
    FileSystemError,
    RecordError,
    SchemaError,
    SchemaLoadError,
    TemplateError,
)
from datamgr.pipeline import FieldValue, IngestPipeline, Record
from datamgr.runtime import compile_schema, load_schema
from datamgr.schemas import Schema

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Schema
    "Schema",
    "compile_schema",
    "load_schema",
    # Pipeline
    "FieldValue",
    "IngestPipeline",
    "Record",
    # Errors
    "DatamgrError",
    "EncodingError",
    "FieldError",
    "FieldErrorKind",
    "FileSystemError",
    "RecordError",
    "SchemaError",
    "SchemaLoadError",
    "TemplateError",
]
