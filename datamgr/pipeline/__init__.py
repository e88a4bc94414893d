"""
datamgr Ingest Pipeline

Per-request processing of form submissions against a compiled route.

Core Components:
- FieldValue / Record: Typed values of one submission
- resolve_field: One declared field -> one value (or FieldError)
- assemble_record: All fields of a route -> Record (or RecordError)
- render_path: Path template + Record -> file path
- FileMaterializer: Record -> YAML file on disk
- IngestPipeline: Runs the stages above for one request
"""

from .assembler import assemble_record
from .context import IngestContext, IngestResult
from .executor import IngestPipeline
from .materializer import DEFAULT_DIR_MODE, DirectoryMode, FileMaterializer
from .resolver import FormValues, generate_timestamp, parse_bool, resolve_field
from .templating import FieldAccessor, compile_template, render_path
from .values import FieldValue, Record

__all__ = [
    "DEFAULT_DIR_MODE",
    "DirectoryMode",
    "FieldAccessor",
    "FieldValue",
    "FileMaterializer",
    "FormValues",
    "IngestContext",
    "IngestPipeline",
    "IngestResult",
    "Record",
    "assemble_record",
    "compile_template",
    "generate_timestamp",
    "parse_bool",
    "render_path",
    "resolve_field",
]
