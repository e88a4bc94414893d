"""
datamgr Runtime Layer.

Turns the schema document into the compiled route table served for the
lifetime of the process.

Components:
    - SchemaCompiler / compile_schema: document bytes -> Schema
    - FileSchemaLoader / load_schema: reads datamgr.yaml and compiles it

Usage:
    # At application startup
    schema = load_schema("datamgr.yaml")
"""

from .compiler import SchemaCompiler, compile_schema
from .loaders import DATAMGR_FILE, FileSchemaLoader, load_schema

__all__ = [
    "DATAMGR_FILE",
    "FileSchemaLoader",
    "SchemaCompiler",
    "compile_schema",
    "load_schema",
]
