"""
Schema Compiler.

Turns the raw schema document into the compiled, read-only Schema that
requests are served from.

Design Principle:
    Report everything at once.
    Every defect in the document (bad YAML shape, unknown type, unknown
    generation strategy, invalid template, unknown file format) is
    collected, and a single SchemaError carrying all of them is raised.
    Nothing is returned unless the document is entirely valid.

Usage:
    schema = compile_schema(Path("datamgr.yaml").read_bytes())
    route = schema.get("/signup")
"""

from __future__ import annotations

import logging
from typing import Any

import yaml
from jinja2 import TemplateSyntaxError
from pydantic import BaseModel, ValidationError

from datamgr.errors import SchemaError
from datamgr.pipeline.templating import compile_template
from datamgr.pipeline.values import FieldValue
from datamgr.schemas.compiled import (
    DEFAULT_TIMESTAMP_FORMAT,
    FieldSpec,
    FieldType,
    FileFormat,
    FileSpec,
    GenerateStrategy,
    Route,
    Schema,
)
from datamgr.schemas.document import (
    CreateFileDocument,
    DatamgrDocument,
    FieldDocument,
    ReceiveDocument,
)

logger = logging.getLogger(__name__)

_FIELD_TYPES = {
    "": FieldType.STRING,
    "string": FieldType.STRING,
    "bool": FieldType.BOOL,
}

_GENERATE_STRATEGIES = {
    "": GenerateStrategy.NONE,
    "timestamp": GenerateStrategy.TIMESTAMP,
}

_FILE_FORMATS = {
    "": FileFormat.YAML,
    "yaml": FileFormat.YAML,
}


def _format_loc(prefix: str, loc: tuple[Any, ...]) -> str:
    parts = [prefix] if prefix else []
    parts.extend(str(p) for p in loc)
    return ".".join(parts) or "document"


class SchemaCompiler:
    """
    Compiles one schema document.

    A compiler instance accumulates errors while walking the document,
    so use a fresh instance per document (compile_schema does this).
    """

    def __init__(self) -> None:
        self.errors: list[str] = []

    def compile(self, data: bytes | str) -> Schema:
        """
        Compile raw schema bytes.

        Raises:
            SchemaError: With one entry per defect found
        """
        try:
            raw = yaml.safe_load(data)
        except yaml.YAMLError as e:
            raise SchemaError([f"invalid YAML document: {e}"]) from e

        document = self._validate(DatamgrDocument, raw if raw is not None else {}, "")
        routes: dict[str, Route] = {}

        if document is not None:
            for path, raw_route in document.receive.items():
                route = self._compile_route(path, raw_route)
                if route is not None:
                    routes[path] = route

        if self.errors:
            raise SchemaError(self.errors)

        logger.info(f"Compiled schema with {len(routes)} route(s): {list(routes)}")
        return Schema(routes=routes)

    def _error(self, message: str) -> None:
        self.errors.append(message)

    def _validate(self, model: type[BaseModel], raw: Any, prefix: str) -> Any:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            for err in e.errors():
                self._error(f"{_format_loc(prefix, err['loc'])}: {err['msg']}")
            return None

    def _compile_route(self, path: str, raw: Any) -> Route | None:
        prefix = f"receive[{path}]"
        document = self._validate(ReceiveDocument, raw if raw is not None else {}, prefix)
        if document is None:
            return None

        fields: dict[str, FieldSpec] = {}
        for name, raw_field in document.fields.items():
            spec = self._compile_field(prefix, name, raw_field)
            if spec is not None:
                fields[name] = spec

        file_spec = None
        if document.create_file is not None:
            file_spec = self._compile_file(prefix, document.create_file)

        return Route(path=path, fields=fields, file=file_spec)

    def _compile_field(self, route_prefix: str, name: str, raw: Any) -> FieldSpec | None:
        prefix = f"{route_prefix}.fields.{name}"
        document: FieldDocument | None = self._validate(FieldDocument, raw, prefix)
        if document is None:
            return None

        ok = True
        fmt = document.format

        generate = _GENERATE_STRATEGIES.get(document.generate)
        if generate is None:
            self._error(f'{prefix}.generate unexpected "{document.generate}", expected "timestamp"')
            ok = False
        elif generate is GenerateStrategy.TIMESTAMP and not fmt:
            fmt = DEFAULT_TIMESTAMP_FORMAT

        field_type = _FIELD_TYPES.get(document.type)
        if field_type is None:
            self._error(
                f'{prefix}.type unexpected type "{document.type}", expected "string" or "bool"'
            )
            ok = False

        value = None
        if document.value is not None and field_type is not None:
            value = self._compile_value(prefix, field_type, document.value)
            ok = ok and value is not None

        if not ok:
            return None

        return FieldSpec(
            name=name,
            type=field_type,
            generate=generate,
            format=fmt,
            internal=document.internal,
            required=document.required,
            value=value,
        )

    def _compile_value(self, prefix: str, field_type: FieldType, raw: Any) -> FieldValue | None:
        if field_type is FieldType.BOOL and isinstance(raw, bool):
            return FieldValue.boolean(raw)
        if field_type is FieldType.STRING and isinstance(raw, str):
            return FieldValue.string(raw)
        self._error(f"{prefix}.value unexpected value {raw!r}, expected a {field_type.value}")
        return None

    def _compile_file(self, route_prefix: str, raw: Any) -> FileSpec | None:
        prefix = f"{route_prefix}.create_file"
        document: CreateFileDocument | None = self._validate(CreateFileDocument, raw, prefix)
        if document is None:
            return None

        template = None
        if not document.name:
            self._error(f"{prefix}.name must not be empty")
        else:
            try:
                template = compile_template(document.name)
            except TemplateSyntaxError as e:
                self._error(f"{prefix}.name template error, {e}")

        file_format = _FILE_FORMATS.get(document.format)
        if file_format is None:
            self._error(f'{prefix}.format unexpected format "{document.format}", expected "yaml"')

        if template is None or file_format is None:
            return None
        return FileSpec(name=document.name, template=template, format=file_format)


def compile_schema(data: bytes | str) -> Schema:
    """
    Compile a schema document.

    Args:
        data: Raw YAML document

    Returns:
        Compiled Schema

    Raises:
        SchemaError: If the document has any defect
    """
    return SchemaCompiler().compile(data)
